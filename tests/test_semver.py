from __future__ import annotations

import pytest

from soa_cli.semver import max_semver, newer_versions, parse_semver


def test_numeric_segments_compare_as_numbers() -> None:
    assert parse_semver("2.0.0") > parse_semver("1.9.0")
    assert parse_semver("10.0.0") > parse_semver("2.0.0")
    assert parse_semver("1.10.0") > parse_semver("1.9.9")
    assert max_semver(["2.0.0", "10.0.0", "9.9.9"]) == "10.0.0"


def test_release_outranks_prerelease() -> None:
    assert parse_semver("1.0.0") > parse_semver("1.0.0-rc.1")
    assert parse_semver("1.0.0-alpha.2") > parse_semver("1.0.0-alpha.1")
    assert parse_semver("1.0.0-alpha.beta") > parse_semver("1.0.0-alpha.1")


def test_build_metadata_is_ignored_for_ordering() -> None:
    assert parse_semver("1.2.3+build.5") == parse_semver("1.2.3")


def test_invalid_versions() -> None:
    with pytest.raises(ValueError, match="invalid semver"):
        parse_semver("1.2")
    with pytest.raises(ValueError):
        parse_semver("latest")
    assert max_semver(["garbage", "1.0"]) is None
    assert max_semver([]) is None


def test_newer_versions_sorted_descending() -> None:
    versions = ["1.0.0", "1.2.0", "1.1.0", "0.9.0", "not-a-version"]
    assert newer_versions("1.0.0", versions) == ["1.2.0", "1.1.0"]
    assert newer_versions("1.2.0", versions) == []


def test_newer_versions_skip_prereleases_for_a_stable_base() -> None:
    versions = ["1.0.0", "1.1.0-beta.1", "1.0.1-rc.1"]
    assert newer_versions("1.0.0", versions) == []
    assert newer_versions("1.0.0", [*versions, "1.1.0"]) == ["1.1.0"]


def test_newer_versions_keep_prereleases_of_the_same_release() -> None:
    versions = ["1.1.0-beta.1", "1.1.0-beta.2", "1.2.0-beta.1", "1.1.0"]
    assert newer_versions("1.1.0-beta.1", versions) == ["1.1.0", "1.1.0-beta.2"]


def test_max_semver_still_considers_prereleases() -> None:
    assert max_semver(["1.0.0", "1.1.0-beta.1"]) == "1.1.0-beta.1"
