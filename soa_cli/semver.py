from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Iterable, Optional

_SEMVER_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)"
    r"\.(?P<minor>0|[1-9]\d*)"
    r"\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@total_ordering
@dataclass(frozen=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        prerelease = f"-{'.'.join(self.prerelease)}" if self.prerelease else ""
        build = f"+{'.'.join(self.build)}" if self.build else ""
        return f"{base}{prerelease}{build}"

    def _prerelease_key(self) -> tuple:
        # numeric identifiers sort before alphanumeric ones
        parts: list[tuple[int, int | str]] = []
        for ident in self.prerelease:
            if ident.isdigit():
                parts.append((0, int(ident)))
            else:
                parts.append((1, ident))
        return tuple(parts)

    def _key(self) -> tuple:
        # build metadata is ignored; a release outranks its prereleases
        release_flag = 1 if not self.prerelease else 0
        return (self.major, self.minor, self.patch, release_flag, self._prerelease_key())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: "SemVer") -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() < other._key()


def parse_semver(v: str) -> SemVer:
    m = _SEMVER_RE.match((v or "").strip())
    if not m:
        raise ValueError(f"invalid semver: {v!r} (expected x.y.z)")
    prerelease = m.group("prerelease")
    build = m.group("build")
    return SemVer(
        major=int(m.group("major")),
        minor=int(m.group("minor")),
        patch=int(m.group("patch")),
        prerelease=tuple(prerelease.split(".")) if prerelease else (),
        build=tuple(build.split(".")) if build else (),
    )


def _parsed(versions: Iterable[str]) -> list[tuple[SemVer, str]]:
    out: list[tuple[SemVer, str]] = []
    for s in versions:
        try:
            out.append((parse_semver(s), s))
        except ValueError:
            continue
    return out


def max_semver(versions: Iterable[str]) -> Optional[str]:
    best: Optional[SemVer] = None
    best_s: Optional[str] = None
    for parsed, s in _parsed(versions):
        if best is None or parsed > best:
            best = parsed
            best_s = s
    return best_s


def _in_newer_range(candidate: SemVer, floor: SemVer) -> bool:
    if candidate <= floor:
        return False
    if not candidate.prerelease:
        return True
    # prereleases only count against a prerelease floor of the same x.y.z
    same_release = (candidate.major, candidate.minor, candidate.patch) == (floor.major, floor.minor, floor.patch)
    return bool(floor.prerelease) and same_release


def newer_versions(base: str, versions: Iterable[str]) -> list[str]:
    """
    Versions strictly greater than ``base``, highest first.

    Prereleases are skipped unless ``base`` is itself a prerelease of the same
    x.y.z, so a stable install is never offered a beta.
    """
    floor = parse_semver(base)
    newer = [item for item in _parsed(versions) if _in_newer_range(item[0], floor)]
    newer.sort(key=lambda item: item[0], reverse=True)
    return [s for _, s in newer]
