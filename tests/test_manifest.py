from __future__ import annotations

import json
from pathlib import Path

from soa_cli.packages.manifest import entry_file, find_package_dir, format_path, read_manifest


def test_format_path_uses_forward_slashes() -> None:
    assert format_path("C:\\Users\\me\\.soa-cli\\lib\\cli.js") == "C:/Users/me/.soa-cli/lib/cli.js"
    assert format_path("/already/posix") == "/already/posix"


def test_find_package_dir_walks_upward(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{}", encoding="utf-8")
    nested = tmp_path / "lib" / "commands"
    nested.mkdir(parents=True)

    assert find_package_dir(nested) == tmp_path


def test_read_manifest_rejects_non_objects(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("[1, 2]", encoding="utf-8")
    assert read_manifest(tmp_path) is None

    (tmp_path / "package.json").write_text("{broken", encoding="utf-8")
    assert read_manifest(tmp_path) is None


def test_entry_file_normalizes_main(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(json.dumps({"main": "./bin/../lib/index.js"}), encoding="utf-8")

    assert entry_file(tmp_path) == f"{tmp_path.as_posix()}/lib/index.js"
