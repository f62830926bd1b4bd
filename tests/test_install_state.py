from __future__ import annotations

import json
from pathlib import Path

from soa_cli.packages.install_state import install_lock_path, read_install_lock, write_install_lock


def test_lock_path_uses_sanitized_name(tmp_path: Path) -> None:
    path = install_lock_path(tmp_path, "@scope/init")
    assert path == tmp_path / "state" / "install" / "@scope_init.lock.json"


def test_write_then_read_install_lock(tmp_path: Path) -> None:
    write_install_lock(tmp_path, "@scope/init", {"version": "1.2.0", "registry": "https://r.local"})

    payload = read_install_lock(tmp_path, "@scope/init")
    assert payload is not None
    assert payload["name"] == "@scope/init"
    assert payload["version"] == "1.2.0"
    assert payload["installed_at"]


def test_read_install_lock_ignores_corrupt_files(tmp_path: Path) -> None:
    lock_path = install_lock_path(tmp_path, "demo")
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock_path.write_text("{not json", encoding="utf-8")
    assert read_install_lock(tmp_path, "demo") is None

    lock_path.write_text(json.dumps(["a", "list"]), encoding="utf-8")
    assert read_install_lock(tmp_path, "demo") is None
    assert read_install_lock(tmp_path, "missing") is None
