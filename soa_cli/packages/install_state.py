"""Local install records written next to the install root."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .cache import sanitized_name


def install_lock_path(root: Path, package_name: str) -> Path:
    return Path(root) / "state" / "install" / f"{sanitized_name(package_name)}.lock.json"


def read_install_lock(root: Path, package_name: str) -> dict[str, Any] | None:
    path = install_lock_path(root, package_name)
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None
    return payload


def write_install_lock(root: Path, package_name: str, payload: dict[str, Any]) -> Path:
    path = install_lock_path(root, package_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    record = {"name": package_name, **payload}
    record.setdefault("installed_at", datetime.now(timezone.utc).isoformat())
    path.write_text(json.dumps(record, ensure_ascii=False, indent=2), encoding="utf-8")
    return path
