from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

MANIFEST_FILENAME = "package.json"


def format_path(p: str | Path) -> str:
    """Normalize a path to forward slashes regardless of platform."""
    return str(p).replace("\\", "/")


def find_package_dir(start: Path) -> Path | None:
    """Nearest directory at or above ``start`` holding a package.json."""
    current = Path(start).absolute()
    for candidate in (current, *current.parents):
        if (candidate / MANIFEST_FILENAME).is_file():
            return candidate
    return None


def read_manifest(package_dir: Path) -> dict[str, Any] | None:
    path = Path(package_dir) / MANIFEST_FILENAME
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


def entry_file(start: Path) -> str | None:
    package_dir = find_package_dir(start)
    if package_dir is None:
        return None
    manifest = read_manifest(package_dir)
    if not manifest:
        return None
    main = manifest.get("main")
    if not isinstance(main, str) or not main.strip():
        return None
    return format_path(os.path.normpath(package_dir / main))
