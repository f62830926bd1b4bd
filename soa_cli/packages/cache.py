"""
On-disk layout of the shared package store.

One directory per (name, version):

    <store_dir>/_<sanitized name>@<version>@<sort name>

``@soa-cli/init`` 1.2.0 => ``_@soa-cli_init@1.2.0@@soa-cli``. The sort name drops
everything after the scope separator, matching how npminstall groups scoped
packages; the package itself then lives at ``<slot>/init``.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

SCOPE_SEPARATOR = "/"
SCOPE_SUBSTITUTE = "_"

_SLOT_RE = re.compile(r"^_(?P<prefix>[^@]*@?[^@]+)@(?P<version>[^@]+)@(?P<sort>.+)$")


@dataclass(frozen=True)
class CacheEntry:
    name: str
    version: str
    path: Path


def sort_name(name: str) -> str:
    index = name.find(SCOPE_SEPARATOR)
    return name[:index] if index != -1 else name


def sanitized_name(name: str) -> str:
    return name.replace(SCOPE_SEPARATOR, SCOPE_SUBSTITUTE, 1)


def slot_name(name: str, version: str) -> str:
    return f"_{sanitized_name(name)}@{version}@{sort_name(name)}"


def slot_path(store_dir: Path, name: str, version: str) -> Path:
    return Path(os.path.abspath(store_dir)) / slot_name(name, version)


def package_dir(store_dir: Path, name: str, version: str) -> Path:
    slot = slot_path(store_dir, name, version)
    if SCOPE_SEPARATOR not in name:
        return slot
    return slot / name.split(SCOPE_SEPARATOR, 1)[1]


def list_slots(store_dir: Path) -> list[CacheEntry]:
    store_dir = Path(store_dir)
    if not store_dir.exists() or not store_dir.is_dir():
        return []
    entries: list[CacheEntry] = []
    for child in sorted(p for p in store_dir.iterdir() if p.is_dir()):
        m = _SLOT_RE.match(child.name)
        if not m:
            continue
        prefix = m.group("prefix")
        sort = m.group("sort")
        name = prefix
        if prefix.startswith(sort + SCOPE_SUBSTITUTE) and prefix != sort:
            name = f"{sort}{SCOPE_SEPARATOR}{prefix[len(sort) + 1:]}"
        entries.append(CacheEntry(name=name, version=m.group("version"), path=child))
    return entries
