from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Union

from soa_cli.errors import InvalidOptions

LATEST_TAG = "latest"


@dataclass(frozen=True)
class Latest:
    """Floating reference, resolved against the registry on first use."""

    def __str__(self) -> str:
        return LATEST_TAG


@dataclass(frozen=True)
class Pinned:
    version: str

    def __str__(self) -> str:
        return self.version


LATEST = Latest()

VersionRef = Union[Latest, Pinned]


def version_ref(raw: str | VersionRef | None) -> VersionRef:
    if isinstance(raw, (Latest, Pinned)):
        return raw
    value = str(raw or "").strip()
    if not value or value == LATEST_TAG:
        return LATEST
    return Pinned(value)


@dataclass(frozen=True)
class PackageSpec:
    name: str
    version: VersionRef = LATEST

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidOptions("package name must be a non-empty string")
        if self.name.count("/") > 1:
            raise InvalidOptions(f"package name may contain at most one '/': {self.name!r}")
        if not isinstance(self.version, (Latest, Pinned)):
            object.__setattr__(self, "version", version_ref(self.version))

    @property
    def is_latest(self) -> bool:
        return isinstance(self.version, Latest)

    def resolved(self, version: str) -> "PackageSpec":
        return replace(self, version=Pinned(version))


@dataclass(frozen=True)
class StoreLocation:
    target_path: Path
    store_dir: Path | None = None


@dataclass(frozen=True)
class PackageRequest:
    name: str
    version: str


@dataclass(frozen=True)
class InstallRequest:
    root: Path
    store_dir: Path | None
    registry: str
    packages: tuple[PackageRequest, ...] = field(default_factory=tuple)
