from .cache import CacheEntry, list_slots, package_dir, slot_name, slot_path, sort_name
from .installer import Installer, TarballInstaller
from .models import (
    LATEST,
    InstallRequest,
    Latest,
    PackageRequest,
    PackageSpec,
    Pinned,
    StoreLocation,
    version_ref,
)
from .package import Package

__all__ = [
    "CacheEntry",
    "InstallRequest",
    "Installer",
    "LATEST",
    "Latest",
    "Package",
    "PackageRequest",
    "PackageSpec",
    "Pinned",
    "StoreLocation",
    "TarballInstaller",
    "list_slots",
    "package_dir",
    "slot_name",
    "slot_path",
    "sort_name",
    "version_ref",
]
