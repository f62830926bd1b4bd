"""A named, versioned package that may or may not be materialized on disk yet."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from soa_cli.errors import InstallFailure, InvalidOptions, RegistryUnavailable, SoaCliError
from soa_cli.registry import RegistryClient

from .cache import package_dir, slot_path
from .installer import Installer, TarballInstaller
from .manifest import entry_file
from .models import InstallRequest, PackageRequest, PackageSpec, StoreLocation

log = logging.getLogger(__name__)


class Package:
    def __init__(
        self,
        spec: PackageSpec,
        location: StoreLocation,
        *,
        registry_client: RegistryClient | None = None,
        installer: Installer | None = None,
    ) -> None:
        if not isinstance(spec, PackageSpec):
            raise InvalidOptions("Package requires a PackageSpec")
        if not isinstance(location, StoreLocation):
            raise InvalidOptions("Package requires a StoreLocation")
        self.spec = spec
        self.location = location
        self.registry_client = registry_client or RegistryClient()
        self.installer = installer or TarballInstaller(self.registry_client)

    @classmethod
    def from_options(cls, options: Any, **kwargs: Any) -> "Package":
        """Build from a ``{targetPath, storeDir, packageName, packageVersion}`` mapping."""
        if not options:
            raise InvalidOptions("Package options must not be empty")
        if not isinstance(options, Mapping):
            raise InvalidOptions("Package options must be a mapping")
        target_path = options.get("targetPath")
        if not target_path:
            raise InvalidOptions("Package options require targetPath")
        store_dir = options.get("storeDir")
        spec = PackageSpec(name=options.get("packageName"), version=options.get("packageVersion"))
        location = StoreLocation(
            target_path=Path(target_path),
            store_dir=Path(store_dir) if store_dir else None,
        )
        return cls(spec, location, **kwargs)

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def version(self) -> str:
        return str(self.spec.version)

    @property
    def target_path(self) -> Path:
        return self.location.target_path

    @property
    def store_dir(self) -> Path | None:
        return self.location.store_dir

    @property
    def cache_slot(self) -> Path | None:
        if self.store_dir is None or self.spec.is_latest:
            return None
        return slot_path(self.store_dir, self.name, self.version)

    def _slot_for(self, version: str) -> Path:
        assert self.store_dir is not None
        return slot_path(self.store_dir, self.name, version)

    def prepare(self) -> None:
        if self.store_dir is not None and not self.store_dir.exists():
            self.store_dir.mkdir(parents=True, exist_ok=True)
        if self.spec.is_latest:
            latest = self.registry_client.resolve_latest(self.name)
            if not latest:
                raise RegistryUnavailable(f"no versions published for {self.name}")
            log.debug("resolved %s@latest -> %s", self.name, latest)
            self.spec = self.spec.resolved(latest)

    def exists(self) -> bool:
        if self.store_dir is not None:
            self.prepare()
            return self._slot_for(self.version).exists()
        return self.target_path.exists()

    def _install_version(self, version: str) -> None:
        request = InstallRequest(
            root=self.target_path,
            store_dir=self.store_dir,
            registry=self.registry_client.base_url,
            packages=(PackageRequest(name=self.name, version=version),),
        )
        try:
            self.installer.install(request)
        except SoaCliError:
            raise
        except Exception as exc:
            raise InstallFailure(f"install of {self.name}@{version} failed: {exc}") from exc

    def install(self) -> None:
        self.prepare()
        log.debug("install %s@%s", self.name, self.version)
        self._install_version(self.version)

    def update(self) -> None:
        self.prepare()
        latest = self.registry_client.resolve_latest(self.name)
        if not latest:
            raise RegistryUnavailable(f"no versions published for {self.name}")
        if self.store_dir is not None and not self._slot_for(latest).exists():
            log.debug("update %s %s -> %s", self.name, self.version, latest)
            self._install_version(latest)
        self.spec = self.spec.resolved(latest)

    def get_root_file_path(self) -> str | None:
        if self.store_dir is not None:
            if self.spec.is_latest:
                return None
            return entry_file(package_dir(self.store_dir, self.name, self.version))
        return entry_file(self.target_path)

    def __repr__(self) -> str:
        return f"Package(name={self.name!r}, version={self.version!r}, store_dir={self.store_dir!r})"
