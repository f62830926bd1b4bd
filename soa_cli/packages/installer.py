"""Install registry packages into the shared store without touching any global package set."""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
import subprocess
import tarfile
import tempfile
from pathlib import Path
from typing import Protocol

from soa_cli.errors import InstallFailure
from soa_cli.registry import RegistryClient

from .cache import package_dir, slot_path
from .install_state import write_install_lock
from .manifest import read_manifest
from .models import InstallRequest, PackageRequest

log = logging.getLogger(__name__)


class Installer(Protocol):
    def install(self, request: InstallRequest) -> list[Path]: ...


def _sha1(path: Path) -> str:
    digest = hashlib.sha1()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _strip_root(member_name: str) -> str:
    # npm tarballs wrap everything in one top-level folder, usually "package/"
    parts = Path(member_name).parts
    return str(Path(*parts[1:])) if len(parts) > 1 else ""


def safe_extract_package(tarball: Path, dest: Path) -> None:
    """
    Extract an npm tarball into ``dest``, dropping its top-level folder.
    Members escaping ``dest`` and link entries are rejected.
    """
    dest = dest.resolve()
    dest.mkdir(parents=True, exist_ok=True)
    with tarfile.open(tarball, "r:*") as tf:
        for member in tf.getmembers():
            rel = _strip_root(member.name)
            if not rel:
                continue
            target = (dest / rel).resolve()
            if dest not in target.parents:
                raise InstallFailure(f"unsafe tar member path: {member.name}")
            if member.issym() or member.islnk():
                raise InstallFailure(f"link entries are not allowed in package tarballs: {member.name}")
            if member.isdir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            if not member.isfile():
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            source = tf.extractfile(member)
            if source is None:
                continue
            with source, open(target, "wb") as out:
                shutil.copyfileobj(source, out)
            if member.mode & 0o111:
                os.chmod(target, 0o755)


class TarballInstaller:
    """Fetches ``dist.tarball`` for each requested package and unpacks it into its cache slot."""

    def __init__(
        self,
        registry_client: RegistryClient,
        *,
        install_dependencies: bool = True,
        npm: str | None = None,
    ) -> None:
        self.registry_client = registry_client
        self.install_dependencies = install_dependencies
        self.npm = npm or ("npm.cmd" if os.name == "nt" else "npm")

    def install(self, request: InstallRequest) -> list[Path]:
        installed: list[Path] = []
        for pkg in request.packages:
            installed.append(self._install_one(request, pkg))
        return installed

    def _target_dir(self, request: InstallRequest, pkg: PackageRequest) -> Path:
        if request.store_dir is not None:
            return package_dir(request.store_dir, pkg.name, pkg.version)
        return Path(request.root) / "node_modules" / pkg.name

    def _install_root(self, request: InstallRequest, pkg: PackageRequest) -> Path:
        # the directory that appears atomically once the install is complete
        if request.store_dir is not None:
            return slot_path(request.store_dir, pkg.name, pkg.version)
        return self._target_dir(request, pkg)

    def _install_one(self, request: InstallRequest, pkg: PackageRequest) -> Path:
        info = self.registry_client.tarball(pkg.name, pkg.version)
        if info is None:
            raise InstallFailure(f"{pkg.name}@{pkg.version} not found on registry {request.registry}")

        target = self._target_dir(request, pkg)
        final = self._install_root(request, pkg)
        final.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{final.name}.", dir=final.parent))
        staged_target = staging / target.relative_to(final)
        log.debug("installing %s@%s into %s (staging %s)", pkg.name, pkg.version, target, staging)
        try:
            with tempfile.TemporaryDirectory(prefix="soa-cli-install-") as tmpd:
                tar_path = Path(tmpd) / "package.tgz"
                self.registry_client.download(info.url, str(tar_path))
                if info.shasum and _sha1(tar_path) != info.shasum:
                    raise InstallFailure(f"checksum mismatch for {pkg.name}@{pkg.version}")
                try:
                    safe_extract_package(tar_path, staged_target)
                except tarfile.TarError as exc:
                    raise InstallFailure(f"invalid package tarball for {pkg.name}@{pkg.version}: {exc}") from exc

            manifest = read_manifest(staged_target) or {}
            if self.install_dependencies and manifest.get("dependencies"):
                self._install_dependencies(staged_target, request.registry)

            if final.exists():
                # leftover from an interrupted run
                shutil.rmtree(final)
            os.chmod(staging, 0o755)
            os.replace(staging, final)
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)

        write_install_lock(
            Path(request.root),
            pkg.name,
            {
                "version": pkg.version,
                "slot": str(final) if request.store_dir else None,
                "path": target.as_posix(),
                "registry": request.registry,
            },
        )
        return target

    def _install_dependencies(self, cwd: Path, registry: str) -> None:
        command = [
            self.npm,
            "install",
            "--omit=dev",
            "--no-save",
            "--no-package-lock",
            "--registry",
            registry,
        ]
        log.debug("dependency install cmd=%s cwd=%s", " ".join(command), cwd)
        try:
            result = subprocess.run(
                command,
                cwd=str(cwd),
                check=False,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise InstallFailure(f"{self.npm} not found; install Node.js/npm and ensure it is in PATH") from exc
        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise InstallFailure(f"dependency install failed (exit={result.returncode}) in {cwd}: {detail}")
