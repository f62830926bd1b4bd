"""
Command dispatch: map a command to the package implementing it, make sure that
package is present and current, then run its entry point in a child process.

    RESOLVE_COMMAND -> ENSURE_PACKAGE (install | update) -> LOCATE_ENTRY -> SPAWN -> EXIT
"""

from __future__ import annotations

import logging
from typing import Mapping

from soa_cli.errors import EntryNotFound, UnknownCommand
from soa_cli.packages import LATEST, Installer, Package, PackageSpec, StoreLocation, TarballInstaller
from soa_cli.registry import RegistryClient
from soa_cli.settings import CliContext

from .invocation import InvocationRecord
from .process import Runner, run_inherited, spawn_entry

log = logging.getLogger(__name__)

COMMAND_PACKAGES: dict[str, str] = {
    "init": "@soa-cli/init",
    "publish": "@soa-cli/publish",
}


class Dispatcher:
    def __init__(
        self,
        context: CliContext,
        *,
        commands: Mapping[str, str] | None = None,
        registry_client: RegistryClient | None = None,
        installer: Installer | None = None,
        runner: Runner | None = None,
    ) -> None:
        self.context = context
        self.commands = {**COMMAND_PACKAGES, **context.commands, **dict(commands or {})}
        self.registry_client = registry_client or RegistryClient(context.registry, timeout=context.timeout)
        self.installer = installer or TarballInstaller(
            self.registry_client,
            install_dependencies=context.install_dependencies,
        )
        self.runner = runner or run_inherited

    def package_for(self, command: str) -> str:
        package_name = self.commands.get(command)
        if not package_name:
            raise UnknownCommand(command)
        return package_name

    def build_package(self, package_name: str) -> Package:
        if self.context.target_path is not None:
            location = StoreLocation(target_path=self.context.target_path)
        else:
            location = StoreLocation(
                target_path=self.context.dependencies_dir,
                store_dir=self.context.store_dir,
            )
        log.debug("targetPath %s", location.target_path)
        log.debug("storeDir %s", location.store_dir)
        return Package(
            PackageSpec(name=package_name, version=LATEST),
            location,
            registry_client=self.registry_client,
            installer=self.installer,
        )

    def ensure_package(self, pkg: Package) -> None:
        if pkg.store_dir is None:
            # local override: the directory is used as-is
            return
        if pkg.exists():
            pkg.update()
        else:
            pkg.install()
        log.debug("using %s@%s", pkg.name, pkg.version)

    def dispatch(self, record: InvocationRecord) -> int:
        package_name = self.package_for(record.command)
        pkg = self.build_package(package_name)
        self.ensure_package(pkg)

        entry = pkg.get_root_file_path()
        if not entry:
            where = pkg.cache_slot or pkg.target_path
            raise EntryNotFound(f"no entry file ('main' in package.json) found for {pkg.name} at {where}")
        return spawn_entry(entry, record, self.runner)
