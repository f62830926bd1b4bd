"""Error types raised across soa-cli."""

from __future__ import annotations


class SoaCliError(RuntimeError):
    """Base error; the CLI turns it into a message and ``exit_code``."""

    exit_code = 1


class InvalidOptions(SoaCliError):
    pass


class RegistryUnavailable(SoaCliError):
    pass


class InstallFailure(SoaCliError):
    pass


class UnknownCommand(SoaCliError):
    def __init__(self, command: str) -> None:
        super().__init__(f"unknown command: {command!r}")
        self.command = command


class EntryNotFound(SoaCliError):
    pass


class SpawnFailure(SoaCliError):
    pass


class EnvironmentCheckError(SoaCliError):
    pass
