"""
Base class for command packages implemented in Python.

A command package's entry file is started by the dispatcher as

    <python> <entry.py> --soa-invocation '<json record>'

and typically ends with::

    if __name__ == "__main__":
        raise SystemExit(MyCommand.from_argv(sys.argv[1:]).run())
"""

from __future__ import annotations

import abc
import logging
import sys
from typing import Any, Sequence

from .errors import InvalidOptions, SoaCliError
from .exec.invocation import INVOCATION_FLAG, InvocationRecord

log = logging.getLogger(__name__)

LOWEST_PYTHON_VERSION = (3, 11)


def check_python_version(current: tuple[int, ...] | None = None) -> None:
    current = tuple(current or sys.version_info[:3])
    if current[:2] < LOWEST_PYTHON_VERSION:
        lowest = ".".join(str(part) for part in LOWEST_PYTHON_VERSION)
        raise SoaCliError(f"soa-cli requires Python {lowest} or newer")


class Command(abc.ABC):
    def __init__(self, record: InvocationRecord) -> None:
        if record is None:
            raise InvalidOptions("command invocation must not be empty")
        if not isinstance(record, InvocationRecord):
            raise InvalidOptions("command invocation must be an InvocationRecord")
        self.record = record
        self.args: list[Any] = list(record.args)
        self.options: dict[str, Any] = dict(record.options)

    @classmethod
    def from_argv(cls, argv: Sequence[str]) -> "Command":
        argv = list(argv)
        if INVOCATION_FLAG not in argv:
            raise InvalidOptions(f"missing {INVOCATION_FLAG} argument")
        index = argv.index(INVOCATION_FLAG)
        if index + 1 >= len(argv):
            raise InvalidOptions(f"{INVOCATION_FLAG} requires a JSON value")
        try:
            record = InvocationRecord.from_json(argv[index + 1])
        except ValueError as exc:
            raise InvalidOptions(f"invalid invocation record: {exc}") from exc
        return cls(record)

    @abc.abstractmethod
    def init(self) -> None: ...

    @abc.abstractmethod
    def exec(self) -> int | None: ...

    def run(self) -> int:
        try:
            check_python_version()
            self.init()
            code = self.exec()
        except SoaCliError as exc:
            log.error("%s", exc)
            log.debug("command failed", exc_info=True)
            return exc.exit_code
        return int(code or 0)
