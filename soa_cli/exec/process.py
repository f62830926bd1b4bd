from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Protocol, Sequence

from soa_cli.errors import SpawnFailure

from .invocation import INVOCATION_FLAG, InvocationRecord

log = logging.getLogger(__name__)

_NODE_SUFFIXES = frozenset({".js", ".cjs", ".mjs"})


class Runner(Protocol):
    def __call__(self, command: Sequence[str]) -> int: ...


def interpreter_for(entry: str) -> list[str]:
    suffix = Path(entry).suffix.lower()
    if suffix in _NODE_SUFFIXES:
        return [shutil.which("node") or "node"]
    if suffix == ".py":
        return [sys.executable]
    return []


def build_command(entry: str, record: InvocationRecord) -> list[str]:
    return [*interpreter_for(entry), entry, INVOCATION_FLAG, record.to_json()]


def run_inherited(command: Sequence[str]) -> int:
    """Run with the parent's stdio attached and return the child's exit code."""
    try:
        completed = subprocess.run(list(command), check=False)
    except OSError as exc:
        raise SpawnFailure(f"failed to start {command[0]!r}: {exc}") from exc
    return completed.returncode


def spawn_entry(entry: str, record: InvocationRecord, runner: Runner = run_inherited) -> int:
    command = build_command(entry, record)
    log.debug("spawn entry=%s command=%s", entry, record.command)
    code = runner(command)
    log.debug("child exited code=%s", code)
    return code
