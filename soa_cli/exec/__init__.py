from .dispatcher import COMMAND_PACKAGES, Dispatcher
from .invocation import INVOCATION_FLAG, InvocationRecord, sanitize
from .process import build_command, run_inherited, spawn_entry

__all__ = [
    "COMMAND_PACKAGES",
    "Dispatcher",
    "INVOCATION_FLAG",
    "InvocationRecord",
    "build_command",
    "run_inherited",
    "sanitize",
    "spawn_entry",
]
