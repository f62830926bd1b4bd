"""Serializable record of a command invocation handed to a command package."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Mapping

INVOCATION_FLAG = "--soa-invocation"
_PARENT_KEYS = frozenset({"parent", "parent_command"})


def sanitize(value: Any, *, _seen: set[int] | None = None) -> Any:
    """
    Reduce ``value`` to plain JSON data.

    Private ``_`` keys and parent back-references are dropped, cycles are
    cut, paths become strings, anything else non-serializable is skipped.
    """
    seen = _seen if _seen is not None else set()
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, PurePath):
        return value.as_posix()
    if id(value) in seen:
        return None
    if isinstance(value, Mapping):
        seen.add(id(value))
        out: dict[str, Any] = {}
        for key, item in value.items():
            key = str(key)
            if key.startswith("_") or key in _PARENT_KEYS:
                continue
            cleaned = sanitize(item, _seen=seen)
            if cleaned is not None or item is None:
                out[key] = cleaned
        seen.discard(id(value))
        return out
    if isinstance(value, (list, tuple, set, frozenset)):
        seen.add(id(value))
        items = [sanitize(item, _seen=seen) for item in value]
        seen.discard(id(value))
        return [item for item, raw in zip(items, value) if item is not None or raw is None]
    return None


@dataclass(frozen=True)
class InvocationRecord:
    command: str
    args: tuple[Any, ...] = ()
    options: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {
            "command": self.command,
            "args": sanitize(list(self.args)),
            "options": sanitize(dict(self.options)),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), ensure_ascii=False, sort_keys=True)

    @classmethod
    def from_json(cls, raw: str) -> "InvocationRecord":
        payload = json.loads(raw)
        if not isinstance(payload, dict) or not str(payload.get("command") or "").strip():
            raise ValueError("invocation record requires a command")
        args = payload.get("args") or []
        options = payload.get("options") or {}
        if not isinstance(args, list) or not isinstance(options, dict):
            raise ValueError("invocation record has malformed args/options")
        return cls(command=str(payload["command"]), args=tuple(args), options=dict(options))
