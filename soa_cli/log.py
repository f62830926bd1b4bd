from __future__ import annotations

import logging
import sys

HEADING = "soa-cli"
SUCCESS = 25
VERBOSE = logging.DEBUG

logging.addLevelName(SUCCESS, "SUCCESS")

_ROOT = "soa_cli"


class _HeadingFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        record.levelname_lower = record.levelname.lower()
        return super().format(record)


def configure_logging(debug: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the package logger; idempotent."""
    logger = logging.getLogger(_ROOT)
    level = VERBOSE if debug else logging.INFO
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if getattr(handler, "_soa_cli", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler._soa_cli = True  # type: ignore[attr-defined]
    handler.setLevel(level)
    fmt = f"{HEADING} %(levelname_lower)s %(message)s"
    if debug:
        fmt = f"{HEADING} %(levelname_lower)s [%(name)s] %(message)s"
    handler.setFormatter(_HeadingFormatter(fmt))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def success(logger: logging.Logger, msg: str, *args: object) -> None:
    logger.log(SUCCESS, msg, *args)
