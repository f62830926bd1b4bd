"""soa-cli: scaffold projects and components from remote command packages."""

from __future__ import annotations

__all__ = ["__version__", "PACKAGE_NAME"]

__version__ = "1.0.0"

PACKAGE_NAME = "soa-cli"
