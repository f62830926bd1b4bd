"""
Runtime context resolved once at startup and passed down explicitly.

Sources, lowest to highest precedence:
- built-in defaults
- ``<cli home>/config/config.toml``
- ``~/.env`` (``CLI_HOME``, ``SOA_CLI_TARGET_PATH``)
- process environment
- command line flags
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from dotenv import dotenv_values

from .registry import default_registry

DEFAULT_CLI_HOME = ".soa-cli"
CACHE_DIR = "dependencies"
STORE_DIR = "node_modules"
CONFIG_FILENAME = "config.toml"

ENV_CLI_HOME = "CLI_HOME"
ENV_TARGET_PATH = "SOA_CLI_TARGET_PATH"


def load_env_file(env_file: str | Path | None = None, *, home: Path | None = None) -> dict[str, str]:
    path = Path(env_file) if env_file else (home or Path.home()) / ".env"
    if not path.exists():
        return {}
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def _load_config(cli_home: Path) -> dict[str, Any]:
    config_path = cli_home / "config" / CONFIG_FILENAME
    if not config_path.exists():
        return {}
    try:
        payload = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _section(payload: Mapping[str, Any], name: str) -> dict[str, Any]:
    section = payload.get(name)
    return section if isinstance(section, dict) else {}


@dataclass(frozen=True)
class CliContext:
    home: Path
    cli_home: Path
    target_path: Path | None = None
    debug: bool = False
    registry_url: str | None = None
    use_mirror: bool = False
    timeout: float | None = None
    commands: dict[str, str] = field(default_factory=dict)
    check_update: bool = True
    install_dependencies: bool = True

    @property
    def registry(self) -> str:
        if self.registry_url:
            return self.registry_url.rstrip("/")
        return default_registry(not self.use_mirror)

    @property
    def dependencies_dir(self) -> Path:
        return self.cli_home / CACHE_DIR

    @property
    def store_dir(self) -> Path:
        return self.dependencies_dir / STORE_DIR

    @classmethod
    def load(
        cls,
        *,
        target_path: str | Path | None = None,
        debug: bool = False,
        home: Path | None = None,
        environ: Mapping[str, str] | None = None,
        env_file: str | Path | None = None,
    ) -> "CliContext":
        home = Path(home) if home is not None else Path.home()
        env: dict[str, str] = dict(load_env_file(env_file, home=home))
        env.update(environ if environ is not None else os.environ)

        cli_home = home / (env.get(ENV_CLI_HOME) or DEFAULT_CLI_HOME)
        config = _load_config(cli_home)
        registry_cfg = _section(config, "registry")
        update_cfg = _section(config, "update")
        install_cfg = _section(config, "install")
        commands = {str(k): str(v) for k, v in _section(config, "commands").items() if str(v).strip()}

        raw_target = target_path or env.get(ENV_TARGET_PATH) or None
        timeout = registry_cfg.get("timeout")
        return cls(
            home=home,
            cli_home=cli_home,
            target_path=Path(raw_target).absolute() if raw_target else None,
            debug=bool(debug),
            registry_url=str(registry_cfg.get("url") or "").strip() or None,
            use_mirror=bool(registry_cfg.get("mirror", False)),
            timeout=float(timeout) if timeout is not None else None,
            commands=commands,
            check_update=bool(update_cfg.get("check", True)),
            install_dependencies=bool(install_cfg.get("dependencies", True)),
        )
