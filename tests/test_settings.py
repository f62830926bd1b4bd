from __future__ import annotations

from pathlib import Path

from soa_cli.registry import MIRROR_REGISTRY, OFFICIAL_REGISTRY
from soa_cli.settings import CliContext, load_env_file


def _write_config(cli_home: Path, text: str) -> None:
    config_dir = cli_home / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.toml").write_text(text, encoding="utf-8")


def test_defaults(tmp_path: Path) -> None:
    context = CliContext.load(home=tmp_path, environ={})

    assert context.cli_home == tmp_path / ".soa-cli"
    assert context.dependencies_dir == tmp_path / ".soa-cli" / "dependencies"
    assert context.store_dir == tmp_path / ".soa-cli" / "dependencies" / "node_modules"
    assert context.target_path is None
    assert context.registry == OFFICIAL_REGISTRY
    assert context.check_update is True


def test_env_file_sets_cli_home_and_target(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("CLI_HOME=.custom-home\nSOA_CLI_TARGET_PATH=/work/init\n", encoding="utf-8")

    context = CliContext.load(home=tmp_path, environ={})

    assert context.cli_home == tmp_path / ".custom-home"
    assert context.target_path == Path("/work/init")


def test_process_environment_overrides_env_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("CLI_HOME=.from-file\n", encoding="utf-8")

    context = CliContext.load(home=tmp_path, environ={"CLI_HOME": ".from-env"})

    assert context.cli_home == tmp_path / ".from-env"


def test_flag_overrides_environment(tmp_path: Path) -> None:
    context = CliContext.load(
        home=tmp_path,
        environ={"SOA_CLI_TARGET_PATH": "/from/env"},
        target_path=tmp_path / "flag",
    )
    assert context.target_path == tmp_path / "flag"


def test_config_toml_sections(tmp_path: Path) -> None:
    _write_config(
        tmp_path / ".soa-cli",
        """[registry]
mirror = true
timeout = 5

[commands]
add = "@acme/add"

[update]
check = false

[install]
dependencies = false
""",
    )

    context = CliContext.load(home=tmp_path, environ={})

    assert context.registry == MIRROR_REGISTRY
    assert context.timeout == 5.0
    assert context.commands == {"add": "@acme/add"}
    assert context.check_update is False
    assert context.install_dependencies is False


def test_explicit_registry_url_wins(tmp_path: Path) -> None:
    _write_config(tmp_path / ".soa-cli", '[registry]\nurl = "https://npm.internal/"\nmirror = true\n')

    assert CliContext.load(home=tmp_path, environ={}).registry == "https://npm.internal"


def test_malformed_config_is_ignored(tmp_path: Path) -> None:
    _write_config(tmp_path / ".soa-cli", "[registry\nurl = ")

    assert CliContext.load(home=tmp_path, environ={}).registry == OFFICIAL_REGISTRY


def test_load_env_file_missing(tmp_path: Path) -> None:
    assert load_env_file(home=tmp_path) == {}
    assert load_env_file(tmp_path / "nope.env") == {}
