from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from . import PACKAGE_NAME, __version__
from .command import check_python_version
from .errors import EnvironmentCheckError, SoaCliError
from .exec import Dispatcher, InvocationRecord
from .log import configure_logging, success
from .packages import list_slots
from .packages.install_state import read_install_lock
from .registry import RegistryClient
from .settings import CliContext

log = logging.getLogger(__name__)

app = typer.Typer(help="soa-cli: scaffold projects and components from remote templates", no_args_is_help=True)
cache_app = typer.Typer(help="Inspect the local command package store")
app.add_typer(cache_app, name="cache")


# -------------------------
# Startup checks
# -------------------------
def check_root() -> None:
    geteuid = getattr(os, "geteuid", None)
    if geteuid is not None and geteuid() == 0:
        log.warning("running as root; cached packages will be owned by root")


def check_user_home(home: Path) -> None:
    if not home or not home.exists():
        raise EnvironmentCheckError(f"user home directory does not exist: {home}")


def check_global_update(context: CliContext) -> Optional[str]:
    """Log a notice when a newer soa-cli is published; never fails the run."""
    client = RegistryClient(context.registry, timeout=context.timeout)
    try:
        latest = client.resolve_newer_than(__version__, PACKAGE_NAME)
    except SoaCliError as exc:
        log.debug("update check skipped: %s", exc)
        return None
    if latest:
        log.warning(
            "please update %s manually: current %s, latest %s",
            PACKAGE_NAME,
            __version__,
            latest,
        )
    return latest


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def core(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable verbose logging"),
    target_path: Optional[str] = typer.Option(
        None, "--target-path", help="Run command packages from a local directory instead of the cache"
    ),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback, is_eager=True, help="Print version and exit"
    ),
) -> None:
    del version
    configure_logging(debug)
    success(log, "notice %s", __version__)
    check_python_version()
    check_root()
    home = Path.home()
    check_user_home(home)
    context = CliContext.load(target_path=target_path, debug=debug, home=home)
    log.debug("cli home %s", context.cli_home)
    if context.check_update:
        check_global_update(context)
    ctx.obj = context


def _context(ctx: typer.Context) -> CliContext:
    context = ctx.obj
    if not isinstance(context, CliContext):
        raise SoaCliError("cli context was not initialized")
    return context


def _dispatch(ctx: typer.Context, command: str, args: list[Any], options: dict[str, Any]) -> None:
    record = InvocationRecord(command=command, args=tuple(args), options=options)
    code = Dispatcher(_context(ctx)).dispatch(record)
    raise typer.Exit(code)


# -------------------------
# Dispatched commands
# -------------------------
@app.command("init")
def init_cmd(
    ctx: typer.Context,
    project_name: Optional[str] = typer.Argument(None, help="Project name"),
    force: bool = typer.Option(False, "--force", "-f", help="Initialize even if the directory is not empty"),
) -> None:
    """Initialize a project or component from a template."""
    args = [project_name] if project_name else []
    _dispatch(ctx, "init", args, {"force": force, "cwd": Path.cwd()})


@app.command("publish")
def publish_cmd(
    ctx: typer.Context,
    refresh_server: bool = typer.Option(False, "--refresh-server", help="Re-select the git hosting server"),
    refresh_token: bool = typer.Option(False, "--refresh-token", help="Re-enter the git server token"),
    refresh_owner: bool = typer.Option(False, "--refresh-owner", help="Re-select the repository owner"),
    build_cmd: Optional[str] = typer.Option(None, "--build-cmd", help="Build command run by the remote builder"),
    prod: bool = typer.Option(False, "--prod", help="Publish a production release"),
) -> None:
    """Push the current project and trigger a remote build."""
    options = {
        "refresh_server": refresh_server,
        "refresh_token": refresh_token,
        "refresh_owner": refresh_owner,
        "build_cmd": build_cmd,
        "prod": prod,
        "cwd": Path.cwd(),
    }
    _dispatch(ctx, "publish", [], options)


# -------------------------
# Cache inspection
# -------------------------
@cache_app.command("list")
def cache_list(ctx: typer.Context) -> None:
    context = _context(ctx)
    entries = list_slots(context.store_dir)
    if not entries:
        typer.echo("(no cached packages)")
        return
    for entry in entries:
        line = f"{entry.name}@{entry.version} {entry.path.as_posix()}"
        lock = read_install_lock(context.dependencies_dir, entry.name)
        if lock and lock.get("version") == entry.version and lock.get("installed_at"):
            line = f"{line} (installed {lock['installed_at']})"
        typer.echo(line)


@cache_app.command("path")
def cache_path(ctx: typer.Context) -> None:
    typer.echo(_context(ctx).store_dir.as_posix())


def _exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    configure_logging("--debug" in args or "-d" in args)
    command = typer.main.get_command(app)
    try:
        # standalone mode: usage errors, --help and Ctrl-C end in SystemExit
        command.main(args=args, prog_name=PACKAGE_NAME, standalone_mode=True)
    except SoaCliError as exc:
        log.error("%s", exc)
        log.debug("command failed", exc_info=True)
        return exc.exit_code
    except SystemExit as exc:
        return _exit_code(exc.code)
    return 0
