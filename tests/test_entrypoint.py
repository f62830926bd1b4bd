import runpy
import tomllib
from pathlib import Path

import pytest

from soa_cli import cli


def test_console_script_points_at_cli_main():
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    scripts = tomllib.loads(pyproject.read_text(encoding="utf-8"))["project"]["scripts"]

    assert scripts["soa-cli"] == "soa_cli.cli:main"


def test_python_m_exits_with_cli_code(monkeypatch):
    monkeypatch.setattr(cli, "main", lambda: 7)

    with pytest.raises(SystemExit) as exc:
        runpy.run_module("soa_cli", run_name="__main__")

    assert exc.value.code == 7
