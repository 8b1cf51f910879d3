"""Pytest configuration and fixtures for izanami-cli tests."""

import io
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml
from rich.console import Console
from typer.testing import CliRunner

from izanami_cli.resolution.context import FlagValues, InvocationContext


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every per-user location at a temporary home directory.

    IZ_* variables from the developer's shell are removed so that source
    attribution only sees what a test sets.

    Returns:
        Path to the temporary home directory
    """
    for name in list(os.environ):
        if name.startswith("IZ_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def config_path(isolated_home: Path) -> Path:
    """Location of config.yaml inside the temporary home."""
    return isolated_home / ".config" / "iz" / "config.yaml"


@pytest.fixture
def sessions_path(isolated_home: Path) -> Path:
    """Location of the sessions document inside the temporary home."""
    return isolated_home / ".izsessions"


@pytest.fixture
def write_config(config_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Return a helper writing a config document as YAML."""

    def _write(data: dict[str, Any]) -> Path:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        config_path.chmod(0o600)
        return config_path

    return _write


@pytest.fixture
def write_sessions(sessions_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Return a helper writing a sessions document as YAML."""

    def _write(data: dict[str, Any]) -> Path:
        sessions_path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        sessions_path.chmod(0o600)
        return sessions_path

    return _write


@pytest.fixture
def make_ctx(config_path: Path, sessions_path: Path) -> Callable[..., InvocationContext]:
    """Return a factory for InvocationContexts writing to in-memory consoles.

    Args of the factory:
        environ: Environment snapshot (empty by default)
        flags_set: Names of flags given on the command line
        **flag_values: FlagValues fields (url, tenant, timeout, ...)
        verbose / quiet: Output mode
    """

    def _make(
        environ: dict[str, str] | None = None,
        flags_set: set[str] | None = None,
        verbose: bool = False,
        quiet: bool = False,
        **flag_values: Any,
    ) -> InvocationContext:
        return InvocationContext(
            config_path=config_path,
            sessions_path=sessions_path,
            flags=FlagValues(**flag_values),
            flags_set=frozenset(flags_set or ()),
            environ=dict(environ or {}),
            verbose=verbose,
            quiet=quiet,
            console=Console(file=io.StringIO(), width=200),
            err_console=Console(file=io.StringIO(), width=200),
        )

    return _make


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def sandbox_config(write_config: Callable[[dict[str, Any]], Path]) -> Path:
    """Config with an active ``sandbox`` profile and a file-level timeout."""
    return write_config(
        {
            "timeout": 45,
            "active_profile": "sandbox",
            "profiles": {
                "sandbox": {
                    "leader-url": "http://sandbox.example.com",
                    "tenant": "sandbox-tenant",
                }
            },
        }
    )
