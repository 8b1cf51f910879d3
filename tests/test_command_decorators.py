"""Tests for the shared command helpers."""

import pytest
import typer

from izanami_cli.exceptions import IzError, NotFoundError
from izanami_cli.resolution.context import InvocationContext
from izanami_cli.utils.command_decorators import get_invocation, handle_iz_errors


class FakeContext:
    """Stands in for the context typer injects: only ``find_root``/``obj`` are used."""

    def __init__(self, obj: object = None):
        self.obj = obj

    def find_root(self) -> "FakeContext":
        return self


class TestGetInvocation:
    """Tests for get_invocation."""

    def test_returns_stored_context(self, make_ctx) -> None:
        inv = make_ctx()

        assert get_invocation(FakeContext(inv)) is inv

    def test_creates_default_context(self) -> None:
        ctx = FakeContext()

        inv = get_invocation(ctx)

        assert isinstance(inv, InvocationContext)
        assert ctx.obj is inv


class TestHandleIzErrors:
    """Tests for the error-reporting decorator."""

    def test_reports_on_invocation_stderr(self, make_ctx) -> None:
        inv = make_ctx(quiet=True)

        @handle_iz_errors
        def command(ctx, key: str) -> None:
            raise NotFoundError(f"profile '{key}' not found", "profile", key)

        with pytest.raises(typer.Exit) as exc_info:
            command(ctx=FakeContext(inv), key="ghost")

        assert exc_info.value.exit_code == 1
        assert "profile 'ghost' not found" in inv.err_console.file.getvalue()
        assert inv.console.file.getvalue() == ""

    def test_positional_context(self, make_ctx) -> None:
        inv = make_ctx()

        @handle_iz_errors
        def command(ctx) -> None:
            raise IzError("boom")

        with pytest.raises(typer.Exit):
            command(FakeContext(inv))

        assert "boom" in inv.err_console.file.getvalue()

    def test_without_context_uses_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        @handle_iz_errors
        def command(key: str) -> None:
            raise IzError("no context here")

        with pytest.raises(typer.Exit):
            command(key="x")

        assert "no context here" in capsys.readouterr().err

    def test_success_passes_through(self, make_ctx) -> None:
        @handle_iz_errors
        def command(ctx) -> str:
            return "ok"

        assert command(FakeContext(make_ctx())) == "ok"
