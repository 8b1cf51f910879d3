"""Command helpers shared by every izanami-cli command module.

Commands receive the ``typer.Context`` and fetch the InvocationContext the
root callback stored on it. Errors raised by resolution and by the document
services propagate up to the command, where ``handle_iz_errors`` reports
them on stderr and exits with code 1.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

import typer

from izanami_cli.config.messages import AFFIRMATIVE_ANSWERS
from izanami_cli.exceptions import IzError
from izanami_cli.resolution.context import InvocationContext
from izanami_cli.utils.console import print_error

F = TypeVar("F", bound=Callable[..., Any])


def get_invocation(ctx: typer.Context) -> InvocationContext:
    """Return the InvocationContext of the running command.

    Falls back to a fresh default context when the command is invoked
    without the root callback (direct sub-app invocation in tests).
    """
    root = ctx.find_root()
    if not isinstance(root.obj, InvocationContext):
        root.obj = InvocationContext()
    return root.obj


def _command_context(args: tuple[Any, ...], kwargs: dict[str, Any]) -> typer.Context | None:
    """Find the context typer injected into a command's arguments."""
    for value in (*args, *kwargs.values()):
        if callable(getattr(value, "find_root", None)):
            return value
    return None


def handle_iz_errors(func: F) -> F:
    """Decorator reporting IzError failures and exiting with code 1.

    Example:
        @config_app.command("get")
        @handle_iz_errors
        def config_get(ctx: typer.Context, key: str) -> None:
            ...
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except IzError as e:
            ctx = _command_context(args, kwargs)
            print_error(str(e), out=get_invocation(ctx).err_console if ctx else None)
            raise typer.Exit(code=1) from e

    return wrapper  # type: ignore[return-value]


def confirm(prompt: str) -> bool:
    """Ask a y/N question on stderr; only "y" or "yes" (any case) confirm."""
    answer = typer.prompt(
        prompt.rstrip(": ").rstrip(),
        default="",
        show_default=False,
        prompt_suffix=": ",
        err=True,
    )
    return answer.strip().lower() in AFFIRMATIVE_ANSWERS
