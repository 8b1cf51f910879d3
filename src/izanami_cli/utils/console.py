"""Rich console helpers for izanami-cli.

Commands print through the consoles carried by the invocation context so
that ``--quiet`` and the ``color`` setting apply. The module-level consoles
are the fallback for code running outside a command (``cli_main``).
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from izanami_cli.models.enums import ColorMode

console = Console()
err_console = Console(stderr=True)


def build_console(
    *, stderr: bool = False, quiet: bool = False, color: ColorMode = ColorMode.AUTO
) -> Console:
    """Create a console honoring the quiet flag and color mode."""
    if color == ColorMode.NEVER:
        return Console(stderr=stderr, quiet=quiet, no_color=True, highlight=False)
    if color == ColorMode.ALWAYS:
        return Console(stderr=stderr, quiet=quiet, force_terminal=True)
    return Console(stderr=stderr, quiet=quiet)


def print_error(message: str, out: Console | None = None) -> None:
    """Print an error message to stderr."""
    (out or err_console).print(
        f"[bold red]Error:[/bold red] {escape(message)}", highlight=False, soft_wrap=True
    )


def print_warning(message: str, out: Console | None = None) -> None:
    """Print a warning message to stderr."""
    (out or err_console).print(
        f"[yellow]Warning:[/yellow] {escape(message)}", highlight=False, soft_wrap=True
    )


def print_success(message: str, out: Console | None = None) -> None:
    (out or console).print(f"[green]{escape(message)}[/green]", highlight=False, soft_wrap=True)


def print_info(message: str, out: Console | None = None) -> None:
    (out or console).print(escape(message), highlight=False, soft_wrap=True)


def print_panel(
    content: str, title: str | None = None, style: str = "cyan", out: Console | None = None
) -> None:
    """Print content inside a bordered panel."""
    (out or console).print(Panel(content, title=title, border_style=style))


def print_plain(line: str, out: Console | None = None) -> None:
    """Print a line verbatim: no markup, no highlighting, no wrapping."""
    (out or console).print(line, markup=False, highlight=False, soft_wrap=True)
