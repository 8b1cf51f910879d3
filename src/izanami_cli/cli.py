"""Main CLI entry point for izanami-cli."""

import logging
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from izanami_cli.commands.config_cmd import config_app
from izanami_cli.commands.profiles_cmd import profiles_app
from izanami_cli.commands.reset_cmd import reset_command
from izanami_cli.commands.sessions_cmd import sessions_app
from izanami_cli.config.messages import ERROR_MESSAGES, PROJECT_TAGLINE, PROJECT_URL
from izanami_cli.constants import KEY_COLOR, VERSION
from izanami_cli.exceptions import AmbiguousInputError, ConfigFileError
from izanami_cli.models.enums import ColorMode
from izanami_cli.resolution.context import FlagValues, InvocationContext, validate_output_flags
from izanami_cli.services.config_service import ConfigService
from izanami_cli.utils import build_console, print_error, print_panel

logger = logging.getLogger(__name__)

# Load .env file from current directory if it exists
load_dotenv(Path.cwd() / ".env", verbose=False)

# Global flags whose "explicitly set" state feeds source attribution
GLOBAL_FLAG_NAMES = ("url", "tenant", "project", "context", "timeout", "insecure", "profile")

# Create main Typer app
app = typer.Typer(
    name="iz",
    help=PROJECT_TAGLINE,
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# Add command groups
app.add_typer(config_app, name="config")
app.add_typer(profiles_app, name="profiles")
app.add_typer(sessions_app, name="sessions")
app.command("reset")(reset_command)

# Create console for output
console = Console()


@app.command("version")
def version() -> None:
    """Show version information."""
    print_panel(
        f"[bold cyan]izanami-cli[/bold cyan] version [green]{VERSION}[/green]\n\n"
        f"{PROJECT_TAGLINE}\n\n"
        f"[dim]{PROJECT_URL}[/dim]",
        title="Version",
        style="cyan",
    )


def _configure_logging(debug: bool) -> None:
    """Route library logging to stderr through Rich."""
    handler = RichHandler(
        console=Console(stderr=True), show_time=False, show_path=False, markup=False
    )
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _color_mode(invocation: InvocationContext) -> ColorMode:
    """Color mode from the global ``color`` key; unreadable config means auto."""
    try:
        value = ConfigService(invocation.config_path, invocation.environ).get_global_value(
            KEY_COLOR
        )
    except ConfigFileError as e:
        logger.debug("Could not read color setting: %s", e)
        return ColorMode.AUTO
    if value in ColorMode.values():
        return ColorMode(value)
    return ColorMode.AUTO


def _flags_set(ctx: typer.Context) -> frozenset[str]:
    """Names of the global flags given on the command line.

    Sources are compared by name: typer may carry its own copy of click, whose
    ParameterSource enum is not the one installed as ``click``.
    """
    return frozenset(
        name
        for name in GLOBAL_FLAG_NAMES
        if getattr(ctx.get_parameter_source(name), "name", "") == "COMMANDLINE"
    )


@app.callback()
def main(
    ctx: typer.Context,
    url: str = typer.Option("", "--url", help="Izanami leader URL (env: IZ_LEADER_URL)"),
    tenant: str = typer.Option("", "--tenant", help="Tenant (env: IZ_TENANT)"),
    project: str = typer.Option("", "--project", help="Project (env: IZ_PROJECT)"),
    context: str = typer.Option("", "--context", help="Feature context (env: IZ_CONTEXT)"),
    timeout: int = typer.Option(0, "--timeout", help="Request timeout in seconds"),
    insecure: bool = typer.Option(
        False, "--insecure", help="Skip TLS certificate verification"
    ),
    profile: str = typer.Option("", "--profile", help="Profile to use instead of the active one"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Explain configuration sources"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress normal output"),
    version_flag: bool | None = typer.Option(
        None,
        "--version",
        help="Show version information",
        is_eager=True,
    ),
    debug: bool = typer.Option(False, "--debug", hidden=True),
) -> None:
    """iz - command-line client for Izanami.

    Configuration is resolved from flags, IZ_* environment variables, the
    selected profile, its session, the config file and built-in defaults.

    Get started:
        iz config init                          # Create a config file
        iz profiles add prod --url <url>        # Add a profile
        iz -v config resolve                    # Explain the effective config
    """
    try:
        validate_output_flags(verbose=verbose, quiet=quiet)
    except AmbiguousInputError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if version_flag:
        version()
        raise typer.Exit()

    _configure_logging(debug)

    invocation = InvocationContext(
        flags=FlagValues(
            url=url,
            tenant=tenant,
            project=project,
            context=context,
            timeout=timeout,
            insecure=insecure,
            profile=profile,
        ),
        flags_set=_flags_set(ctx),
        verbose=verbose,
        quiet=quiet,
    )
    color = _color_mode(invocation)
    invocation.console = build_console(quiet=quiet, color=color)
    invocation.err_console = build_console(stderr=True, color=color)
    ctx.obj = invocation


def cli_main() -> None:
    """Main entry point for the CLI.

    This is the function that gets called when running the 'iz' command.
    It handles exceptions and provides user-friendly error messages.
    """
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        if isinstance(e, typer.Exit):
            sys.exit(e.exit_code)

        print_error(ERROR_MESSAGES["generic_error"].format(error=str(e)))

        # Show traceback in debug mode
        if "--debug" in sys.argv:
            import traceback

            console.print("\n[dim]Traceback:[/dim]")
            traceback.print_exc()

        sys.exit(1)


if __name__ == "__main__":
    cli_main()
