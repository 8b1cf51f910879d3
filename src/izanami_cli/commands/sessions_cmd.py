"""Session commands for izanami-cli."""

import typer
from rich.table import Table

from izanami_cli.config.messages import INFO_MESSAGES, SUCCESS_MESSAGES
from izanami_cli.services.session_service import SessionService
from izanami_cli.utils import print_info, print_success
from izanami_cli.utils.command_decorators import get_invocation, handle_iz_errors

sessions_app = typer.Typer(
    name="sessions",
    help="Manage saved login sessions",
    no_args_is_help=True,
)


def _service(ctx: typer.Context) -> SessionService:
    return SessionService(get_invocation(ctx).sessions_path)


@sessions_app.command("list")
@handle_iz_errors
def sessions_list(ctx: typer.Context) -> None:
    """List saved sessions."""
    inv = get_invocation(ctx)
    sessions, active = _service(ctx).list_sessions()
    if not sessions:
        print_info(INFO_MESSAGES["no_sessions"], out=inv.console)
        return

    table = Table(title="Sessions")
    table.add_column("ACTIVE", no_wrap=True)
    table.add_column("NAME", style="cyan", no_wrap=True)
    table.add_column("URL", overflow="fold")
    table.add_column("USER")
    table.add_column("STATUS", no_wrap=True)
    for name in sorted(sessions):
        session = sessions[name]
        if not session.is_logged_in:
            status = "logged out"
        elif session.is_token_expired():
            status = "expired"
        else:
            status = "active"
        table.add_row(
            "*" if name == active else "",
            name,
            session.url,
            session.username or "-",
            status,
        )
    inv.console.print(table)


@sessions_app.command("use")
@handle_iz_errors
def sessions_use(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Session to activate"),
) -> None:
    """Switch the active session."""
    inv = get_invocation(ctx)
    _service(ctx).use_session(name)
    print_success(SUCCESS_MESSAGES["session_activated"].format(name=name), out=inv.console)


@sessions_app.command("delete")
@handle_iz_errors
def sessions_delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Session to delete"),
) -> None:
    """Delete a saved session."""
    inv = get_invocation(ctx)
    _service(ctx).delete_session(name)
    print_success(SUCCESS_MESSAGES["session_deleted"].format(name=name), out=inv.console)


@sessions_app.command("logout")
@handle_iz_errors
def sessions_logout(
    ctx: typer.Context,
    name: str = typer.Argument("", help="Session to log out of (defaults to the active one)"),
) -> None:
    """Clear the token of a session, keeping the entry for the next login."""
    inv = get_invocation(ctx)
    target = _service(ctx).logout(name or None)
    print_success(SUCCESS_MESSAGES["session_logged_out"].format(name=target), out=inv.console)
