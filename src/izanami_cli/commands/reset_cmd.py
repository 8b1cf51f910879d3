"""Reset command for izanami-cli.

Backs up and removes the config and sessions documents so the CLI starts
from a clean slate.
"""

import typer

from izanami_cli.config.messages import (
    ERROR_MESSAGES,
    INFO_MESSAGES,
    PROMPTS,
    SUCCESS_MESSAGES,
)
from izanami_cli.services.reset_service import ResetService
from izanami_cli.utils import print_error, print_info, print_plain, print_success, print_warning
from izanami_cli.utils.command_decorators import confirm, get_invocation, handle_iz_errors


@handle_iz_errors
def reset_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Back up and delete the configuration and sessions files.

    Both files are copied to ``<file>.backup.<timestamp>`` first, with the
    same timestamp, then removed.
    """
    inv = get_invocation(ctx)
    service = ResetService(inv.config_path, inv.sessions_path)

    files = service.existing_files()
    if not files:
        print_error(ERROR_MESSAGES["nothing_to_reset"], out=inv.err_console)
        raise typer.Exit(code=1)

    print_warning(INFO_MESSAGES["reset_files_header"], out=inv.err_console)
    for path in files:
        print_plain(f"  - {path}", out=inv.err_console)

    if not force and not confirm(PROMPTS["reset_confirm"]):
        print_info(INFO_MESSAGES["cancelled"], out=inv.console)
        raise typer.Exit(code=0)

    result = service.reset()

    for original, backup in result.backups.items():
        key = "config_backed_up" if original == inv.config_path else "sessions_backed_up"
        print_success(SUCCESS_MESSAGES[key].format(path=backup), out=inv.console)
    for original in result.backups:
        key = "config_deleted" if original == inv.config_path else "sessions_deleted"
        print_success(SUCCESS_MESSAGES[key].format(path=original), out=inv.console)

    print_info("", out=inv.console)
    print_success(SUCCESS_MESSAGES["reset_complete"], out=inv.console)
    print_info(INFO_MESSAGES["reset_next_steps"], out=inv.console)
