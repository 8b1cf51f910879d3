"""Worker commands for izanami-cli.

Workers are named alternate endpoints stored on the active profile. These
commands are mounted under ``iz profiles workers``.
"""

import typer
from rich.table import Table

from izanami_cli.config.messages import INFO_MESSAGES, SUCCESS_MESSAGES
from izanami_cli.constants import REDACTED_VALUE
from izanami_cli.models.config import ClientKeyStore
from izanami_cli.models.enums import WorkerSource
from izanami_cli.resolution import (
    apply_worker,
    resolve_invocation,
    resolve_worker,
    resolve_worker_from_profile,
)
from izanami_cli.services.profile_service import flatten_client_keys, get_profile_service
from izanami_cli.utils import print_info, print_plain, print_success
from izanami_cli.utils.command_decorators import get_invocation, handle_iz_errors

workers_app = typer.Typer(
    name="workers",
    help="Manage named worker endpoints of the active profile",
    no_args_is_help=True,
)


def format_client_keys_count(store: ClientKeyStore) -> str:
    return f"{len(store)} tenant(s) configured"


@workers_app.command("add")
@handle_iz_errors
def workers_add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Worker name"),
    url: str = typer.Option(..., "--url", help="Worker base URL"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing worker"),
) -> None:
    """Add a worker. The first worker becomes the profile's default."""
    inv = get_invocation(ctx)
    became_default = get_profile_service(inv.config_path).add_worker(name, url, force=force)
    print_success(SUCCESS_MESSAGES["worker_added"].format(name=name, url=url), out=inv.console)
    if became_default:
        print_info(SUCCESS_MESSAGES["worker_default_set"].format(name=name), out=inv.console)


@workers_app.command("delete")
@handle_iz_errors
def workers_delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Worker to delete"),
) -> None:
    """Delete a worker."""
    inv = get_invocation(ctx)
    get_profile_service(inv.config_path).delete_worker(name)
    print_success(SUCCESS_MESSAGES["worker_deleted"].format(name=name), out=inv.console)


@workers_app.command("list")
@handle_iz_errors
def workers_list(ctx: typer.Context) -> None:
    """List the workers of the active profile."""
    inv = get_invocation(ctx)
    workers, default_worker, profile_name = get_profile_service(inv.config_path).list_workers()
    if not workers:
        print_info(INFO_MESSAGES["no_workers"].format(profile=profile_name), out=inv.console)
        return

    table = Table(title=f"Workers ({profile_name})")
    table.add_column("DEFAULT", no_wrap=True)
    table.add_column("NAME", style="cyan", no_wrap=True)
    table.add_column("URL", overflow="fold")
    table.add_column("CLIENT-KEYS")
    for name in sorted(workers):
        worker = workers[name]
        table.add_row(
            "*" if name == default_worker else "",
            name,
            worker.url,
            format_client_keys_count(worker.client_keys) if worker.client_keys else "-",
        )
    inv.console.print(table)


@workers_app.command("use")
@handle_iz_errors
def workers_use(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Worker to make the default"),
) -> None:
    """Set the default worker of the active profile."""
    inv = get_invocation(ctx)
    get_profile_service(inv.config_path).set_default_worker(name)
    print_success(SUCCESS_MESSAGES["worker_default_set"].format(name=name), out=inv.console)


@workers_app.command("show")
@handle_iz_errors
def workers_show(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Worker name"),
    show_secrets: bool = typer.Option(False, "--show-secrets", help="Show client secrets"),
) -> None:
    """Show a worker's URL and scoped client keys."""
    inv = get_invocation(ctx)
    worker = get_profile_service(inv.config_path).get_worker(name)
    print_plain(f"Worker: {name}", out=inv.console)
    print_plain(f"  url: {worker.url}", out=inv.console)
    for entry in flatten_client_keys(worker.client_keys):
        secret = entry.client_secret
        if secret and not show_secrets:
            secret = REDACTED_VALUE
        print_plain(
            f"  client-keys [{entry.tenant} {entry.scope}]: {entry.client_id} / {secret}",
            out=inv.console,
        )


@workers_app.command("current")
@handle_iz_errors
def workers_current(ctx: typer.Context) -> None:
    """Show which endpoint client calls would use, and why.

    Walks the full worker selection: IZ_WORKER, IZ_WORKER_URL, the profile's
    default worker, then standalone mode on the leader URL.
    """
    inv = get_invocation(ctx)
    resolution = resolve_invocation(inv)
    config = resolution.config

    workers, default_worker = resolve_worker_from_profile(resolution.profile)
    worker = resolve_worker(
        "",
        workers,
        default_worker,
        inv.environ,
        warn=lambda message: print_plain(message, out=inv.err_console),
        worker_aware=True,
    )
    apply_worker(config, worker)

    url = config.get_worker_url()
    if not url:
        print_plain(INFO_MESSAGES["worker_no_url"], out=inv.console)
        return

    if worker.source is WorkerSource.STANDALONE:
        line = INFO_MESSAGES["worker_standalone"].format(url=url)
    elif worker.source is WorkerSource.ENV_URL:
        line = INFO_MESSAGES["worker_env_url"].format(url=url)
    else:
        line = INFO_MESSAGES["worker_named"].format(
            name=worker.name, url=url, source=worker.source.value
        )
    print_plain(line, out=inv.console)

    if worker.client_keys:
        line = INFO_MESSAGES["credentials_worker"].format(
            summary=format_client_keys_count(worker.client_keys)
        )
    elif config.client_keys:
        line = INFO_MESSAGES["credentials_profile"].format(
            summary=format_client_keys_count(config.client_keys)
        )
    elif config.client_id:
        line = INFO_MESSAGES["credentials_env"]
    else:
        line = INFO_MESSAGES["credentials_none"]
    print_plain(line, out=inv.console)
