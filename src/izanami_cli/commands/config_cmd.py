"""Config commands for izanami-cli.

Commands for reading and editing the global keys of the config document,
creating and validating the file, and explaining the effective
configuration of an invocation.
"""

import typer
from rich.table import Table

from izanami_cli.config.messages import INFO_MESSAGES, SUCCESS_MESSAGES
from izanami_cli.constants import GLOBAL_CONFIG_KEYS, REDACTED_VALUE, SENSITIVE_CONFIG_KEYS
from izanami_cli.models.enums import ConfigSource, Requirement
from izanami_cli.resolution import (
    CONFIG_FIELDS,
    apply_worker,
    determine_config_source,
    resolve_client_credentials,
    resolve_invocation,
    resolve_worker,
    resolve_worker_from_profile,
)
from izanami_cli.resolution.registry import get_resolved_field_value
from izanami_cli.services.config_service import ConfigService
from izanami_cli.utils import print_error, print_info, print_plain, print_success
from izanami_cli.utils.command_decorators import get_invocation, handle_iz_errors

config_app = typer.Typer(
    name="config",
    help="Manage the izanami-cli configuration file",
    no_args_is_help=True,
)


def _service(ctx: typer.Context) -> ConfigService:
    inv = get_invocation(ctx)
    return ConfigService(inv.config_path, inv.environ)


@config_app.command("set")
@handle_iz_errors
def config_set(
    ctx: typer.Context,
    key: str = typer.Argument(..., help=f"Global key: {', '.join(GLOBAL_CONFIG_KEYS)}"),
    value: str = typer.Argument(..., help="Value to store"),
) -> None:
    """Set a global configuration value."""
    inv = get_invocation(ctx)
    _service(ctx).set_config_value(key, value)
    print_success(SUCCESS_MESSAGES["config_set"].format(key=key, value=value), out=inv.console)


@config_app.command("get")
@handle_iz_errors
def config_get(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Configuration key"),
    show_secrets: bool = typer.Option(False, "--show-secrets", help="Show sensitive values"),
) -> None:
    """Show a configuration value and where it comes from."""
    inv = get_invocation(ctx)
    config_value = _service(ctx).get_config_value(key)
    if config_value.source == ConfigSource.NOT_SET:
        print_plain(f"{key}: {INFO_MESSAGES['config_value_not_set']}", out=inv.console)
        return
    value = config_value.value
    if key in SENSITIVE_CONFIG_KEYS and not show_secrets:
        value = REDACTED_VALUE
    print_plain(f"{key}: {value} (source: {config_value.source.value})", out=inv.console)


@config_app.command("unset")
@handle_iz_errors
def config_unset(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Global key to remove from the file"),
) -> None:
    """Remove a global value from the configuration file."""
    inv = get_invocation(ctx)
    _service(ctx).unset_config_value(key)
    print_success(SUCCESS_MESSAGES["config_unset"].format(key=key), out=inv.console)


@config_app.command("list")
@handle_iz_errors
def config_list(
    ctx: typer.Context,
    show_secrets: bool = typer.Option(False, "--show-secrets", help="Show sensitive values"),
) -> None:
    """List every configuration key with its value and source."""
    inv = get_invocation(ctx)
    values = _service(ctx).get_all_config_values()

    table = Table(title="Configuration")
    table.add_column("KEY", style="cyan", no_wrap=True)
    table.add_column("VALUE", overflow="fold")
    table.add_column("SOURCE", style="dim", no_wrap=True)

    for key, config_value in values.items():
        value = config_value.value
        if value and key in SENSITIVE_CONFIG_KEYS and not show_secrets:
            value = REDACTED_VALUE
        table.add_row(key, value or "-", config_value.source.value)

    inv.console.print(table)


@config_app.command("path")
def config_path(ctx: typer.Context) -> None:
    """Show where the configuration and sessions files live."""
    inv = get_invocation(ctx)
    print_plain(f"Config file: {inv.config_path}", out=inv.console)
    print_plain(f"Config directory: {inv.config_path.parent}", out=inv.console)
    print_plain(f"Sessions file: {inv.sessions_path}", out=inv.console)
    status = "exists" if inv.config_path.exists() else "not created (run 'iz config init')"
    print_plain(f"Status: {status}", out=inv.console)


@config_app.command("init")
@handle_iz_errors
def config_init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Create a sample configuration file."""
    inv = get_invocation(ctx)
    path = _service(ctx).init_config_file(force=force)
    print_success(SUCCESS_MESSAGES["config_initialized"].format(path=path), out=inv.console)
    print_info(
        "File permissions are 0600. Tokens are stored in plaintext; "
        "never commit this file to version control.",
        out=inv.console,
    )


@config_app.command("validate")
def config_validate(ctx: typer.Context) -> None:
    """Validate the configuration file."""
    inv = get_invocation(ctx)
    is_valid, issues = _service(ctx).validate_config()
    if is_valid:
        print_success(SUCCESS_MESSAGES["config_valid"], out=inv.console)
        return

    print_error(INFO_MESSAGES["validation_issues"].format(count=len(issues)), out=inv.err_console)
    for issue in issues:
        print_plain(f"  - {issue}", out=inv.err_console)
    raise typer.Exit(code=1)


@config_app.command("resolve")
@handle_iz_errors
def config_resolve(
    ctx: typer.Context,
    worker: str = typer.Option("", "--worker", "-w", help="Named worker to use"),
    client_id: str = typer.Option("", "--client-id", help="Client ID (env: IZ_CLIENT_ID)"),
    client_secret: str = typer.Option(
        "", "--client-secret", help="Client secret (env: IZ_CLIENT_SECRET)"
    ),
    client_base_url: str = typer.Option(
        "", "--client-base-url", help="Base URL for client operations (env: IZ_CLIENT_BASE_URL)"
    ),
    require: list[Requirement] | None = typer.Option(
        None,
        "--require",
        help="Fail unless the resolved config supports admin, client or tenant operations",
    ),
    show_secrets: bool = typer.Option(False, "--show-secrets", help="Show sensitive values"),
) -> None:
    """Show the effective configuration for this invocation.

    Runs the same resolution as every other command (flags, environment,
    profile, session, file, defaults) and shows where each value came from.
    """
    inv = get_invocation(ctx)
    resolution = resolve_invocation(inv)
    config = resolution.config

    workers, default_worker = resolve_worker_from_profile(resolution.profile)
    resolved_worker = resolve_worker(worker, workers, default_worker, inv.environ)
    apply_worker(config, resolved_worker)

    projects = [config.project] if config.project else []
    resolve_client_credentials(
        inv,
        config,
        flag_client_id=client_id,
        flag_client_secret=client_secret,
        worker_client_keys=resolved_worker.client_keys,
        projects=projects,
        flag_client_base_url=client_base_url,
    )
    for requirement in require or []:
        config.check(requirement)

    table = Table(title="Effective configuration")
    table.add_column("FIELD", style="cyan", no_wrap=True)
    table.add_column("VALUE", overflow="fold")
    table.add_column("SOURCE", style="dim", no_wrap=True)

    for info in CONFIG_FIELDS:
        value = get_resolved_field_value(config, info.field)
        if value and info.sensitive and not show_secrets:
            value = REDACTED_VALUE
        source = determine_config_source(
            inv,
            info,
            profile=resolution.profile,
            session=resolution.session,
            document=resolution.document,
        )
        table.add_row(info.key, value or "-", source.value)

    inv.console.print(table)
    print_plain(f"Profile: {resolution.profile_name or '(none)'}", out=inv.console)
    print_plain(f"Endpoint: {config.get_worker_url() or '(none)'}", out=inv.console)
