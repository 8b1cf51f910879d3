"""Profile commands for izanami-cli.

Commands for managing profiles and the per-profile client-key store.
Worker commands live in ``workers_cmd`` and are mounted under
``iz profiles workers``. The client-key commands take ``--worker`` to act on
a worker's scoped store instead of the profile's.
"""

import typer
from rich.table import Table

from izanami_cli.commands.workers_cmd import workers_app
from izanami_cli.config.messages import (
    ERROR_MESSAGES,
    INFO_MESSAGES,
    PROMPTS,
    SUCCESS_MESSAGES,
)
from izanami_cli.constants import REDACTED_VALUE
from izanami_cli.exceptions import MissingRequiredError
from izanami_cli.models.config import Profile
from izanami_cli.resolution import resolve_invocation
from izanami_cli.resolution.context import InvocationContext
from izanami_cli.services.profile_service import (
    PROFILE_SENSITIVE_KEYS,
    PROFILE_SETTABLE_KEYS,
    ProfileService,
    flatten_client_keys,
    get_profile_service,
)
from izanami_cli.utils import print_info, print_plain, print_success, print_warning
from izanami_cli.utils.command_decorators import confirm, get_invocation, handle_iz_errors

profiles_app = typer.Typer(
    name="profiles",
    help="Manage connection profiles",
    no_args_is_help=True,
)

client_keys_app = typer.Typer(
    name="client-keys",
    help="Manage client credentials of the active profile",
    no_args_is_help=True,
)

profiles_app.add_typer(client_keys_app, name="client-keys")
profiles_app.add_typer(workers_app, name="workers")


def _service(inv: InvocationContext) -> ProfileService:
    return get_profile_service(inv.config_path)


def _target_profile(inv: InvocationContext, service: ProfileService) -> str:
    """Profile edited by set/unset: --profile when given, else the active one."""
    if inv.profile_from_flag:
        return inv.flags.profile
    name = service.get_active_profile_name()
    if not name:
        raise MissingRequiredError(ERROR_MESSAGES["no_active_profile"], "profile")
    return name


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _resolved_tenant(inv: InvocationContext) -> str:
    """Tenant from --tenant, IZ_TENANT or the active profile."""
    config = resolve_invocation(inv).config
    config.validate_tenant()
    return config.tenant


def _mask(value: str, show_secrets: bool) -> str:
    if value and not show_secrets:
        return REDACTED_VALUE
    return value


# =============================================================================
# Profiles
# =============================================================================


@profiles_app.command("list")
@handle_iz_errors
def profiles_list(ctx: typer.Context) -> None:
    """List all profiles."""
    inv = get_invocation(ctx)
    profiles, active = _service(inv).list_profiles()
    if not profiles:
        print_info(INFO_MESSAGES["no_profiles"], out=inv.console)
        return

    table = Table(title="Profiles")
    table.add_column("ACTIVE", no_wrap=True)
    table.add_column("NAME", style="cyan", no_wrap=True)
    table.add_column("LEADER URL", overflow="fold")
    table.add_column("TENANT")
    table.add_column("PROJECT")
    table.add_column("SESSION")

    for name in sorted(profiles):
        profile = profiles[name]
        table.add_row(
            "*" if name == active else "",
            name,
            profile.leader_url or "-",
            profile.tenant or "-",
            profile.project or "-",
            profile.session or "-",
        )
    inv.console.print(table)


@profiles_app.command("current")
@handle_iz_errors
def profiles_current(ctx: typer.Context) -> None:
    """Show the active profile name."""
    inv = get_invocation(ctx)
    name = _service(inv).get_active_profile_name()
    if not name:
        print_info(INFO_MESSAGES["no_active_profile"], out=inv.console)
        return
    print_plain(name, out=inv.console)


@profiles_app.command("show")
@handle_iz_errors
def profiles_show(
    ctx: typer.Context,
    name: str = typer.Argument("", help="Profile name (defaults to the active profile)"),
    show_secrets: bool = typer.Option(False, "--show-secrets", help="Show sensitive values"),
) -> None:
    """Show the settings of a profile."""
    inv = get_invocation(ctx)
    service = _service(inv)
    name = name or _target_profile(inv, service)
    profile = service.get_profile(name)

    print_plain(f"Profile: {name}", out=inv.console)
    for key, attr in PROFILE_SETTABLE_KEYS.items():
        value = getattr(profile, attr)
        if isinstance(value, bool):
            if not value:
                continue
            value = "true"
        if not value:
            continue
        if key in PROFILE_SENSITIVE_KEYS:
            value = _mask(value, show_secrets)
        print_plain(f"  {key}: {value}", out=inv.console)

    entries = flatten_client_keys(profile.client_keys)
    if entries:
        noun = "entry" if len(entries) == 1 else "entries"
        print_plain(f"  client-keys: {len(entries)} {noun}", out=inv.console)
    if profile.workers:
        print_plain(f"  workers: {', '.join(sorted(profile.workers))}", out=inv.console)


@profiles_app.command("use")
@handle_iz_errors
def profiles_use(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Profile to activate"),
) -> None:
    """Switch the active profile."""
    inv = get_invocation(ctx)
    _service(inv).set_active_profile(name)
    print_success(SUCCESS_MESSAGES["profile_activated"].format(name=name), out=inv.console)


@profiles_app.command("add")
@handle_iz_errors
def profiles_add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Profile name"),
    url: str = typer.Option("", "--url", help="Leader (admin API) URL"),
    client_base_url: str = typer.Option(
        "", "--client-base-url", help="Base URL for client operations"
    ),
    tenant: str = typer.Option("", "--tenant", help="Default tenant"),
    project: str = typer.Option("", "--project", help="Default project"),
    context: str = typer.Option("", "--context", help="Default context"),
    session: str = typer.Option("", "--session", help="Session to authenticate with"),
    insecure: bool = typer.Option(
        False, "--insecure", help="Skip TLS certificate verification"
    ),
) -> None:
    """Create a profile. The first profile becomes the active one."""
    inv = get_invocation(ctx)
    profile = Profile(
        leader_url=url,
        client_base_url=client_base_url,
        tenant=tenant,
        project=project,
        context=context,
        session=session,
        insecure_skip_verify=insecure,
    )
    activated = _service(inv).add_profile(name, profile)
    print_success(SUCCESS_MESSAGES["profile_added"].format(name=name), out=inv.console)
    if activated:
        print_info(SUCCESS_MESSAGES["profile_activated"].format(name=name), out=inv.console)


@profiles_app.command("set")
@handle_iz_errors
def profiles_set(
    ctx: typer.Context,
    key: str = typer.Argument(..., help=f"Profile key: {', '.join(PROFILE_SETTABLE_KEYS)}"),
    value: str = typer.Argument(..., help="Value to store"),
) -> None:
    """Set a value on the active profile (or the one named by --profile)."""
    inv = get_invocation(ctx)
    service = _service(inv)
    name = _target_profile(inv, service)
    service.set_profile_value(name, key, value)
    shown = _mask(value, False) if key in PROFILE_SENSITIVE_KEYS else value
    print_success(
        SUCCESS_MESSAGES["profile_value_set"].format(key=key, value=shown, name=name),
        out=inv.console,
    )


@profiles_app.command("unset")
@handle_iz_errors
def profiles_unset(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Profile key to clear"),
) -> None:
    """Clear a value on the active profile (or the one named by --profile)."""
    inv = get_invocation(ctx)
    service = _service(inv)
    name = _target_profile(inv, service)
    service.unset_profile_value(name, key)
    print_success(
        SUCCESS_MESSAGES["profile_value_unset"].format(key=key, name=name), out=inv.console
    )


@profiles_app.command("delete")
@handle_iz_errors
def profiles_delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Profile to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete a profile."""
    inv = get_invocation(ctx)
    service = _service(inv)
    service.get_profile(name)

    if not force and not confirm(PROMPTS["delete_profile_confirm"].format(name=name)):
        print_info(INFO_MESSAGES["cancelled"], out=inv.console)
        raise typer.Exit(code=0)

    service.delete_profile(name)
    print_success(SUCCESS_MESSAGES["profile_deleted"].format(name=name), out=inv.console)


# =============================================================================
# Client keys
# =============================================================================


def add_client_keys_command(
    inv: InvocationContext,
    tenant: str,
    projects: str,
    client_id: str,
    client_secret: str,
    force: bool,
    worker: str | None = None,
) -> None:
    """Store client keys after confirming any overwrite."""
    service = _service(inv)
    tenant = tenant or _resolved_tenant(inv)
    project_list = _split_csv(projects)

    existing = service.find_existing_client_keys(tenant, project_list, worker=worker)
    if existing and not force:
        print_warning(INFO_MESSAGES["client_keys_overwrite"], out=inv.err_console)
        for scope in existing:
            print_plain(f"  - {scope}", out=inv.err_console)
        if not confirm(PROMPTS["overwrite_confirm"]):
            print_info(INFO_MESSAGES["cancelled"], out=inv.console)
            raise typer.Exit(code=0)

    profile_name = service.add_client_keys(
        tenant, project_list, client_id, client_secret, worker=worker
    )
    if project_list:
        message = SUCCESS_MESSAGES["client_keys_added_projects"].format(
            tenant=tenant, projects=", ".join(project_list), profile=profile_name
        )
    else:
        message = SUCCESS_MESSAGES["client_keys_added_tenant"].format(
            tenant=tenant, profile=profile_name
        )
    print_success(message, out=inv.console)


def list_client_keys_command(
    inv: InvocationContext, show_secrets: bool, worker: str | None = None
) -> None:
    """Print a client-key store as a table."""
    store, profile_name = _service(inv).list_client_keys(worker=worker)
    entries = flatten_client_keys(store)
    if not entries:
        print_info(INFO_MESSAGES["no_client_keys"].format(profile=profile_name), out=inv.console)
        return

    title = f"Client keys ({profile_name}{'/' + worker if worker else ''})"
    table = Table(title=title)
    table.add_column("TENANT", style="cyan", no_wrap=True)
    table.add_column("SCOPE", no_wrap=True)
    table.add_column("CLIENT-ID", overflow="fold")
    table.add_column("CLIENT-SECRET", overflow="fold")
    for entry in entries:
        table.add_row(
            entry.tenant,
            entry.scope,
            entry.client_id,
            _mask(entry.client_secret, show_secrets),
        )
    inv.console.print(table)


@client_keys_app.command("add")
@handle_iz_errors
def client_keys_add(
    ctx: typer.Context,
    tenant: str = typer.Option(
        "", "--tenant", help="Tenant name (defaults to the resolved tenant)"
    ),
    projects: str = typer.Option("", "--projects", help="Project names (comma-separated)"),
    client_id: str = typer.Option(..., "--client-id", prompt="Client ID", help="Client ID"),
    client_secret: str = typer.Option(
        ..., "--client-secret", prompt="Client secret", hide_input=True, help="Client secret"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite without asking"),
    worker: str = typer.Option("", "--worker", "-w", help="Store the keys on a named worker"),
) -> None:
    """Add client credentials at tenant level, or for specific projects."""
    inv = get_invocation(ctx)
    add_client_keys_command(inv, tenant, projects, client_id, client_secret, force, worker or None)


@client_keys_app.command("list")
@handle_iz_errors
def client_keys_list(
    ctx: typer.Context,
    show_secrets: bool = typer.Option(False, "--show-secrets", help="Show client secrets"),
    worker: str = typer.Option("", "--worker", "-w", help="List a named worker's keys"),
) -> None:
    """List client credentials of the active profile."""
    list_client_keys_command(get_invocation(ctx), show_secrets, worker or None)


@client_keys_app.command("delete")
@handle_iz_errors
def client_keys_delete(
    ctx: typer.Context,
    tenant: str = typer.Option(..., "--tenant", help="Tenant name"),
    project: str = typer.Option("", "--project", help="Project name (project-level keys only)"),
    worker: str = typer.Option("", "--worker", "-w", help="Delete from a named worker"),
) -> None:
    """Delete client credentials for a tenant, or one of its projects."""
    inv = get_invocation(ctx)
    scope = _service(inv).delete_client_keys(tenant, project or None, worker=worker or None)
    print_success(SUCCESS_MESSAGES["client_keys_deleted"].format(scope=scope), out=inv.console)
