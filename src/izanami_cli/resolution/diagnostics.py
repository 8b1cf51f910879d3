"""Verbose diagnostics for the resolved configuration.

Every function here only writes lines to the invocation's stderr console.
None of them raises for missing data: an absent field is simply not shown.
"""

from izanami_cli.config.messages import VERBOSE_MESSAGES
from izanami_cli.constants import ENV_PREFIX, REDACTED_VALUE
from izanami_cli.models.enums import ConfigField
from izanami_cli.models.resolved import ResolvedConfig
from izanami_cli.resolution.context import InvocationContext
from izanami_cli.resolution.loader import Resolution
from izanami_cli.resolution.registry import CONFIG_FIELDS, get_resolved_field_value
from izanami_cli.resolution.sources import determine_config_source
from izanami_cli.utils.console import print_plain
from izanami_cli.utils.env_utils import display_env_value, prefixed_variables

ADMIN_AUTH_PAT = "Personal Access Token (PAT)"
ADMIN_AUTH_SESSION = "JWT Cookie (session)"
CLIENT_AUTH_KEY = "Client API Key"
AUTH_NONE = "none"


def should_display(field: ConfigField, value: str) -> bool:
    """Whether a field appears in the effective-config listing.

    Timeout is always listed, even at zero. Insecure is listed only when
    true. Any other field is listed when non-empty.
    """
    if field is ConfigField.TIMEOUT:
        return True
    if field is ConfigField.INSECURE:
        return value == "true"
    return value != ""


def log_effective_config(ctx: InvocationContext, resolution: Resolution) -> None:
    """Print each registry field with its value and source."""
    for info in CONFIG_FIELDS:
        value = get_resolved_field_value(resolution.config, info.field)
        if not should_display(info.field, value):
            continue
        source = determine_config_source(
            ctx,
            info,
            profile=resolution.profile,
            session=resolution.session,
            document=resolution.document,
        )
        shown = REDACTED_VALUE if info.sensitive and value else value
        print_plain(
            VERBOSE_MESSAGES["config_field"].format(key=info.key, value=shown, source=source.value),
            out=ctx.err_console,
        )


def log_environment_variables(ctx: InvocationContext) -> None:
    """Print every IZ_* variable, sorted by name, redacting secrets and tokens."""
    names = prefixed_variables(ctx.environ, ENV_PREFIX)
    if not names:
        print_plain(VERBOSE_MESSAGES["env_none"], out=ctx.err_console)
        return
    for name in names:
        value = display_env_value(name, ctx.environ[name])
        print_plain(VERBOSE_MESSAGES["env_var"].format(name=name, value=value), out=ctx.err_console)


def describe_authentication(config: ResolvedConfig) -> tuple[str, str]:
    """Return (admin mode, feature-check mode) labels.

    A personal access token beats a session token for admin operations.
    """
    if config.has_personal_access_token:
        admin = ADMIN_AUTH_PAT
    elif config.has_session_token:
        admin = ADMIN_AUTH_SESSION
    else:
        admin = AUTH_NONE
    client = CLIENT_AUTH_KEY if config.has_client_credentials else AUTH_NONE
    return admin, client


def log_authentication_mode(ctx: InvocationContext, config: ResolvedConfig) -> None:
    admin, client = describe_authentication(config)
    print_plain(
        VERBOSE_MESSAGES["auth_mode"].format(admin=admin, client=client), out=ctx.err_console
    )


def log_profile(ctx: InvocationContext, resolution: Resolution) -> None:
    if not resolution.profile_name:
        return
    key = "profile_from_flag" if resolution.profile_from_flag else "profile_active"
    print_plain(
        VERBOSE_MESSAGES[key].format(name=resolution.profile_name), out=ctx.err_console
    )


def log_diagnostics(ctx: InvocationContext, resolution: Resolution) -> None:
    """Print the full verbose report for an invocation."""
    log_profile(ctx, resolution)
    log_effective_config(ctx, resolution)
    log_environment_variables(ctx)
    log_authentication_mode(ctx, resolution.config)
