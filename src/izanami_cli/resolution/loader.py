"""Build the ResolvedConfig for one invocation.

Layers are merged from lowest to highest precedence:

    1. Config document globals (file, IZ_<key>, defaults)
    2. Session referenced by the profile (URL, username, token)
    3. Profile fields (a profile leader URL beats the session URL)
    4. Environment variables (IZ_LEADER_URL, IZ_TENANT, ...)
    5. Flags given on the command line
"""

import logging
from dataclasses import dataclass

from izanami_cli.config.messages import ERROR_MESSAGES
from izanami_cli.constants import (
    ENV_CLIENT_BASE_URL,
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    ENV_CONTEXT,
    ENV_JWT_TOKEN,
    ENV_LEADER_URL,
    ENV_PAT,
    ENV_PAT_USERNAME,
    ENV_PROJECT,
    ENV_TENANT,
    KEY_COLOR,
    KEY_OUTPUT_FORMAT,
    KEY_TIMEOUT,
    KEY_VERBOSE,
)
from izanami_cli.exceptions import NotFoundError
from izanami_cli.models.config import ConfigDocument, Profile
from izanami_cli.models.resolved import ResolvedConfig
from izanami_cli.models.session import Session
from izanami_cli.resolution.context import InvocationContext
from izanami_cli.services.config_service import ConfigService, resolve_global_value
from izanami_cli.services.session_service import SessionService

logger = logging.getLogger(__name__)

# Environment variables merged over profile values, by ResolvedConfig attribute
ENV_OVERRIDES: tuple[tuple[str, str], ...] = (
    ("leader_url", ENV_LEADER_URL),
    ("client_base_url", ENV_CLIENT_BASE_URL),
    ("client_id", ENV_CLIENT_ID),
    ("client_secret", ENV_CLIENT_SECRET),
    ("tenant", ENV_TENANT),
    ("project", ENV_PROJECT),
    ("context", ENV_CONTEXT),
    ("personal_access_token_username", ENV_PAT_USERNAME),
    ("personal_access_token", ENV_PAT),
    ("jwt_token", ENV_JWT_TOKEN),
)

# String flags merged last, by ResolvedConfig attribute
FLAG_OVERRIDES: tuple[tuple[str, str], ...] = (
    ("leader_url", "url"),
    ("tenant", "tenant"),
    ("project", "project"),
    ("context", "context"),
)


@dataclass
class Resolution:
    """Resolved configuration plus the inputs needed to explain it."""

    config: ResolvedConfig
    document: ConfigDocument
    profile_name: str = ""
    profile: Profile | None = None
    session: Session | None = None
    profile_from_flag: bool = False


def config_from_document(document: ConfigDocument, ctx: InvocationContext) -> ResolvedConfig:
    """Start a ResolvedConfig from the document's global settings."""
    return ResolvedConfig(
        timeout=int(resolve_global_value(document, KEY_TIMEOUT, ctx.environ)),
        verbose=bool(resolve_global_value(document, KEY_VERBOSE, ctx.environ)),
        output_format=str(resolve_global_value(document, KEY_OUTPUT_FORMAT, ctx.environ)),
        color=str(resolve_global_value(document, KEY_COLOR, ctx.environ)),
    )


def merge_session(config: ResolvedConfig, session: Session) -> None:
    """Apply a session's URL and authentication material."""
    if session.url:
        config.leader_url = session.url
    if session.username:
        config.username = session.username
    if session.jwt_token:
        config.jwt_token = session.jwt_token
    if session.auth_method:
        config.auth_method = session.auth_method


def merge_profile(config: ResolvedConfig, profile: Profile, document: ConfigDocument) -> None:
    """Apply profile values over the session layer.

    Session tokens never come from a profile; personal access tokens never
    come from a session. Profile client keys take precedence over the
    document-level store, tenant by tenant.
    """
    if profile.leader_url:
        config.leader_url = profile.leader_url
    for attr in (
        "client_base_url",
        "personal_access_token_username",
        "personal_access_token",
        "tenant",
        "project",
        "context",
        "client_id",
        "client_secret",
    ):
        value = getattr(profile, attr)
        if value:
            setattr(config, attr, value)
    if profile.insecure_skip_verify:
        config.insecure_skip_verify = True

    config.client_keys = dict(profile.client_keys)
    for tenant, keys in document.client_keys.items():
        config.client_keys.setdefault(tenant, keys)


def merge_environment(config: ResolvedConfig, ctx: InvocationContext) -> None:
    for attr, env_var in ENV_OVERRIDES:
        value = ctx.getenv(env_var)
        if value:
            setattr(config, attr, value)


def merge_flags(config: ResolvedConfig, ctx: InvocationContext) -> None:
    """Apply flags given on the command line.

    A zero timeout and a false insecure flag leave the lower layers in place.
    """
    for attr, flag in FLAG_OVERRIDES:
        value = getattr(ctx.flags, flag)
        if ctx.flag_changed(flag) and value:
            setattr(config, attr, value)
    if ctx.flag_changed("timeout") and ctx.flags.timeout > 0:
        config.timeout = ctx.flags.timeout
    if ctx.flag_changed("insecure") and ctx.flags.insecure:
        config.insecure_skip_verify = True


def select_profile(document: ConfigDocument, ctx: InvocationContext) -> tuple[str, Profile | None]:
    """Pick the profile named by --profile, else the active profile.

    Raises:
        NotFoundError: If --profile names a profile that does not exist
    """
    if ctx.profile_from_flag:
        name = ctx.flags.profile
        profile = document.profiles.get(name)
        if profile is None:
            reason = ERROR_MESSAGES["profile_not_found"].format(name=name)
            raise NotFoundError(
                ERROR_MESSAGES["profile_load_failed"].format(name=name, error=reason),
                "profile",
                name,
            )
        return name, profile

    name = document.active_profile
    if not name:
        return "", None
    profile = document.profiles.get(name)
    if profile is None:
        logger.debug("Active profile %s does not exist; continuing without a profile", name)
        return "", None
    return name, profile


def load_session(ctx: InvocationContext, profile: Profile | None) -> Session | None:
    """Load the session a profile references; a dangling reference is ignored."""
    if profile is None or not profile.session:
        return None
    sessions, _ = SessionService(ctx.sessions_path).list_sessions()
    session = sessions.get(profile.session)
    if session is None:
        logger.debug("Profile references unknown session %s", profile.session)
    return session


def load_config_with_profile(ctx: InvocationContext) -> Resolution:
    """Resolve the effective configuration for an invocation.

    Raises:
        NotFoundError: If --profile names a missing profile
        ConfigFileError: If the config or sessions document cannot be read
    """
    document = ConfigService(ctx.config_path, ctx.environ).load_document()
    config = config_from_document(document, ctx)

    profile_name, profile = select_profile(document, ctx)
    session = load_session(ctx, profile)

    if session is not None:
        merge_session(config, session)
    if profile is not None:
        merge_profile(config, profile, document)
    else:
        config.client_keys = dict(document.client_keys)
    merge_environment(config, ctx)
    merge_flags(config, ctx)

    if ctx.verbose:
        config.verbose = True
    elif ctx.quiet:
        config.verbose = False

    return Resolution(
        config=config,
        document=document,
        profile_name=profile_name,
        profile=profile,
        session=session,
        profile_from_flag=ctx.profile_from_flag,
    )
