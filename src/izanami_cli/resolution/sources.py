"""Source attribution for resolved configuration fields.

The precedence chain is an ordered tuple of strategies. Each strategy looks
at a SourceQuery and either claims the field for its layer or returns None;
the first claim wins.

Order:
    1. flag     - the field's flag was given on the command line
    2. env      - the field's dedicated environment variable is non-empty
    3. session  - leader URL only, when the profile has none and the session does
    4. profile  - the profile has a value ("false" counts as no value)
    5. global   - timeout/verbose/output-format/color: file, IZ_<key>, default
    6. default
"""

from collections.abc import Callable
from dataclasses import dataclass

from izanami_cli.constants import GLOBAL_CONFIG_KEYS
from izanami_cli.models.config import ConfigDocument, Profile
from izanami_cli.models.enums import ConfigField, ConfigSource
from izanami_cli.models.session import Session
from izanami_cli.resolution.context import InvocationContext
from izanami_cli.resolution.registry import ConfigFieldInfo, field_info, get_profile_field_value
from izanami_cli.services.config_service import lookup_config_value


@dataclass
class SourceQuery:
    """Everything a strategy may consult to attribute one field."""

    ctx: InvocationContext
    info: ConfigFieldInfo
    profile: Profile | None = None
    session: Session | None = None
    document: ConfigDocument | None = None


SourceStrategy = Callable[[SourceQuery], ConfigSource | None]


def from_flag(query: SourceQuery) -> ConfigSource | None:
    if query.info.flag_name and query.ctx.flag_changed(query.info.flag_name):
        return ConfigSource.FLAG
    return None


def from_env(query: SourceQuery) -> ConfigSource | None:
    if query.info.env_var and query.ctx.getenv(query.info.env_var):
        return ConfigSource.ENV
    return None


def from_session(query: SourceQuery) -> ConfigSource | None:
    """Attribute the leader URL to the session when the profile has none."""
    if query.info.field is not ConfigField.LEADER_URL:
        return None
    if query.profile is not None and query.profile.leader_url:
        return None
    if query.session is not None and query.session.url:
        return ConfigSource.SESSION
    return None


def from_profile(query: SourceQuery) -> ConfigSource | None:
    """Attribute to the profile when it holds a value.

    A boolean false cannot be told apart from unset, so it is never claimed.
    """
    value = get_profile_field_value(query.profile, query.info.field)
    if value and value != "false":
        return ConfigSource.PROFILE
    return None


def from_global_key(query: SourceQuery) -> ConfigSource | None:
    """Delegate global keys to the config document lookup."""
    key = query.info.key
    if key not in GLOBAL_CONFIG_KEYS:
        return None
    document = query.document if query.document is not None else ConfigDocument()
    source = lookup_config_value(document, key, query.ctx.environ).source
    if source == ConfigSource.NOT_SET:
        return ConfigSource.DEFAULT
    return source


def from_default(query: SourceQuery) -> ConfigSource | None:
    return ConfigSource.DEFAULT


SOURCE_STRATEGIES: tuple[SourceStrategy, ...] = (
    from_flag,
    from_env,
    from_session,
    from_profile,
    from_global_key,
    from_default,
)


def determine_config_source(
    ctx: InvocationContext,
    field: ConfigField | ConfigFieldInfo,
    profile: Profile | None = None,
    session: Session | None = None,
    document: ConfigDocument | None = None,
    strategies: tuple[SourceStrategy, ...] = SOURCE_STRATEGIES,
) -> ConfigSource:
    """Return the layer that supplied a field's effective value.

    Args:
        ctx: Current invocation
        field: Field identifier or registry entry
        profile: Active profile, if any
        session: Session referenced by the active profile, if any
        document: Loaded config document, for global keys
        strategies: Precedence chain to evaluate, first claim wins

    Returns:
        The claiming layer; DEFAULT when no strategy claims the field
    """
    query = SourceQuery(
        ctx=ctx, info=field_info(field), profile=profile, session=session, document=document
    )
    for strategy in strategies:
        source = strategy(query)
        if source is not None:
            return source
    return ConfigSource.DEFAULT
