"""Field registry: every resolvable configuration field and its overrides.

Each entry names the CLI flag and environment variable that can override the
field and whether its value must be redacted on display. Accessor tables map
a field to the matching attribute of a Profile or a ResolvedConfig.
"""

from collections.abc import Callable
from dataclasses import dataclass

from izanami_cli.constants import (
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    ENV_CONTEXT,
    ENV_LEADER_URL,
    ENV_PROJECT,
    ENV_TENANT,
)
from izanami_cli.models.config import Profile
from izanami_cli.models.enums import ConfigField
from izanami_cli.models.resolved import ResolvedConfig


@dataclass(frozen=True)
class ConfigFieldInfo:
    """Static descriptor of a resolvable field."""

    field: ConfigField
    flag_name: str = ""  # Empty when no flag overrides the field
    env_var: str = ""  # Empty when no dedicated variable overrides the field
    sensitive: bool = False

    @property
    def key(self) -> str:
        return self.field.value


# Display order of verbose diagnostics follows this tuple
CONFIG_FIELDS: tuple[ConfigFieldInfo, ...] = (
    ConfigFieldInfo(ConfigField.LEADER_URL, flag_name="url", env_var=ENV_LEADER_URL),
    ConfigFieldInfo(ConfigField.CLIENT_ID, env_var=ENV_CLIENT_ID),
    ConfigFieldInfo(ConfigField.CLIENT_SECRET, env_var=ENV_CLIENT_SECRET, sensitive=True),
    ConfigFieldInfo(ConfigField.TENANT, flag_name="tenant", env_var=ENV_TENANT),
    ConfigFieldInfo(ConfigField.PROJECT, flag_name="project", env_var=ENV_PROJECT),
    ConfigFieldInfo(ConfigField.CONTEXT, flag_name="context", env_var=ENV_CONTEXT),
    ConfigFieldInfo(ConfigField.TIMEOUT, flag_name="timeout"),
    ConfigFieldInfo(ConfigField.INSECURE, flag_name="insecure"),
)

_FIELDS_BY_ID = {info.field: info for info in CONFIG_FIELDS}


def field_info(field: ConfigField | ConfigFieldInfo) -> ConfigFieldInfo:
    """Return the registry entry of a field.

    Fields outside the registry get a bare entry with no overrides.
    """
    if isinstance(field, ConfigFieldInfo):
        return field
    return _FIELDS_BY_ID.get(field, ConfigFieldInfo(field))


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


PROFILE_FIELD_ACCESSORS: dict[ConfigField, Callable[[Profile], str]] = {
    ConfigField.LEADER_URL: lambda p: p.leader_url,
    ConfigField.DEFAULT_WORKER: lambda p: p.default_worker,
    ConfigField.CLIENT_ID: lambda p: p.client_id,
    ConfigField.CLIENT_SECRET: lambda p: p.client_secret,
    ConfigField.TENANT: lambda p: p.tenant,
    ConfigField.PROJECT: lambda p: p.project,
    ConfigField.CONTEXT: lambda p: p.context,
    ConfigField.INSECURE: lambda p: _bool_text(p.insecure_skip_verify),
}

RESOLVED_FIELD_ACCESSORS: dict[ConfigField, Callable[[ResolvedConfig], str]] = {
    ConfigField.LEADER_URL: lambda c: c.leader_url,
    ConfigField.CLIENT_ID: lambda c: c.client_id,
    ConfigField.CLIENT_SECRET: lambda c: c.client_secret,
    ConfigField.TENANT: lambda c: c.tenant,
    ConfigField.PROJECT: lambda c: c.project,
    ConfigField.CONTEXT: lambda c: c.context,
    ConfigField.TIMEOUT: lambda c: str(c.timeout),
    ConfigField.INSECURE: lambda c: _bool_text(c.insecure_skip_verify),
    ConfigField.DEFAULT_WORKER: lambda c: c.worker_name,
}


def get_profile_field_value(profile: Profile | None, key: ConfigField | str) -> str:
    """Return a profile's value for a field as display text.

    Booleans render as "true"/"false". Unknown keys, fields a profile does
    not carry, and a missing profile all give the empty string.
    """
    if profile is None:
        return ""
    field = key if isinstance(key, ConfigField) else ConfigField.lookup(key)
    accessor = PROFILE_FIELD_ACCESSORS.get(field) if field is not None else None
    if accessor is None:
        return ""
    return accessor(profile)


def get_resolved_field_value(config: ResolvedConfig, field: ConfigField) -> str:
    """Return the resolved value of a field as display text."""
    accessor = RESOLVED_FIELD_ACCESSORS.get(field)
    return accessor(config) if accessor is not None else ""
