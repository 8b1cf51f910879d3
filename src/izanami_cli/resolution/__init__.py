"""Configuration and credential resolution for izanami-cli.

Usage:
    >>> ctx = InvocationContext()
    >>> resolution = resolve_invocation(ctx)
    >>> resolution.config.leader_url
"""

from izanami_cli.resolution.context import FlagValues, InvocationContext
from izanami_cli.resolution.credentials import (
    resolve_client_credentials,
    resolve_credentials_from_keys,
)
from izanami_cli.resolution.diagnostics import log_diagnostics
from izanami_cli.resolution.loader import Resolution, load_config_with_profile
from izanami_cli.resolution.registry import (
    CONFIG_FIELDS,
    ConfigFieldInfo,
    get_profile_field_value,
)
from izanami_cli.resolution.sources import SOURCE_STRATEGIES, determine_config_source
from izanami_cli.resolution.workers import (
    apply_worker,
    resolve_worker,
    resolve_worker_from_profile,
)


def resolve_invocation(ctx: InvocationContext) -> Resolution:
    """Load the effective configuration and, in verbose mode, explain it."""
    resolution = load_config_with_profile(ctx)
    if resolution.config.verbose:
        log_diagnostics(ctx, resolution)
    return resolution


__all__ = [
    "CONFIG_FIELDS",
    "ConfigFieldInfo",
    "FlagValues",
    "InvocationContext",
    "Resolution",
    "SOURCE_STRATEGIES",
    "apply_worker",
    "determine_config_source",
    "get_profile_field_value",
    "load_config_with_profile",
    "log_diagnostics",
    "resolve_client_credentials",
    "resolve_credentials_from_keys",
    "resolve_invocation",
    "resolve_worker",
    "resolve_worker_from_profile",
]
