"""Environment variable helpers for izanami-cli.

Variable names for config keys are derived by prefixing ``IZ_`` and
replacing hyphens with underscores. The key's case is kept as-is, so the
global ``timeout`` key is read from ``IZ_timeout``. Registry fields with an
explicit variable (``IZ_TENANT`` and friends) are not derived this way.
"""

from collections.abc import Mapping

from izanami_cli.constants import ENV_PREFIX, REDACTED_VALUE, SENSITIVE_ENV_MARKERS


def env_key_for(key: str) -> str:
    """Return the environment variable consulted for a config key.

    Example:
        >>> env_key_for("output-format")
        'IZ_output_format'
    """
    return ENV_PREFIX + key.replace("-", "_")


def is_sensitive_env_name(name: str) -> bool:
    """Whether an environment variable's value must be redacted for display."""
    upper = name.upper()
    return any(marker in upper for marker in SENSITIVE_ENV_MARKERS)


def prefixed_variables(environ: Mapping[str, str], prefix: str = ENV_PREFIX) -> list[str]:
    """Return the names of variables under ``prefix``, sorted."""
    return sorted(name for name in environ if name.startswith(prefix))


def display_env_value(name: str, value: str) -> str:
    """Return the value as it may be shown to the user."""
    if is_sensitive_env_name(name) and value:
        return REDACTED_VALUE
    return value


def parse_bool(value: str) -> bool:
    """Parse a boolean from its common textual spellings.

    Raises:
        ValueError: If the text is not a recognised boolean
    """
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes", "y", "on"):
        return True
    if lowered in ("false", "0", "no", "n", "off", ""):
        return False
    raise ValueError(f"not a boolean: {value!r}")
