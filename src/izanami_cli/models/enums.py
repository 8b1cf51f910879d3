"""Enum types for izanami-cli.

This module provides type-safe enumerations for source attribution,
resolvable configuration fields, and the constrained values of global
settings.
"""

from enum import Enum


class ConfigSource(str, Enum):
    """Layer that supplied a resolved configuration value."""

    FLAG = "flag"
    ENV = "env"
    SESSION = "session"
    PROFILE = "profile"
    FILE = "file"
    DEFAULT = "default"
    NOT_SET = "not set"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all source values."""
        return [s.value for s in cls]


class ConfigField(str, Enum):
    """Resolvable configuration fields, keyed by their canonical name."""

    LEADER_URL = "leader-url"
    CLIENT_ID = "client-id"
    CLIENT_SECRET = "client-secret"
    TENANT = "tenant"
    PROJECT = "project"
    CONTEXT = "context"
    TIMEOUT = "timeout"
    INSECURE = "insecure"
    DEFAULT_WORKER = "default-worker"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all field keys."""
        return [f.value for f in cls]

    @classmethod
    def lookup(cls, key: str) -> "ConfigField | None":
        """Return the field for a key, or None when the key is unknown."""
        try:
            return cls(key)
        except ValueError:
            return None


class OutputFormat(str, Enum):
    """Output format values for the output-format key."""

    TABLE = "table"
    JSON = "json"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all formats."""
        return [f.value for f in cls]


class ColorMode(str, Enum):
    """Color mode values for the color key."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all color modes."""
        return [m.value for m in cls]


class WorkerSource(str, Enum):
    """How a worker endpoint was selected."""

    FLAG = "flag"
    ENV_NAME = "env-name"
    ENV_URL = "env-url"
    DEFAULT = "default"
    STANDALONE = "standalone"  # Leader URL, no worker


class AuthMethod(str, Enum):
    """How a session was authenticated."""

    PASSWORD = "password"
    OIDC = "oidc"


class Requirement(str, Enum):
    """Checks ``iz config resolve --require`` can run on the resolved config."""

    ADMIN = "admin"
    CLIENT = "client"
    TENANT = "tenant"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all requirement names."""
        return [r.value for r in cls]
