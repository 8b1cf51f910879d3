"""Constants for izanami-cli.

This module contains:
- VERSION: Package version
- Config document keys and the global/profile/sensitive key sets
- Compiled-in defaults for global keys
- Environment variable names
- Default config template

For paths and messages, import from:
- izanami_cli.config.paths
- izanami_cli.config.messages

For type-safe enums, import from:
- izanami_cli.models.enums
"""

from izanami_cli import __version__

# =============================================================================
# Version
# =============================================================================

VERSION = __version__

# =============================================================================
# Config Document Keys
# =============================================================================

KEY_LEADER_URL = "leader-url"
KEY_CLIENT_BASE_URL = "client-base-url"
KEY_CLIENT_ID = "client-id"
KEY_CLIENT_SECRET = "client-secret"
KEY_PAT_USERNAME = "personal-access-token-username"
KEY_JWT_TOKEN = "jwt-token"
KEY_PAT = "personal-access-token"
KEY_TENANT = "tenant"
KEY_PROJECT = "project"
KEY_CONTEXT = "context"
KEY_TIMEOUT = "timeout"
KEY_VERBOSE = "verbose"
KEY_OUTPUT_FORMAT = "output-format"
KEY_COLOR = "color"
KEY_CLIENT_KEYS = "client-keys"
KEY_PROFILES = "profiles"
KEY_ACTIVE_PROFILE = "active_profile"
KEY_DEFAULT_WORKER = "default-worker"
KEY_INSECURE = "insecure"
KEY_SESSION = "session"

# Keys stored at the top level of the config document
GLOBAL_CONFIG_KEYS: tuple[str, ...] = (
    KEY_TIMEOUT,
    KEY_VERBOSE,
    KEY_OUTPUT_FORMAT,
    KEY_COLOR,
)

# Keys that belong to a profile and are edited with `iz profiles set`
PROFILE_CONFIG_KEYS: tuple[str, ...] = (
    KEY_LEADER_URL,
    KEY_CLIENT_BASE_URL,
    KEY_CLIENT_ID,
    KEY_CLIENT_SECRET,
    KEY_PAT_USERNAME,
    KEY_JWT_TOKEN,
    KEY_PAT,
    KEY_TENANT,
    KEY_PROJECT,
    KEY_CONTEXT,
    KEY_CLIENT_KEYS,
    KEY_DEFAULT_WORKER,
)

# Every key `iz config get` and `iz config list` know about
VALID_CONFIG_KEYS: tuple[str, ...] = (
    KEY_LEADER_URL,
    KEY_CLIENT_ID,
    KEY_CLIENT_SECRET,
    KEY_PAT_USERNAME,
    KEY_JWT_TOKEN,
    KEY_PAT,
    KEY_TENANT,
    KEY_PROJECT,
    KEY_CONTEXT,
    KEY_TIMEOUT,
    KEY_VERBOSE,
    KEY_OUTPUT_FORMAT,
    KEY_COLOR,
    KEY_CLIENT_KEYS,
    KEY_PROFILES,
    KEY_DEFAULT_WORKER,
)

SENSITIVE_CONFIG_KEYS: frozenset[str] = frozenset(
    {KEY_CLIENT_SECRET, KEY_JWT_TOKEN, KEY_PAT, KEY_CLIENT_KEYS, KEY_PROFILES}
)

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_TIMEOUT = 30
DEFAULT_VERBOSE = False
DEFAULT_OUTPUT_FORMAT = "table"
DEFAULT_COLOR = "auto"

GLOBAL_DEFAULTS: dict[str, int | bool | str] = {
    KEY_TIMEOUT: DEFAULT_TIMEOUT,
    KEY_VERBOSE: DEFAULT_VERBOSE,
    KEY_OUTPUT_FORMAT: DEFAULT_OUTPUT_FORMAT,
    KEY_COLOR: DEFAULT_COLOR,
}

DEFAULT_SESSION_MAX_AGE_HOURS = 24

# =============================================================================
# Display
# =============================================================================

REDACTED_VALUE = "<redacted>"

# =============================================================================
# Environment Variables
# =============================================================================

ENV_PREFIX = "IZ_"

ENV_LEADER_URL = "IZ_LEADER_URL"
ENV_CLIENT_BASE_URL = "IZ_CLIENT_BASE_URL"
ENV_CLIENT_ID = "IZ_CLIENT_ID"
ENV_CLIENT_SECRET = "IZ_CLIENT_SECRET"
ENV_TENANT = "IZ_TENANT"
ENV_PROJECT = "IZ_PROJECT"
ENV_CONTEXT = "IZ_CONTEXT"
ENV_PAT_USERNAME = "IZ_PERSONAL_ACCESS_TOKEN_USERNAME"
ENV_PAT = "IZ_PERSONAL_ACCESS_TOKEN"
ENV_JWT_TOKEN = "IZ_JWT_TOKEN"
ENV_WORKER = "IZ_WORKER"
ENV_WORKER_URL = "IZ_WORKER_URL"

# Substrings marking an environment variable whose value must be redacted
SENSITIVE_ENV_MARKERS: tuple[str, ...] = ("SECRET", "TOKEN")

# =============================================================================
# Default Config Template
# =============================================================================

DEFAULT_CONFIG_YAML = """# Izanami CLI configuration
#
# Global settings apply to every profile. Connection settings (leader-url,
# tenant, project, credentials) belong to profiles:
#
#   iz profiles add sandbox --url http://localhost:9000 --tenant my-tenant
#   iz profiles use sandbox
#
# Values in this file beat IZ_<key> environment variables; flags override both.

# Request timeout in seconds
timeout: 30

# Print diagnostics for commands that resolve the configuration
verbose: false

# Default output format: table or json
output-format: table

# Colored output: auto, always or never
color: auto
"""

CONFIG_GITIGNORE = """# Credentials and session material must never be committed
*
"""
