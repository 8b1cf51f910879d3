"""Per-invocation resolution results.

These are plain dataclasses rather than Pydantic models: they are never
persisted, and are rebuilt from scratch on every command invocation.
"""

from dataclasses import dataclass, field

from izanami_cli.config.messages import ERROR_MESSAGES
from izanami_cli.constants import (
    DEFAULT_COLOR,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_TIMEOUT,
)
from izanami_cli.exceptions import MissingRequiredError
from izanami_cli.models.config import ClientKeyStore
from izanami_cli.models.enums import ConfigSource, Requirement, WorkerSource


@dataclass
class ConfigValue:
    """A global config key with its value and where it came from."""

    key: str
    value: str
    source: ConfigSource


@dataclass
class ResolvedWorker:
    """Outcome of worker resolution.

    ``url`` and ``name`` are empty in standalone mode, where the leader URL
    is used.
    """

    source: WorkerSource
    url: str = ""
    name: str = ""
    client_keys: ClientKeyStore = field(default_factory=dict)

    @property
    def is_standalone(self) -> bool:
        return self.source == WorkerSource.STANDALONE


@dataclass
class ResolvedConfig:
    """Fully resolved configuration for one CLI invocation.

    Built from the config document, then merged with the session, the
    profile, the environment and explicitly set flags, in that order.
    """

    # Global settings
    timeout: int = DEFAULT_TIMEOUT
    verbose: bool = False
    output_format: str = DEFAULT_OUTPUT_FORMAT
    color: str = DEFAULT_COLOR

    # Connection
    leader_url: str = ""
    client_base_url: str = ""
    tenant: str = ""
    project: str = ""
    context: str = ""
    insecure_skip_verify: bool = False

    # Authentication
    username: str = ""
    jwt_token: str = ""
    auth_method: str = ""
    personal_access_token_username: str = ""
    personal_access_token: str = ""
    client_id: str = ""
    client_secret: str = ""
    client_keys: ClientKeyStore = field(default_factory=dict)

    # Worker selection
    worker_url: str = ""
    worker_name: str = ""

    @property
    def has_personal_access_token(self) -> bool:
        return bool(self.personal_access_token)

    @property
    def has_session_token(self) -> bool:
        return bool(self.jwt_token)

    @property
    def has_client_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def get_worker_url(self) -> str:
        """Return the worker URL if one was resolved, else the leader URL."""
        return self.worker_url or self.leader_url

    def get_client_url(self) -> str:
        """URL for client-facing (feature evaluation) calls."""
        return self.client_base_url or self.get_worker_url()

    def validate_base(self) -> None:
        """Check that a leader URL is available."""
        if not self.leader_url:
            raise MissingRequiredError(ERROR_MESSAGES["leader_url_required"], "leader-url")

    def validate_admin_auth(self) -> None:
        """Check that admin operations can authenticate.

        A personal access token needs its username; otherwise a session
        token is required.
        """
        self.validate_base()
        if self.personal_access_token:
            if not self.personal_access_token_username:
                raise MissingRequiredError(
                    ERROR_MESSAGES["pat_username_required"], "personal-access-token-username"
                )
            return
        if not self.jwt_token:
            raise MissingRequiredError(ERROR_MESSAGES["admin_auth_required"], "jwt-token")

    def validate_client_auth(self) -> None:
        """Check that feature checks can authenticate."""
        if not self.get_client_url():
            raise MissingRequiredError(ERROR_MESSAGES["leader_url_required"], "leader-url")
        if not self.has_client_credentials:
            raise MissingRequiredError(ERROR_MESSAGES["client_auth_required"], "client-id")

    def validate_tenant(self) -> None:
        if not self.tenant:
            raise MissingRequiredError(ERROR_MESSAGES["tenant_required_hint"], "tenant")

    def check(self, requirement: Requirement) -> None:
        """Run the validation named by ``requirement``.

        Raises:
            MissingRequiredError: If the requirement is not met
        """
        requirement = Requirement(requirement)
        if requirement is Requirement.ADMIN:
            self.validate_admin_auth()
        elif requirement is Requirement.CLIENT:
            self.validate_client_auth()
        else:
            self.validate_tenant()
