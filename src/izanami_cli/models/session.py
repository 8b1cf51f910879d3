"""Session document models for izanami-cli.

Sessions live in their own file (``~/.izsessions``) and are referenced from
profiles by name. A session never knows which profiles point at it.
"""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import yaml
from pydantic import AliasChoices, BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from izanami_cli.config.messages import ERROR_MESSAGES
from izanami_cli.config.paths import SECURE_FILE_MODE
from izanami_cli.constants import DEFAULT_SESSION_MAX_AGE_HOURS
from izanami_cli.exceptions import ConfigFileError
from izanami_cli.models.enums import AuthMethod
from izanami_cli.utils.file_utils import read_yaml, write_yaml


class Session(BaseModel):
    """A saved authentication context."""

    url: str = ""
    username: str = Field(default="", description="Display only, never sent to the server")
    jwt_token: str = Field(
        default="",
        validation_alias=AliasChoices("jwt_token", "jwtToken"),
        description="Bearer token; empty once logged out",
    )
    auth_method: str = Field(default="", description="password or oidc; empty means password")
    created_at: datetime | None = None

    @property
    def is_oidc(self) -> bool:
        """Whether the session was created through OIDC."""
        return self.auth_method == AuthMethod.OIDC.value

    @property
    def is_logged_in(self) -> bool:
        return bool(self.jwt_token)

    def is_token_expired(self, max_age: timedelta | None = None) -> bool:
        """Whether the token is older than ``max_age`` (24 hours by default).

        A cleared session (no creation time) counts as expired.
        """
        if self.created_at is None:
            return True
        if max_age is None or max_age == timedelta(0):
            max_age = timedelta(hours=DEFAULT_SESSION_MAX_AGE_HOURS)
        created_at = self.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return datetime.now(UTC) - created_at > max_age


class SessionsDocument(BaseModel):
    """Root of the persisted sessions file."""

    active: str = ""
    sessions: dict[str, Session] = Field(default_factory=dict)

    @classmethod
    def load(cls, sessions_path: Path) -> "SessionsDocument":
        """Load sessions; a missing file yields an empty document.

        Raises:
            ConfigFileError: If the file cannot be read or does not parse
        """
        if not sessions_path.exists():
            return cls()

        try:
            data = read_yaml(sessions_path)
        except OSError as e:
            raise ConfigFileError(ERROR_MESSAGES["sessions_read_failed"], sessions_path, e) from e
        except yaml.YAMLError as e:
            raise ConfigFileError(
                ERROR_MESSAGES["sessions_parse_failed"], sessions_path, e
            ) from e

        if not isinstance(data, dict):
            raise ConfigFileError(ERROR_MESSAGES["sessions_parse_failed"], sessions_path)
        if data.get("sessions") is None:
            data["sessions"] = {}

        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigFileError(
                ERROR_MESSAGES["sessions_parse_failed"], sessions_path, e
            ) from e

    def save(self, sessions_path: Path) -> None:
        """Write sessions with owner-only permissions.

        Raises:
            ConfigFileError: If the file cannot be written
        """
        try:
            write_yaml(
                sessions_path,
                self.model_dump(mode="json"),
                mode=SECURE_FILE_MODE,
            )
        except OSError as e:
            raise ConfigFileError(
                ERROR_MESSAGES["sessions_write_failed"], sessions_path, e
            ) from e
