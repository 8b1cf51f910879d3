"""Configuration document models for izanami-cli.

The config document is a YAML file with hyphenated keys. Field aliases carry
the on-disk spelling; Python code uses the snake_case attribute names.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from izanami_cli.config.messages import ERROR_MESSAGES
from izanami_cli.config.paths import CONFIG_DIR_MODE, SECURE_FILE_MODE
from izanami_cli.exceptions import ConfigFileError
from izanami_cli.utils.file_utils import read_yaml, write_yaml


class _DocumentModel(BaseModel):
    """Base for models persisted with hyphenated YAML keys."""

    model_config = ConfigDict(populate_by_name=True)

    def to_yaml_dict(self) -> dict[str, Any]:
        """Serialize with on-disk key names, omitting empty values."""
        return self.model_dump(mode="json", by_alias=True, exclude_defaults=True)


class ProjectClientKeys(_DocumentModel):
    """Client credentials scoped to a single project."""

    client_id: str = Field(default="", alias="client-id")
    client_secret: str = Field(default="", alias="client-secret")

    @property
    def is_complete(self) -> bool:
        """Whether both halves of the credential pair are present."""
        return bool(self.client_id and self.client_secret)


class TenantClientKeys(_DocumentModel):
    """Client credentials for a tenant, with optional per-project overrides."""

    client_id: str = Field(default="", alias="client-id")
    client_secret: str = Field(default="", alias="client-secret")
    projects: dict[str, ProjectClientKeys] = Field(
        default_factory=dict, description="Project-specific overrides"
    )

    @property
    def is_complete(self) -> bool:
        """Whether the tenant-level pair is usable on its own."""
        return bool(self.client_id and self.client_secret)


ClientKeyStore = dict[str, TenantClientKeys]


class WorkerConfig(_DocumentModel):
    """A named alternate endpoint with optional scoped credentials."""

    url: str = Field(default="", description="Base URL of the worker")
    client_keys: ClientKeyStore = Field(default_factory=dict, alias="client-keys")


class Profile(_DocumentModel):
    """A named deployment context."""

    session: str = Field(default="", description="Name of a session in the sessions file")
    leader_url: str = Field(default="", alias="leader-url")
    client_base_url: str = Field(default="", alias="client-base-url")
    personal_access_token_username: str = Field(
        default="", alias="personal-access-token-username"
    )
    personal_access_token: str = Field(default="", alias="personal-access-token")
    tenant: str = ""
    project: str = ""
    context: str = ""
    client_keys: ClientKeyStore = Field(default_factory=dict, alias="client-keys")
    insecure_skip_verify: bool = Field(default=False, alias="insecure-skip-verify")
    default_worker: str = Field(default="", alias="default-worker")
    workers: dict[str, WorkerConfig] = Field(default_factory=dict)

    # Legacy flat credentials, superseded by client-keys
    client_id: str = Field(default="", alias="client-id")
    client_secret: str = Field(default="", alias="client-secret")


class ConfigDocument(_DocumentModel):
    """Root of the persisted config file.

    Global keys are optional so that "present in the file" can be told apart
    from "falls back to the compiled-in default".
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    timeout: int | None = None
    verbose: bool | None = None
    output_format: str | None = Field(default=None, alias="output-format")
    color: str | None = None
    active_profile: str = ""
    profiles: dict[str, Profile] = Field(default_factory=dict)
    client_keys: ClientKeyStore = Field(default_factory=dict, alias="client-keys")

    @classmethod
    def load(cls, config_path: Path) -> "ConfigDocument":
        """Load the document from disk.

        A missing file yields an empty document.

        Raises:
            ConfigFileError: If the file cannot be read or does not parse
        """
        if not config_path.exists():
            return cls()

        try:
            data = read_yaml(config_path)
        except OSError as e:
            raise ConfigFileError(ERROR_MESSAGES["config_read_failed"], config_path, e) from e
        except yaml.YAMLError as e:
            raise ConfigFileError(ERROR_MESSAGES["config_parse_failed"], config_path, e) from e

        if not isinstance(data, dict):
            raise ConfigFileError(ERROR_MESSAGES["config_parse_failed"], config_path)

        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigFileError(ERROR_MESSAGES["config_parse_failed"], config_path, e) from e

    def save(self, config_path: Path) -> None:
        """Write the document with owner-only permissions.

        Raises:
            ConfigFileError: If the file cannot be written
        """
        try:
            write_yaml(
                config_path,
                self.to_yaml_dict(),
                mode=SECURE_FILE_MODE,
                dir_mode=CONFIG_DIR_MODE,
            )
        except OSError as e:
            raise ConfigFileError(ERROR_MESSAGES["config_write_failed"], config_path, e) from e

    def has_key(self, key: str) -> bool:
        """Whether a global key is explicitly present in the document."""
        return self.get_global(key) is not None

    def get_global(self, key: str) -> int | bool | str | None:
        """Return the raw value of a global key, None when absent."""
        attr = key.replace("-", "_")
        if attr not in GLOBAL_ATTRIBUTES:
            return None
        return getattr(self, attr)

    def set_global(self, key: str, value: int | bool | str | None) -> None:
        """Set (or with None, remove) a global key."""
        attr = key.replace("-", "_")
        if attr not in GLOBAL_ATTRIBUTES:
            raise KeyError(key)
        setattr(self, attr, value)


GLOBAL_ATTRIBUTES = frozenset({"timeout", "verbose", "output_format", "color"})
