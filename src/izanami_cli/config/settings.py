"""Runtime settings for izanami-cli itself.

This module uses Pydantic Settings for the handful of knobs that control
where the tool keeps its own state. Resolvable client configuration (URLs,
tenants, credentials) is not read here; see ``izanami_cli.resolution``.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PathSettings(BaseSettings):
    """Location overrides for the persisted documents.

    Can be overridden via environment variables with the IZ_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix="IZ_")

    config_dir: Path | None = Field(
        default=None,
        description="Directory holding config.yaml (IZ_CONFIG_DIR)",
    )
    sessions_file: Path | None = Field(
        default=None,
        description="Path of the sessions document (IZ_SESSIONS_FILE)",
    )


def get_path_settings() -> PathSettings:
    """Read path settings from the current environment."""
    return PathSettings()
