"""Configuration service for the izanami-cli config document.

This module handles reading and writing ``config.yaml`` and the operations
on its global keys (timeout, verbose, output-format, color).

Key Classes:
    ConfigService: Load/save plus get/set/unset/list of global keys

Source attribution for a global key:
    1. file     - key explicitly present in config.yaml
    2. env      - IZ_<key> variable (hyphens become underscores, case kept)
    3. default  - compiled-in default
    4. not set  - none of the above

Typical Usage:
    >>> service = ConfigService(config_path)
    >>> service.set_config_value("timeout", "45")
    >>> service.get_config_value("timeout")
    ConfigValue(key='timeout', value='45', source=<ConfigSource.FILE: 'file'>)

Profile-scoped keys (tenant, leader-url, ...) are rejected here; they are
edited through ProfileService.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from izanami_cli.config.messages import ERROR_MESSAGES
from izanami_cli.config.paths import (
    CONFIG_DIR_MODE,
    GITIGNORE_FILENAME,
    SECURE_FILE_MODE,
    get_config_path,
)
from izanami_cli.constants import (
    CONFIG_GITIGNORE,
    DEFAULT_CONFIG_YAML,
    GLOBAL_CONFIG_KEYS,
    GLOBAL_DEFAULTS,
    KEY_CLIENT_KEYS,
    KEY_COLOR,
    KEY_OUTPUT_FORMAT,
    KEY_PROFILES,
    KEY_TIMEOUT,
    KEY_VERBOSE,
    PROFILE_CONFIG_KEYS,
    VALID_CONFIG_KEYS,
)
from izanami_cli.exceptions import ConfigFileError, InvalidConfigKeyError, IzError
from izanami_cli.models.config import ConfigDocument
from izanami_cli.models.enums import ColorMode, ConfigSource, OutputFormat
from izanami_cli.models.resolved import ConfigValue
from izanami_cli.utils.env_utils import env_key_for, parse_bool
from izanami_cli.utils.file_utils import ensure_dir, file_exists, repair_permissions, write_file

logger = logging.getLogger(__name__)

GlobalValue = int | bool | str


def format_config_value(value: GlobalValue | None) -> str:
    """Render a config value the way it is displayed and compared."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_global_value(key: str, raw: str) -> GlobalValue:
    """Convert text (from the command line or environment) to a key's type.

    Raises:
        IzError: If the text is not valid for the key
    """
    if key == KEY_TIMEOUT:
        try:
            return int(raw)
        except ValueError as e:
            raise IzError(
                ERROR_MESSAGES["invalid_value"].format(key=key, value=raw, expected="integer")
            ) from e
    if key == KEY_VERBOSE:
        try:
            return parse_bool(raw)
        except ValueError as e:
            raise IzError(
                ERROR_MESSAGES["invalid_value"].format(key=key, value=raw, expected="true/false")
            ) from e
    return raw


def lookup_config_value(
    document: ConfigDocument, key: str, environ: Mapping[str, str]
) -> ConfigValue:
    """Return a config key's value and the layer that supplied it.

    File beats the IZ_<key> variable, which beats the compiled-in default.
    """
    file_value = _file_value(document, key)
    if file_value:
        return ConfigValue(key=key, value=file_value, source=ConfigSource.FILE)

    env_value = environ.get(env_key_for(key), "")
    if env_value:
        return ConfigValue(key=key, value=env_value, source=ConfigSource.ENV)

    default = format_config_value(GLOBAL_DEFAULTS.get(key))
    if default:
        return ConfigValue(key=key, value=default, source=ConfigSource.DEFAULT)

    return ConfigValue(key=key, value="", source=ConfigSource.NOT_SET)


def resolve_global_value(
    document: ConfigDocument, key: str, environ: Mapping[str, str]
) -> GlobalValue:
    """Return the typed effective value of a global key."""
    if document.has_key(key):
        return document.get_global(key)
    env_value = environ.get(env_key_for(key), "")
    if env_value:
        return parse_global_value(key, env_value)
    return GLOBAL_DEFAULTS[key]


def _file_value(document: ConfigDocument, key: str) -> str:
    if key in GLOBAL_CONFIG_KEYS:
        return format_config_value(document.get_global(key)) if document.has_key(key) else ""
    if key == KEY_PROFILES:
        return ", ".join(sorted(document.profiles))
    if key == KEY_CLIENT_KEYS:
        return ", ".join(sorted(document.client_keys))
    extra = document.model_extra or {}
    value = extra.get(key)
    return format_config_value(value) if isinstance(value, int | bool | str) else ""


class ConfigService:
    """Service for the config document and its global keys."""

    def __init__(
        self,
        config_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        """Initialize config service.

        Args:
            config_path: Location of config.yaml (defaults to the per-user path)
            environ: Environment to consult (defaults to os.environ)
        """
        self.config_path = config_path or get_config_path()
        self.environ = environ if environ is not None else os.environ

    @property
    def config_dir(self) -> Path:
        return self.config_path.parent

    def config_exists(self) -> bool:
        return file_exists(self.config_path)

    def load_document(self) -> ConfigDocument:
        """Load the config document, repairing loose file permissions first.

        Returns:
            The parsed document, or an empty one when the file is absent

        Raises:
            ConfigFileError: If the file cannot be read or parsed
        """
        if self.config_exists():
            try:
                repair_permissions(self.config_path, SECURE_FILE_MODE)
            except OSError as e:
                logger.warning("Could not restrict permissions on %s: %s", self.config_path, e)
        return ConfigDocument.load(self.config_path)

    def save_document(self, document: ConfigDocument) -> None:
        document.save(self.config_path)

    # =========================================================================
    # Global keys
    # =========================================================================

    def get_config_value(self, key: str) -> ConfigValue:
        """Get a config key's value with its source.

        Raises:
            InvalidConfigKeyError: If the key is unknown
        """
        if key not in VALID_CONFIG_KEYS:
            raise InvalidConfigKeyError(ERROR_MESSAGES["invalid_config_key"].format(key=key), key)
        return lookup_config_value(self.load_document(), key, self.environ)

    def get_all_config_values(self) -> dict[str, ConfigValue]:
        """Get every known key with its value and source, in display order."""
        document = self.load_document()
        return {key: lookup_config_value(document, key, self.environ) for key in VALID_CONFIG_KEYS}

    def get_global_value(self, key: str) -> GlobalValue:
        """Typed effective value of a global key (file, then env, then default)."""
        return resolve_global_value(self.load_document(), key, self.environ)

    def set_config_value(self, key: str, value: str) -> None:
        """Set a global key and persist the document.

        Args:
            key: One of timeout, verbose, output-format, color
            value: Textual value, converted to the key's type

        Raises:
            InvalidConfigKeyError: If the key is not a global key
            IzError: If the value is invalid for the key
        """
        self._require_global_key(key)
        typed = parse_global_value(key, value)
        _check_constrained_value(key, typed)

        document = self.load_document()
        document.set_global(key, typed)
        self.save_document(document)
        logger.debug("Set %s=%s in %s", key, value, self.config_path)

    def unset_config_value(self, key: str) -> None:
        """Remove a global key from the document so it falls back to its default.

        Raises:
            InvalidConfigKeyError: If the key is not a global key
            ConfigFileError: If the config file does not exist
        """
        self._require_global_key(key)
        if not self.config_exists():
            raise ConfigFileError(ERROR_MESSAGES["config_not_found"], self.config_path)

        document = self.load_document()
        document.set_global(key, None)
        self.save_document(document)
        logger.debug("Unset %s in %s", key, self.config_path)

    def _require_global_key(self, key: str) -> None:
        if key in GLOBAL_CONFIG_KEYS:
            return
        if key in PROFILE_CONFIG_KEYS:
            raise InvalidConfigKeyError(
                ERROR_MESSAGES["profile_specific_key"].format(key=key), key
            )
        raise InvalidConfigKeyError(ERROR_MESSAGES["invalid_config_key"].format(key=key), key)

    # =========================================================================
    # File lifecycle
    # =========================================================================

    def init_config_file(self, force: bool = False) -> Path:
        """Write the sample config document and a .gitignore beside it.

        Args:
            force: Overwrite an existing config file

        Returns:
            Path of the created file

        Raises:
            IzError: If the file exists and force is False
        """
        if self.config_exists() and not force:
            raise IzError(ERROR_MESSAGES["config_exists"].format(path=self.config_path))

        ensure_dir(self.config_dir, CONFIG_DIR_MODE)
        write_file(self.config_path, DEFAULT_CONFIG_YAML, mode=SECURE_FILE_MODE)

        gitignore = self.config_dir / GITIGNORE_FILENAME
        if not gitignore.exists():
            write_file(gitignore, CONFIG_GITIGNORE)
        return self.config_path

    def validate_config(self) -> tuple[bool, list[str]]:
        """Validate the config document.

        Returns:
            Tuple of (is_valid, issues). A parse failure is reported as an
            issue rather than raised.
        """
        if not self.config_exists():
            return False, [ERROR_MESSAGES["config_not_found"]]

        try:
            document = self.load_document()
        except ConfigFileError as e:
            return False, [str(e)]

        issues: list[str] = []
        if document.timeout is not None and document.timeout < 0:
            issues.append(f"{KEY_TIMEOUT}: must be >= 0 (got {document.timeout})")
        if (
            document.output_format is not None
            and document.output_format not in OutputFormat.values()
        ):
            issues.append(
                f"{KEY_OUTPUT_FORMAT}: must be one of {', '.join(OutputFormat.values())} "
                f"(got {document.output_format})"
            )
        if document.color is not None and document.color not in ColorMode.values():
            issues.append(
                f"{KEY_COLOR}: must be one of {', '.join(ColorMode.values())} "
                f"(got {document.color})"
            )
        if document.active_profile and document.active_profile not in document.profiles:
            missing = ERROR_MESSAGES["profile_not_found"].format(name=document.active_profile)
            issues.append(f"active_profile: {missing}")
        for name, profile in document.profiles.items():
            if profile.default_worker and profile.default_worker not in profile.workers:
                issues.append(
                    f"profiles.{name}.default-worker: "
                    f"worker '{profile.default_worker}' is not defined"
                )

        return len(issues) == 0, issues


def _check_constrained_value(key: str, value: GlobalValue) -> None:
    if key == KEY_TIMEOUT and isinstance(value, int) and value < 0:
        raise IzError(
            ERROR_MESSAGES["invalid_value"].format(key=key, value=value, expected=">= 0")
        )
    if key == KEY_OUTPUT_FORMAT and value not in OutputFormat.values():
        raise IzError(
            ERROR_MESSAGES["invalid_value"].format(
                key=key, value=value, expected=", ".join(OutputFormat.values())
            )
        )
    if key == KEY_COLOR and value not in ColorMode.values():
        raise IzError(
            ERROR_MESSAGES["invalid_value"].format(
                key=key, value=value, expected=", ".join(ColorMode.values())
            )
        )


def get_config_service(config_path: Path | None = None) -> ConfigService:
    """Get a ConfigService instance.

    Args:
        config_path: Location of config.yaml (defaults to the per-user path)

    Returns:
        ConfigService instance
    """
    return ConfigService(config_path)
