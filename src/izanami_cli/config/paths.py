"""Path constants and per-user location resolution for izanami-cli.

The config document lives in a per-user directory (``~/.config/iz`` on
Unix-like systems, ``%APPDATA%\\iz`` on Windows) while the session document
is a dotfile in the user's home directory. Both locations can be overridden
through ``IZ_CONFIG_DIR`` / ``IZ_SESSIONS_FILE`` (see ``config.settings``).
"""

import os
import sys
from pathlib import Path

from izanami_cli.config.settings import get_path_settings

# =============================================================================
# Directory and File Names
# =============================================================================

CONFIG_DIR_NAME = "iz"
CONFIG_FILENAME = "config.yaml"
SESSIONS_FILENAME = ".izsessions"
GITIGNORE_FILENAME = ".gitignore"

BACKUP_SUFFIX = ".backup"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# =============================================================================
# Permissions
# =============================================================================

CONFIG_DIR_MODE = 0o700
SECURE_FILE_MODE = 0o600


def get_config_dir() -> Path:
    """Return the directory holding the config document.

    Returns:
        ``IZ_CONFIG_DIR`` when set, otherwise the platform config directory
    """
    override = get_path_settings().config_dir
    if override is not None:
        return override

    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", Path.home())) / CONFIG_DIR_NAME

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home) / CONFIG_DIR_NAME
    return Path.home() / ".config" / CONFIG_DIR_NAME


def get_config_path() -> Path:
    """Return the full path of the config document."""
    return get_config_dir() / CONFIG_FILENAME


def get_sessions_path() -> Path:
    """Return the full path of the session document."""
    override = get_path_settings().sessions_file
    if override is not None:
        return override

    if sys.platform == "win32":
        return Path(os.environ.get("USERPROFILE", Path.home())) / SESSIONS_FILENAME
    return Path.home() / SESSIONS_FILENAME
