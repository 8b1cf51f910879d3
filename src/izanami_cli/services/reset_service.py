"""Reset of local izanami-cli state.

A reset backs up the config document and the sessions document with one
shared timestamp, then deletes both. Confirmation is the caller's job.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from izanami_cli.config.messages import ERROR_MESSAGES
from izanami_cli.config.paths import BACKUP_SUFFIX, BACKUP_TIMESTAMP_FORMAT
from izanami_cli.exceptions import ConfigFileError, IzError
from izanami_cli.utils.file_utils import copy_file, delete_file, file_exists

logger = logging.getLogger(__name__)


@dataclass
class ResetResult:
    """What a reset backed up and removed."""

    timestamp: str
    backups: dict[Path, Path] = field(default_factory=dict)  # original -> backup


def backup_path_for(path: Path, timestamp: str) -> Path:
    """Return ``<path>.backup.<timestamp>``."""
    return path.with_name(f"{path.name}{BACKUP_SUFFIX}.{timestamp}")


class ResetService:
    """Service that backs up and removes the local documents."""

    def __init__(self, config_path: Path, sessions_path: Path):
        self.config_path = config_path
        self.sessions_path = sessions_path

    def existing_files(self) -> list[Path]:
        """Return the documents that exist, config first."""
        return [p for p in (self.config_path, self.sessions_path) if file_exists(p)]

    def reset(self, now: datetime | None = None) -> ResetResult:
        """Back up then delete every existing document.

        Args:
            now: Moment used for the backup timestamp (defaults to now)

        Returns:
            ResetResult listing the backups

        Raises:
            IzError: If neither document exists
            ConfigFileError: If a backup or deletion fails
        """
        files = self.existing_files()
        if not files:
            raise IzError(ERROR_MESSAGES["nothing_to_reset"])

        timestamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
        result = ResetResult(timestamp=timestamp)

        # Back everything up before deleting anything
        for path in files:
            backup = backup_path_for(path, timestamp)
            try:
                copy_file(path, backup)
            except OSError as e:
                raise ConfigFileError(
                    ERROR_MESSAGES["backup_failed"].format(path=path), path, e
                ) from e
            result.backups[path] = backup
            logger.debug("Backed up %s to %s", path, backup)

        for path in files:
            try:
                delete_file(path)
            except OSError as e:
                raise ConfigFileError(
                    ERROR_MESSAGES["delete_failed"].format(path=path), path, e
                ) from e

        return result
