"""Custom exceptions for izanami-cli.

Every failure raised by configuration resolution or by the document
mutators derives from IzError, so commands can report all of them with a
single except clause. Declining a confirmation prompt is not an error and
has no exception here.

Exception hierarchy:
    IzError (base)
    ├── NotFoundError
    ├── AmbiguousInputError
    ├── MissingRequiredError
    ├── ConfigFileError
    └── InvalidConfigKeyError
"""

from pathlib import Path
from typing import Any


class IzError(Exception):
    """Base exception for all izanami-cli errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class NotFoundError(IzError):
    """Raised when a named profile, session or worker does not exist."""

    def __init__(self, message: str, kind: str, name: str):
        super().__init__(message)
        self.kind = kind
        self.name = name


class AmbiguousInputError(IzError):
    """Raised when a flag combination cannot be disambiguated."""


class MissingRequiredError(IzError):
    """Raised when a required input is absent.

    The message names the flag or environment variable that supplies it.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class ConfigFileError(IzError):
    """Raised when a persisted document cannot be read, parsed or written.

    Examples:
        - Invalid YAML syntax in config.yaml
        - Permission denied on ~/.izsessions
    """

    def __init__(self, message: str, path: Path | None = None, cause: BaseException | None = None):
        details: dict[str, Any] = {}
        if path:
            details["path"] = str(path)
        if cause is not None:
            details["error"] = str(cause)
        super().__init__(message, details)
        self.path = path


class InvalidConfigKeyError(IzError):
    """Raised when a mutator receives a key outside its scope."""

    def __init__(self, message: str, key: str):
        super().__init__(message)
        self.key = key
