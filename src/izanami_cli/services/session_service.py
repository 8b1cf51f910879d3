"""Session management for izanami-cli.

Sessions are saved authentication contexts kept in ``~/.izsessions``,
separate from the config document. Logging out clears the token but keeps
the entry so that profiles referencing it by name keep working after the
next login; deleting removes the entry.
"""

import logging
from datetime import UTC, datetime
from pathlib import Path

from izanami_cli.config.messages import ERROR_MESSAGES
from izanami_cli.config.paths import get_sessions_path
from izanami_cli.exceptions import NotFoundError
from izanami_cli.models.session import Session, SessionsDocument

logger = logging.getLogger(__name__)


class SessionService:
    """Service for the sessions document."""

    def __init__(self, sessions_path: Path | None = None):
        """Initialize session service.

        Args:
            sessions_path: Location of the sessions file (defaults to ~/.izsessions)
        """
        self.sessions_path = sessions_path or get_sessions_path()

    def load(self) -> SessionsDocument:
        return SessionsDocument.load(self.sessions_path)

    def save(self, document: SessionsDocument) -> None:
        document.save(self.sessions_path)
        logger.debug("Wrote sessions to %s", self.sessions_path)

    def list_sessions(self) -> tuple[dict[str, Session], str]:
        """Return all sessions and the active session name."""
        document = self.load()
        return document.sessions, document.active

    def get_session(self, name: str) -> Session:
        """Return a session by name.

        Raises:
            NotFoundError: If no such session exists
        """
        session = self.load().sessions.get(name)
        if session is None:
            raise _session_not_found(name)
        return session

    def add_session(self, name: str, session: Session, activate: bool = True) -> None:
        """Add or replace a session, stamping its creation time if missing."""
        document = self.load()
        if session.created_at is None and session.jwt_token:
            session.created_at = datetime.now(UTC)
        document.sessions[name] = session
        if activate:
            document.active = name
        self.save(document)

    def use_session(self, name: str) -> None:
        """Make a session the active one."""
        document = self.load()
        if name not in document.sessions:
            raise _session_not_found(name)
        document.active = name
        self.save(document)

    def delete_session(self, name: str) -> None:
        """Remove a session entry entirely."""
        document = self.load()
        if name not in document.sessions:
            raise _session_not_found(name)
        del document.sessions[name]
        if document.active == name:
            document.active = ""
        self.save(document)

    def logout(self, name: str | None = None) -> str:
        """Clear the token of a session (the active one by default).

        Returns:
            Name of the session that was logged out

        Raises:
            NotFoundError: If there is no such session, or no active session
        """
        document = self.load()
        target = name or document.active
        if not target:
            raise NotFoundError(ERROR_MESSAGES["no_active_session"], "session", "")
        session = document.sessions.get(target)
        if session is None:
            raise _session_not_found(target)

        session.jwt_token = ""
        session.created_at = None
        self.save(document)
        return target


def _session_not_found(name: str) -> NotFoundError:
    return NotFoundError(ERROR_MESSAGES["session_not_found"].format(name=name), "session", name)
