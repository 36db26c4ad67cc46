"""
In-memory registry of editor sessions.

Each session is an independent EditorSession with its own identity
generator, so node ids start over at "2" in every session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import uuid4

from .core import EditorSession
from .errors import SessionLimitError, SessionNotFoundError

logger = logging.getLogger(__name__)


class SessionManager:
    """Creates, looks up and drops editor sessions by id.

    Example:
        >>> manager = SessionManager(max_sessions=10)
        >>> session_id, session = manager.create()
        >>> manager.get(session_id) is session
        True
    """

    def __init__(
        self,
        max_sessions: int = 100,
        factory: Callable[[], EditorSession] = EditorSession,
    ) -> None:
        self._max_sessions = max_sessions
        self._factory = factory
        self._sessions: dict[str, EditorSession] = {}

    def create(self) -> tuple[str, EditorSession]:
        """Open a new session seeded with the starting entity.

        Raises:
            SessionLimitError: If max_sessions are already open
        """
        if len(self._sessions) >= self._max_sessions:
            logger.warning(f"Refusing new session: limit {self._max_sessions} reached")
            raise SessionLimitError(self._max_sessions)

        session_id = uuid4().hex
        session = self._factory()
        self._sessions[session_id] = session
        logger.info(f"Opened editor session {session_id}")
        return session_id, session

    def get(self, session_id: str) -> EditorSession:
        """Look up a session.

        Raises:
            SessionNotFoundError: If no session has this id
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete(self, session_id: str) -> None:
        """Close a session.

        Raises:
            SessionNotFoundError: If no session has this id
        """
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info(f"Closed editor session {session_id}")

    def clear(self) -> None:
        self._sessions.clear()

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
