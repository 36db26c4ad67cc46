"""
Error types for the Concerto editor service.

The editing core never raises; these errors belong to the service layer
around it:
- EditorError: Base exception
- SessionNotFoundError: Unknown editor session id
- SessionLimitError: Too many open sessions

Invariants:
    - All errors inherit from EditorError
    - Every error carries a stable code and a details dict
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class EditorError(Exception):
    """Base exception for all editor service errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
        status_code: HTTP status used when returned to a client
    """

    status_code = 400

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "EDITOR_ERROR"
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON error body."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class SessionNotFoundError(EditorError):
    """No editor session exists with the given id."""

    status_code = 404

    def __init__(self, session_id: str) -> None:
        super().__init__(
            f"Editor session '{session_id}' not found",
            code="SESSION_NOT_FOUND",
            details={"session_id": session_id},
        )
        self.session_id = session_id


class SessionLimitError(EditorError):
    """The configured maximum number of sessions is already open."""

    status_code = 429

    def __init__(self, limit: int) -> None:
        super().__init__(
            f"Session limit of {limit} reached",
            code="SESSION_LIMIT",
            details={"limit": limit},
        )
        self.limit = limit
