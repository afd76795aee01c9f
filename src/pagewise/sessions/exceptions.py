"""Exceptions for session orchestration."""


class SessionError(Exception):
    """Base exception for session errors."""

    pass


class InvalidCursorError(SessionError, ValueError):
    """Raised when a continuation cursor does not name an input item."""

    def __init__(self, cursor: str):
        """Initialize with the rejected cursor.

        Args:
            cursor: The cursor that could not be resolved
        """
        self.cursor = cursor
        super().__init__(f"Unknown continuation cursor: {cursor}")


class SessionFailedError(SessionError):
    """Raised by ``raise_for_status`` when a session ended in ``failed``."""

    def __init__(self, kind: str, error: str | None):
        """Initialize with the session kind and its recorded error.

        Args:
            kind: Session kind ("crawl", "search" or "batch")
            error: Error recorded on the outcome
        """
        self.kind = kind
        self.error = error
        super().__init__(f"{kind} session failed: {error or 'unknown error'}")
