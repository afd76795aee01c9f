"""Exceptions raised by content, mapping and search backends."""


class BackendError(Exception):
    """Base exception for collaborator failures."""

    pass


class FetchError(BackendError):
    """Raised when a single page cannot be retrieved (including timeouts)."""

    def __init__(self, url: str, reason: str):
        """Initialize with the failing URL.

        Args:
            url: URL that could not be fetched
            reason: Human-readable cause
        """
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class MapError(BackendError):
    """Raised when site URL discovery fails."""

    pass


class SearchError(BackendError):
    """Raised when a search query fails."""

    pass
