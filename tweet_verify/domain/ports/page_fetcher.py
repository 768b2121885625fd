"""Interface for fetching raw HTML pages."""

from typing import Protocol


class PageFetchError(RuntimeError):
    """Raised when a page cannot be fetched."""


class PageFetcher(Protocol):
    """Fetches HTML from embeddable mirror services."""

    async def fetch_html(self, url: str) -> str:
        """Return the response body of ``url``; raises PageFetchError on failure."""
        ...

    async def shutdown(self) -> None:
        """Release network resources."""
        ...
