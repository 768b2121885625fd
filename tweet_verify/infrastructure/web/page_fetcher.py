"""httpx implementation of the page fetcher interface."""

from typing import Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.ports.page_fetcher import PageFetcher, PageFetchError


class PageFetcherConfig(BaseModel):
    """Configuration for fetching mirror pages."""

    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; TweetVerify/1.0)",
        description="User agent sent to mirror services",
    )
    timeout: float = Field(default=10.0, description="Request timeout in seconds")


class HttpxPageFetcher(PageFetcher):
    """Fetches HTML pages with a shared async client."""

    def __init__(
        self,
        config: Optional[PageFetcherConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._config = config or PageFetcherConfig()
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                follow_redirects=True,
                headers={"User-Agent": self._config.user_agent},
            )
        return self._client

    async def fetch_html(self, url: str) -> str:
        """Return the page body; raises PageFetchError on transport or HTTP errors."""
        try:
            response = await self._get_client().get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise PageFetchError(f"Failed to fetch {url}: {e}") from e
        return response.text

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
