"""Brave Search implementation of the search provider interface."""

import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.ports.search_provider import SearchProvider, SearchResult

logger = logging.getLogger(__name__)


class BraveSearchConfig(BaseModel):
    """Configuration for Brave Search adapter."""

    api_key: str = Field(default="", description="Brave Search subscription token")
    base_url: str = Field(default="https://api.search.brave.com/res/v1", description="API base URL")
    result_count: int = Field(default=5, description="Default number of results per query")
    timeout: float = Field(default=15.0, description="Request timeout in seconds")


class BraveSearchAdapter(SearchProvider):
    """Web search through the Brave Search API.

    Every failure (missing key, HTTP error, unexpected payload) is logged and
    reported as an empty result list.
    """

    def __init__(
        self,
        config: Optional[BraveSearchConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the adapter."""
        self._config = config or BraveSearchConfig()
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={
                    "Accept": "application/json",
                    "Accept-Encoding": "gzip",
                    "X-Subscription-Token": self._config.api_key,
                },
            )
        return self._client

    async def search(self, query: str, count: Optional[int] = None) -> List[SearchResult]:
        """Search the web.

        Args:
            query: Search query
            count: Maximum number of results, defaults to the configured count

        Returns:
            Results in provider order, empty on any error
        """
        if not self._config.api_key:
            logger.error("BRAVE_SEARCH_API_KEY not configured")
            return []

        count = count or self._config.result_count
        try:
            response = await self._get_client().get(
                "/web/search",
                params={"q": query, "count": str(count)},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Brave Search API error: {e.response.status_code} {e.response.reason_phrase}")
            return []
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error calling Brave Search API: {e}")
            return []

        results = (data.get("web") or {}).get("results") if isinstance(data, dict) else None
        if not results:
            return []

        return [
            SearchResult(
                title=item.get("title") or "",
                url=item.get("url") or "",
                description=item.get("description") or "",
            )
            for item in results[:count]
            if isinstance(item, dict)
        ]

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def is_available(self) -> bool:
        """Check if an API key is configured."""
        return bool(self._config.api_key)
