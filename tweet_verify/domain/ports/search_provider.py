"""Search provider interface for evidence gathering."""

from typing import List, Protocol

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """A single web search hit."""

    title: str = Field(default="", description="Result title")
    url: str = Field(default="", description="Result URL")
    description: str = Field(default="", description="Result snippet")


class SearchProvider(Protocol):
    """Protocol for web search backends.

    Implementations never raise to callers: any provider error yields an
    empty list.
    """

    async def search(self, query: str, count: int = 5) -> List[SearchResult]:
        """Search the web for ``query`` returning at most ``count`` results."""
        ...

    async def shutdown(self) -> None:
        """Release network resources."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is configured."""
        ...
