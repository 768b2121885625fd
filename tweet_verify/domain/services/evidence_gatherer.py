"""Service for gathering web evidence about a claim."""

import asyncio
import logging
from typing import List, Sequence

from ..models.claim import SearchQuery
from ..ports.ai_provider import AIProvider, AIResponseParseError
from ..ports.search_provider import SearchProvider, SearchResult

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n---\n\n"


def format_results(results: Sequence[SearchResult], query: str) -> str:
    """Format one query's results as a labeled text block."""
    if not results:
        return f'No results found for query: "{query}"'

    formatted = f'Search query: "{query}"\n\n'
    for index, result in enumerate(results, 1):
        formatted += f"[{index}] {result.title}\n"
        formatted += f"URL: {result.url}\n"
        formatted += f"Summary: {result.description}\n\n"
    return formatted


class EvidenceGatherer:
    """Turns a claim into a formatted evidence blob for the analyzer."""

    def __init__(
        self,
        ai_provider: AIProvider,
        search_provider: SearchProvider,
        results_per_query: int = 5,
    ):
        """Initialize the gatherer.

        Args:
            ai_provider: Provider used to derive search queries
            search_provider: Web search backend
            results_per_query: Result count bound for each query
        """
        self._ai = ai_provider
        self._search = search_provider
        self._results_per_query = results_per_query

    async def generate_queries(self, claim: str, tweet_text: str) -> List[SearchQuery]:
        """Derive search queries, or none if the model output is malformed."""
        try:
            queries = await self._ai.generate_search_queries(claim, tweet_text)
        except AIResponseParseError as e:
            logger.warning(f"⚠️ Could not parse search queries for claim '{claim[:60]}': {e}")
            return []
        return [q for q in queries if q.query.strip()]

    async def search_all(self, queries: Sequence[str]) -> str:
        """Run all queries concurrently and join their formatted blocks in query order."""
        if not queries:
            return ""

        async def run(query: str) -> str:
            results = await self._search.search(query, self._results_per_query)
            return format_results(results, query)

        blocks = await asyncio.gather(*(run(query) for query in queries))
        return BLOCK_SEPARATOR.join(blocks)

    async def gather(self, claim: str, tweet_text: str) -> str:
        """Gather evidence for one claim.

        Args:
            claim: Claim text
            tweet_text: Full post text used as query context

        Returns:
            Evidence blob, empty when no queries could be derived
        """
        queries = await self.generate_queries(claim, tweet_text)
        logger.info(f"🔎 Generated {len(queries)} search queries")
        return await self.search_all([q.query for q in queries])
