"""Protocol for AI providers."""

from typing import List, Optional, Protocol

from ..models.claim import Claim, SearchQuery
from ..models.verification import ClaimResult, Verdict


class AIProviderError(RuntimeError):
    """Raised when the model API cannot be reached or rejects a request."""


class AIResponseParseError(ValueError):
    """Raised when the model's structured output cannot be parsed."""

    def __init__(self, message: str, raw_response: str = ""):
        super().__init__(message)
        self.raw_response = raw_response


class AIProvider(Protocol):
    """Protocol defining the interface for AI providers.

    Structured methods raise :class:`AIResponseParseError` on malformed
    model output and :class:`AIProviderError` on transport failures.
    """

    async def initialize(self) -> None:
        """Initialize the AI provider."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def extract_claims(self, tweet_text: str) -> List[Claim]:
        """Extract verifiable factual claims from post text."""
        ...

    async def generate_search_queries(self, claim: str, tweet_text: str) -> List[SearchQuery]:
        """Derive 2-3 web search queries that help verify a claim."""
        ...

    async def analyze_claim(self, claim: str, tweet_text: str, evidence: str) -> Verdict:
        """Judge a claim against gathered evidence."""
        ...

    async def generate_overall_assessment(
        self,
        tweet_text: str,
        claim_results: List[ClaimResult],
    ) -> str:
        """Summarize all claim verdicts in a few sentences."""
        ...

    async def extract_post_from_search_results(self, search_results: str) -> Optional[str]:
        """Pull the post text out of formatted search results, None if absent."""
        ...

    async def extract_post_from_image(self, image_base64: str, media_type: str) -> Optional[str]:
        """Read the post text from a screenshot, None if absent."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        ...
