"""Service for extracting factual claims from post text."""

import logging
from typing import List

from ..models.claim import Claim
from ..ports.ai_provider import AIProvider, AIResponseParseError

logger = logging.getLogger(__name__)


class ClaimExtractor:
    """Extracts verifiable claims, degrading to "no claims" on malformed output."""

    def __init__(self, ai_provider: AIProvider):
        self._ai = ai_provider

    async def extract(self, tweet_text: str) -> List[Claim]:
        """Extract claims from ``tweet_text`` in the order the model lists them."""
        try:
            claims = await self._ai.extract_claims(tweet_text)
        except AIResponseParseError as e:
            logger.error(f"❌ Failed to parse claims: {e}")
            logger.debug(f"Raw response was: {e.raw_response}")
            return []
        return [claim for claim in claims if claim.claim_text.strip()]
