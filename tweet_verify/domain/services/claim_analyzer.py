"""Service for judging a claim against gathered evidence."""

import logging

from ..models.verification import Verdict
from ..ports.ai_provider import AIProvider, AIResponseParseError

logger = logging.getLogger(__name__)


class ClaimAnalyzer:
    """Produces exactly one verdict per claim."""

    def __init__(self, ai_provider: AIProvider):
        self._ai = ai_provider

    async def analyze(self, claim: str, tweet_text: str, evidence: str) -> Verdict:
        """Analyze a claim.

        Malformed model output yields :meth:`Verdict.fallback` instead of an
        exception.

        Args:
            claim: Claim text
            tweet_text: Original post text
            evidence: Evidence blob from the gatherer

        Returns:
            Verdict for the claim
        """
        try:
            return await self._ai.analyze_claim(claim, tweet_text, evidence)
        except AIResponseParseError as e:
            logger.error(f"❌ Failed to parse verdict for '{claim[:60]}': {e}")
            return Verdict.fallback()
