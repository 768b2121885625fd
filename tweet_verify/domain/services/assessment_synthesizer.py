"""Service for summarizing all claim verdicts."""

from typing import List

from ..models.verification import ClaimResult
from ..ports.ai_provider import AIProvider


class AssessmentSynthesizer:
    """Combines per-claim verdicts into a short overall takeaway."""

    def __init__(self, ai_provider: AIProvider):
        self._ai = ai_provider

    async def synthesize(self, tweet_text: str, claim_results: List[ClaimResult]) -> str:
        """Return the model's summary as-is, stripped of surrounding whitespace."""
        assessment = await self._ai.generate_overall_assessment(tweet_text, claim_results)
        return (assessment or "").strip()
