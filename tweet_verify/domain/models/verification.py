"""Domain models for claim verdicts and per-claim results."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field

MAX_SOURCES_PER_CLAIM = 5


class VerdictLabel(str, Enum):
    """Possible verification outcomes."""

    TRUE = "True"  # Accurate and well-supported by evidence
    PARTIALLY_TRUE = "Partially True"  # Some truth, but misleading or imprecise
    FALSE = "False"  # Contradicted by evidence
    UNVERIFIABLE = "Unverifiable"  # Insufficient or conflicting evidence


class ConfidenceLevel(str, Enum):
    """Confidence levels in the verification result."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Verdict(BaseModel):
    """The analyzer's judgment on one claim."""

    label: VerdictLabel = Field(..., description="Verification outcome")
    confidence: ConfidenceLevel = Field(..., description="Confidence in the outcome")
    explanation: str = Field(..., description="2-3 sentence explanation of the verdict")
    evidence_snippets: List[str] = Field(
        default_factory=list,
        alias="evidenceSnippets",
        description="Key pieces of evidence",
    )
    context: str = Field(default="", description="Context or nuances that affect the verdict")

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "label": "True",
                "confidence": "High",
                "explanation": "At standard atmospheric pressure water boils at 100°C.",
                "evidenceSnippets": ["Boiling point of water at 1 atm is 100°C"],
                "context": "The boiling point drops at higher altitudes.",
            }
        }

    @classmethod
    def fallback(cls, reason: str = "Analysis failed due to parsing error") -> "Verdict":
        """Verdict used when the model's analysis cannot be parsed."""
        return cls(
            label=VerdictLabel.UNVERIFIABLE,
            confidence=ConfidenceLevel.LOW,
            explanation="Error analyzing claim",
            evidence_snippets=[],
            context=reason,
        )


class ClaimResult(BaseModel):
    """Verdict and sources for one extracted claim."""

    claim: str = Field(..., description="The claim that was verified")
    verdict: Verdict = Field(..., description="Verdict for the claim")
    sources: List[str] = Field(
        default_factory=list,
        max_length=MAX_SOURCES_PER_CLAIM,
        description="Source URLs in gathering order",
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True
        populate_by_name = True
