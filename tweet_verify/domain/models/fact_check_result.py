"""Domain model for fact checking results."""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .verification import ClaimResult

NO_CLAIMS_ASSESSMENT = "No verifiable factual claims found in this tweet."


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class FactCheckStatus(str, Enum):
    """Lifecycle states of a fact-check request."""

    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"


class InvalidStatusTransition(ValueError):
    """Raised when a result is moved out of a terminal state."""


class FactCheckResult(BaseModel):
    """Persisted record of one fact-check request.

    A record is created in ``processing`` and written exactly once more, to
    either ``complete`` or ``error``. Use :meth:`processing`,
    :meth:`complete` and :meth:`failed` instead of mutating fields directly.
    """

    request_id: str = Field(..., alias="requestId", description="Unique request identifier")
    status: FactCheckStatus = Field(..., description="Lifecycle state")
    tweet_text: str = Field(..., alias="tweetText", description="Resolved post text")
    tweet_url: Optional[str] = Field(None, alias="tweetUrl", description="Source post URL if given")
    claim_results: List[ClaimResult] = Field(
        default_factory=list,
        alias="claimResults",
        description="Per-claim verdicts in extraction order",
    )
    overall_assessment: str = Field(default="", alias="overallAssessment")
    checked_at: datetime = Field(default_factory=utcnow, alias="checkedAt")
    error: Optional[str] = Field(None, description="Error message, only when status is error")

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True

    @classmethod
    def processing(
        cls,
        request_id: str,
        tweet_text: str,
        tweet_url: Optional[str] = None,
    ) -> "FactCheckResult":
        """Create the initial record for an accepted request."""
        return cls(
            request_id=request_id,
            status=FactCheckStatus.PROCESSING,
            tweet_text=tweet_text,
            tweet_url=tweet_url,
        )

    def _ensure_processing(self, target: FactCheckStatus) -> None:
        if self.status is not FactCheckStatus.PROCESSING:
            raise InvalidStatusTransition(
                f"Cannot move result {self.request_id} from {self.status.value} to {target.value}"
            )

    def complete(
        self,
        claim_results: List[ClaimResult],
        overall_assessment: str,
    ) -> "FactCheckResult":
        """Return the terminal ``complete`` version of this record."""
        self._ensure_processing(FactCheckStatus.COMPLETE)
        if not claim_results:
            overall_assessment = NO_CLAIMS_ASSESSMENT
        return self.model_copy(
            update={
                "status": FactCheckStatus.COMPLETE,
                "claim_results": list(claim_results),
                "overall_assessment": overall_assessment,
                "checked_at": utcnow(),
                "error": None,
            }
        )

    def failed(self, message: str) -> "FactCheckResult":
        """Return the terminal ``error`` version of this record."""
        self._ensure_processing(FactCheckStatus.ERROR)
        return self.model_copy(
            update={
                "status": FactCheckStatus.ERROR,
                "claim_results": [],
                "overall_assessment": "",
                "checked_at": utcnow(),
                "error": message or "Unknown error",
            }
        )

    @property
    def is_terminal(self) -> bool:
        """Check if the record reached ``complete`` or ``error``."""
        return self.status is not FactCheckStatus.PROCESSING

    def is_stale(self, max_age: timedelta, now: Optional[datetime] = None) -> bool:
        """Check if a ``processing`` record has not been written for ``max_age``."""
        if self.is_terminal:
            return False
        now = now or utcnow()
        checked_at = self.checked_at
        if checked_at.tzinfo is None:
            checked_at = checked_at.replace(tzinfo=timezone.utc)
        return now - checked_at > max_age

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase JSON shape used for storage and API responses."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FactCheckResult":
        """Rebuild a record from :meth:`to_dict` output."""
        return cls.model_validate(data)
