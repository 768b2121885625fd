"""Service for coordinating the fact-check pipeline."""

import logging
import time
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from ..models.fact_check_result import FactCheckResult
from ..models.verification import ClaimResult, MAX_SOURCES_PER_CLAIM, VerdictLabel
from ..ports.notifier import Notification, Notifier
from ..ports.result_store import ResultStore
from .assessment_synthesizer import AssessmentSynthesizer
from .claim_analyzer import ClaimAnalyzer
from .claim_extractor import ClaimExtractor
from .evidence_gatherer import EvidenceGatherer
from .task_supervisor import BackgroundTaskSupervisor
from .text_sanitizer import extract_source_urls

logger = logging.getLogger(__name__)

MAX_TWEET_LENGTH = 1000
ESTIMATED_TIME = "30-60 seconds"

COMPLETE_TITLE = "Fact-Check Complete"
ERROR_TITLE = "Fact-Check Error"
NO_CLAIMS_MESSAGE = "No factual claims found"
ERROR_MESSAGE = "An error occurred during fact-checking"
ERROR_LABEL = "Error"


class InputValidationError(ValueError):
    """Raised when resolved post text cannot be accepted."""


class SubmissionReceipt(BaseModel):
    """Immediate response to an accepted fact-check request."""

    request_id: str = Field(..., alias="requestId")
    status: str = "processing"
    estimated_time: str = Field(default=ESTIMATED_TIME, alias="estimatedTime")
    result_url: str = Field(..., alias="resultUrl")

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True


def generate_request_id() -> str:
    """Millisecond timestamp plus a short random suffix."""
    return f"{int(time.time() * 1000)}-{uuid4().hex[:7]}"


def result_url(base_url: str, request_id: str) -> str:
    """Public URL of the result page for ``request_id``."""
    return f"{base_url.rstrip('/')}/result/{request_id}"


class FactCheckingService:
    """Runs accepted requests from ``processing`` to a terminal state.

    :meth:`submit` persists the initial record and returns at once; the rest
    of the pipeline runs detached under the :class:`BackgroundTaskSupervisor`
    and rewrites the record exactly once, to ``complete`` or ``error``.
    """

    def __init__(
        self,
        claim_extractor: ClaimExtractor,
        evidence_gatherer: EvidenceGatherer,
        claim_analyzer: ClaimAnalyzer,
        assessment_synthesizer: AssessmentSynthesizer,
        result_store: ResultStore,
        notifier: Notifier,
        supervisor: Optional[BackgroundTaskSupervisor] = None,
        max_tweet_length: int = MAX_TWEET_LENGTH,
    ):
        """Initialize the service.

        Args:
            claim_extractor: Extracts claims from post text
            evidence_gatherer: Builds the evidence blob for a claim
            claim_analyzer: Produces a verdict per claim
            assessment_synthesizer: Summarizes all verdicts
            result_store: Persistence for results
            notifier: Push notification transport
            supervisor: Tracks detached pipeline runs
            max_tweet_length: Longest accepted post text
        """
        self._extractor = claim_extractor
        self._gatherer = evidence_gatherer
        self._analyzer = claim_analyzer
        self._synthesizer = assessment_synthesizer
        self._store = result_store
        self._notifier = notifier
        self._supervisor = supervisor or BackgroundTaskSupervisor()
        self._max_tweet_length = max_tweet_length
        logger.info("🔧 FactCheckingService initialized")

    @property
    def supervisor(self) -> BackgroundTaskSupervisor:
        """Supervisor holding in-flight pipeline runs."""
        return self._supervisor

    def validate_text(self, tweet_text: Optional[str]) -> str:
        """Check resolved text is non-empty and within the length cap."""
        if not tweet_text or not isinstance(tweet_text, str) or not tweet_text.strip():
            raise InputValidationError("Missing or invalid tweetText")
        if len(tweet_text) > self._max_tweet_length:
            raise InputValidationError(
                f"Tweet text too long (max {self._max_tweet_length} characters)"
            )
        return tweet_text

    async def submit(
        self,
        tweet_text: str,
        base_url: str,
        tweet_url: Optional[str] = None,
        notify_topic: Optional[str] = None,
    ) -> SubmissionReceipt:
        """Accept a fact-check request.

        Args:
            tweet_text: Resolved post text
            base_url: Public base URL used for result links
            tweet_url: Source URL of the post, if any
            notify_topic: Notification channel, if any

        Returns:
            Receipt with the request id and result URL

        Raises:
            InputValidationError: If the text is missing or too long
        """
        tweet_text = self.validate_text(tweet_text)
        request_id = generate_request_id()

        record = FactCheckResult.processing(request_id, tweet_text, tweet_url)
        await self._store.put(record)
        logger.info(f"[{request_id}] 📥 Accepted fact-check request ({len(tweet_text)} chars)")

        self._supervisor.submit(
            self.run_pipeline(record, base_url, notify_topic),
            name=request_id,
        )

        return SubmissionReceipt(
            request_id=request_id,
            result_url=result_url(base_url, request_id),
        )

    async def get_result(self, request_id: str) -> Optional[FactCheckResult]:
        """Fetch the stored record for ``request_id``."""
        return await self._store.get(request_id)

    async def check_claims(self, record: FactCheckResult) -> List[ClaimResult]:
        """Extract claims and produce a result for each, in extraction order."""
        request_id = record.request_id
        claims = await self._extractor.extract(record.tweet_text)
        logger.info(f"[{request_id}] 📝 Extracted {len(claims)} claims")

        claim_results = []
        for i, claim in enumerate(claims, 1):
            logger.info(f"[{request_id}] 🔍 Analyzing claim {i}/{len(claims)}: {claim.claim_text}")

            evidence = await self._gatherer.gather(claim.claim_text, record.tweet_text)
            verdict = await self._analyzer.analyze(claim.claim_text, record.tweet_text, evidence)
            sources = extract_source_urls(evidence, MAX_SOURCES_PER_CLAIM)

            claim_results.append(
                ClaimResult(claim=claim.claim_text, verdict=verdict, sources=sources)
            )
            logger.info(f"[{request_id}] ⚖️ Verdict for claim {i}: {verdict.label.value}")

        return claim_results

    async def run_pipeline(
        self,
        record: FactCheckResult,
        base_url: str,
        notify_topic: Optional[str] = None,
    ) -> FactCheckResult:
        """Run extraction, evidence gathering, analysis and synthesis.

        Any exception escaping the stages ends the run in ``error``. The
        terminal record is persisted and returned.
        """
        request_id = record.request_id
        click_url = result_url(base_url, request_id)
        logger.info(f"[{request_id}] 🚀 Starting fact-check for tweet: {record.tweet_text[:100]}...")
        final: Optional[FactCheckResult] = None

        try:
            claim_results = await self.check_claims(record)

            if not claim_results:
                completed = record.complete([], "")
                summary = NO_CLAIMS_MESSAGE
                primary_label = VerdictLabel.UNVERIFIABLE.value
            else:
                assessment = await self._synthesizer.synthesize(record.tweet_text, claim_results)
                completed = record.complete(claim_results, assessment)
                primary_label = claim_results[0].verdict.label.value
                if len(claim_results) == 1:
                    summary = f"{primary_label}: {claim_results[0].claim[:60]}..."
                else:
                    summary = f"{len(claim_results)} claims analyzed"

            await self._store.put(completed)
            final = completed
            await self._notify(notify_topic, COMPLETE_TITLE, summary, click_url, primary_label)

            logger.info(f"[{request_id}] ✅ Fact-check complete: {len(claim_results)} claims")
            return final

        except Exception as e:
            logger.error(f"[{request_id}] ❌ Error during fact-check: {type(e).__name__}: {e}", exc_info=True)
            if final is not None:
                # Terminal record already stored; a late notification failure must not reverse it.
                return final
            final = record.failed(str(e) or type(e).__name__)
            await self._store.put(final)
            await self._notify(notify_topic, ERROR_TITLE, ERROR_MESSAGE, click_url, ERROR_LABEL)
            return final

    async def _notify(
        self,
        topic: Optional[str],
        title: str,
        message: str,
        click_url: str,
        label: str,
    ) -> None:
        if not topic:
            return
        await self._notifier.send(
            Notification.for_label(topic, title, message, click_url, label)
        )
