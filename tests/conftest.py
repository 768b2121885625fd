"""Test configuration and common fixtures."""

from typing import Dict, List, Optional

import pytest

from tweet_verify.domain.models.claim import Claim, SearchQuery
from tweet_verify.domain.models.verification import (
    ClaimResult,
    ConfidenceLevel,
    Verdict,
    VerdictLabel,
)
from tweet_verify.domain.ports.notifier import Notification
from tweet_verify.domain.ports.page_fetcher import PageFetchError
from tweet_verify.domain.ports.search_provider import SearchResult
from tweet_verify.domain.services.assessment_synthesizer import AssessmentSynthesizer
from tweet_verify.domain.services.claim_analyzer import ClaimAnalyzer
from tweet_verify.domain.services.claim_extractor import ClaimExtractor
from tweet_verify.domain.services.evidence_gatherer import EvidenceGatherer
from tweet_verify.domain.services.fact_checking_service import FactCheckingService
from tweet_verify.domain.services.task_supervisor import BackgroundTaskSupervisor
from tweet_verify.domain.services.text_acquisition import TextAcquisitionResolver
from tweet_verify.infrastructure.storage.memory_store import MemoryResultStore


class FakeAIProvider:
    """Scriptable AI provider.

    Each attribute holds the value returned by the matching method; assigning
    an exception instance makes the method raise it instead.
    """

    def __init__(self):
        self.claims: object = [Claim(claim_text="Water boils at 100C at sea level")]
        self.queries: object = [SearchQuery(query="boiling point of water sea level")]
        self.verdict: object = Verdict(
            label=VerdictLabel.TRUE,
            confidence=ConfidenceLevel.HIGH,
            explanation="Standard reference values agree.",
            evidence_snippets=["Water boils at 100C at 1 atm"],
            context="Boiling point drops with altitude.",
        )
        self.assessment: object = "  The post is accurate.  "
        self.search_extraction: object = None
        self.image_extraction: object = None
        self.calls: List[str] = []
        self.evidence_seen: List[str] = []

    def _answer(self, name: str, value: object) -> object:
        self.calls.append(name)
        if isinstance(value, BaseException):
            raise value
        return value

    async def initialize(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    async def extract_claims(self, tweet_text: str) -> List[Claim]:
        return self._answer("extract_claims", self.claims)

    async def generate_search_queries(self, claim: str, tweet_text: str) -> List[SearchQuery]:
        return self._answer("generate_search_queries", self.queries)

    async def analyze_claim(self, claim: str, tweet_text: str, evidence: str) -> Verdict:
        self.evidence_seen.append(evidence)
        return self._answer("analyze_claim", self.verdict)

    async def generate_overall_assessment(self, tweet_text: str, claim_results: List[ClaimResult]) -> str:
        return self._answer("generate_overall_assessment", self.assessment)

    async def extract_post_from_search_results(self, search_results: str) -> Optional[str]:
        return self._answer("extract_post_from_search_results", self.search_extraction)

    async def extract_post_from_image(self, image_base64: str, media_type: str) -> Optional[str]:
        return self._answer("extract_post_from_image", self.image_extraction)

    @property
    def provider_name(self) -> str:
        return "Fake"

    @property
    def is_available(self) -> bool:
        return True


class FakeSearchProvider:
    """Returns canned results per query, or a default list."""

    def __init__(self, default: Optional[List[SearchResult]] = None):
        self.default = default if default is not None else [
            SearchResult(
                title="Boiling point",
                url="https://example.org/boiling",
                description="Water boils at 100 degrees Celsius at sea level.",
            )
        ]
        self.by_query: Dict[str, List[SearchResult]] = {}
        self.queries: List[str] = []

    async def search(self, query: str, count: int = 5) -> List[SearchResult]:
        self.queries.append(query)
        return list(self.by_query.get(query, self.default))[:count]

    async def shutdown(self) -> None:
        pass

    @property
    def is_available(self) -> bool:
        return True


class FakePageFetcher:
    """Serves HTML by URL; unknown URLs fail like an unreachable page."""

    def __init__(self, pages: Optional[Dict[str, str]] = None):
        self.pages = pages or {}
        self.fetched: List[str] = []

    async def fetch_html(self, url: str) -> str:
        self.fetched.append(url)
        if url not in self.pages:
            raise PageFetchError(f"Failed to fetch {url}: 404")
        return self.pages[url]

    async def shutdown(self) -> None:
        pass


class RecordingNotifier:
    """Keeps every notification instead of delivering it."""

    def __init__(self):
        self.sent: List[Notification] = []

    async def send(self, notification: Notification) -> None:
        self.sent.append(notification)

    async def shutdown(self) -> None:
        pass


@pytest.fixture
def fake_ai() -> FakeAIProvider:
    """Provide a scriptable AI provider."""
    return FakeAIProvider()


@pytest.fixture
def fake_search() -> FakeSearchProvider:
    """Provide a search provider with one default result."""
    return FakeSearchProvider()


@pytest.fixture
def fake_fetcher() -> FakePageFetcher:
    """Provide a page fetcher with no pages."""
    return FakePageFetcher()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Provide a recording notifier."""
    return RecordingNotifier()


@pytest.fixture
def memory_store() -> MemoryResultStore:
    """Provide an empty in-memory result store."""
    return MemoryResultStore()


@pytest.fixture
def resolver(fake_ai, fake_search, fake_fetcher) -> TextAcquisitionResolver:
    """Provide a resolver wired to the fakes."""
    return TextAcquisitionResolver(fake_ai, fake_search, fake_fetcher)


@pytest.fixture
def service(fake_ai, fake_search, memory_store, notifier) -> FactCheckingService:
    """Provide a fact-checking service wired to the fakes."""
    return FactCheckingService(
        claim_extractor=ClaimExtractor(fake_ai),
        evidence_gatherer=EvidenceGatherer(fake_ai, fake_search),
        claim_analyzer=ClaimAnalyzer(fake_ai),
        assessment_synthesizer=AssessmentSynthesizer(fake_ai),
        result_store=memory_store,
        notifier=notifier,
        supervisor=BackgroundTaskSupervisor(),
    )
