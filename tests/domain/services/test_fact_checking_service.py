"""Tests for fact-checking service."""

import re

import pytest

from tweet_verify.domain.models.claim import Claim
from tweet_verify.domain.models.fact_check_result import (
    NO_CLAIMS_ASSESSMENT,
    FactCheckResult,
    FactCheckStatus,
)
from tweet_verify.domain.models.verification import ConfidenceLevel, Verdict, VerdictLabel
from tweet_verify.domain.ports.ai_provider import AIProviderError, AIResponseParseError
from tweet_verify.domain.ports.search_provider import SearchResult
from tweet_verify.domain.services.fact_checking_service import (
    InputValidationError,
    generate_request_id,
    result_url,
)

BASE_URL = "https://verify.example"


def _record(text: str = "Water boils at 100C at sea level.") -> FactCheckResult:
    return FactCheckResult.processing(generate_request_id(), text)


def test_request_id_format():
    """Test request ids are a millisecond timestamp plus a random suffix."""
    first, second = generate_request_id(), generate_request_id()

    assert re.fullmatch(r"\d{13}-[0-9a-f]{7}", first)
    assert first != second


def test_result_url():
    """Test result links are built from the base URL."""
    assert result_url("https://verify.example/", "1-abc") == "https://verify.example/result/1-abc"


def test_validate_text_length_boundary(service):
    """Test the maximum length is inclusive."""
    assert service.validate_text("a" * 1000) == "a" * 1000

    with pytest.raises(InputValidationError, match="Tweet text too long"):
        service.validate_text("a" * 1001)


@pytest.mark.parametrize("text", [None, "", "   "])
def test_validate_text_rejects_blank(service, text):
    """Test missing text is rejected."""
    with pytest.raises(InputValidationError, match="Missing or invalid tweetText"):
        service.validate_text(text)


@pytest.mark.asyncio
async def test_submit_stores_processing_record_before_returning(service, memory_store, fake_ai):
    """Test the record is readable as processing as soon as submit returns."""
    receipt = await service.submit("Water boils at 100C.", base_url=BASE_URL)

    stored = await memory_store.get(receipt.request_id)
    assert stored is not None
    assert stored.status is FactCheckStatus.PROCESSING
    assert receipt.status == "processing"
    assert receipt.estimated_time == "30-60 seconds"
    assert receipt.result_url == f"{BASE_URL}/result/{receipt.request_id}"
    assert receipt.model_dump(by_alias=True)["requestId"] == receipt.request_id

    assert await service.supervisor.wait_all(timeout=5)
    final = await memory_store.get(receipt.request_id)
    assert final.status is FactCheckStatus.COMPLETE


@pytest.mark.asyncio
async def test_submit_rejects_long_text_without_storing(service, memory_store):
    """Test invalid input never creates a record."""
    with pytest.raises(InputValidationError):
        await service.submit("a" * 1001, base_url=BASE_URL)

    assert len(memory_store) == 0
    assert service.supervisor.pending == 0


@pytest.mark.asyncio
async def test_pipeline_completes_with_sources(service, memory_store, fake_ai, notifier):
    """Test a single claim runs through every stage."""
    result = await service.run_pipeline(_record(), BASE_URL, notify_topic="my-topic")

    assert result.status is FactCheckStatus.COMPLETE
    assert len(result.claim_results) == 1
    claim_result = result.claim_results[0]
    assert claim_result.verdict.label is VerdictLabel.TRUE
    assert claim_result.sources == ["https://example.org/boiling"]
    assert result.overall_assessment == "The post is accurate."
    assert await memory_store.get(result.request_id) == result

    assert len(notifier.sent) == 1
    notification = notifier.sent[0]
    assert notification.title == "Fact-Check Complete"
    assert notification.message.startswith("True: Water boils at 100C")
    assert notification.tags == "white_check_mark"
    assert notification.click_url == f"{BASE_URL}/result/{result.request_id}"


@pytest.mark.asyncio
async def test_pipeline_without_claims(service, fake_ai, notifier):
    """Test a post without claims completes with the fixed assessment."""
    fake_ai.claims = []

    result = await service.run_pipeline(_record("What a lovely day!"), BASE_URL, notify_topic="t")

    assert result.status is FactCheckStatus.COMPLETE
    assert result.claim_results == []
    assert result.overall_assessment == NO_CLAIMS_ASSESSMENT
    assert "generate_overall_assessment" not in fake_ai.calls
    assert notifier.sent[0].message == "No factual claims found"
    assert notifier.sent[0].tags == "warning"


@pytest.mark.asyncio
async def test_pipeline_malformed_claims_means_no_claims(service, fake_ai):
    """Test unparseable claim output is treated as no claims."""
    fake_ai.claims = AIResponseParseError("bad json", raw_response="not json")

    result = await service.run_pipeline(_record(), BASE_URL)

    assert result.status is FactCheckStatus.COMPLETE
    assert result.overall_assessment == NO_CLAIMS_ASSESSMENT


@pytest.mark.asyncio
async def test_pipeline_malformed_verdict_uses_fallback(service, fake_ai):
    """Test unparseable verdict output yields the fallback verdict."""
    fake_ai.verdict = AIResponseParseError("bad json")

    result = await service.run_pipeline(_record(), BASE_URL)

    assert result.status is FactCheckStatus.COMPLETE
    verdict = result.claim_results[0].verdict
    assert verdict.label is VerdictLabel.UNVERIFIABLE
    assert verdict.confidence is ConfidenceLevel.LOW
    assert verdict.explanation == "Error analyzing claim"
    assert verdict.context == "Analysis failed due to parsing error"


@pytest.mark.asyncio
async def test_pipeline_keeps_claim_order_and_summarizes_count(service, fake_ai, notifier):
    """Test several claims keep their order and the notification counts them."""
    fake_ai.claims = [Claim(claim_text="First claim"), Claim(claim_text="Second claim")]
    fake_ai.verdict = Verdict(
        label=VerdictLabel.FALSE,
        confidence=ConfidenceLevel.MEDIUM,
        explanation="Contradicted.",
    )

    result = await service.run_pipeline(_record(), BASE_URL, notify_topic="t")

    assert [r.claim for r in result.claim_results] == ["First claim", "Second claim"]
    assert notifier.sent[0].message == "2 claims analyzed"
    assert notifier.sent[0].tags == "x"


@pytest.mark.asyncio
async def test_pipeline_limits_sources_per_claim(service, fake_search):
    """Test at most five source URLs are kept per claim."""
    fake_search.default = [
        SearchResult(title=f"R{i}", url=f"https://example.org/{i}", description="d")
        for i in range(8)
    ]

    result = await service.run_pipeline(_record(), BASE_URL)

    assert result.claim_results[0].sources == [f"https://example.org/{i}" for i in range(5)]


@pytest.mark.asyncio
async def test_pipeline_unexpected_error_ends_in_error(service, memory_store, fake_ai, notifier):
    """Test a stage failure is recorded as an error result."""
    fake_ai.verdict = AIProviderError("upstream timeout")

    result = await service.run_pipeline(_record(), BASE_URL, notify_topic="t")

    assert result.status is FactCheckStatus.ERROR
    assert result.error == "upstream timeout"
    assert result.claim_results == []
    assert (await memory_store.get(result.request_id)).status is FactCheckStatus.ERROR
    assert notifier.sent[0].title == "Fact-Check Error"
    assert notifier.sent[0].tags == "warning"


@pytest.mark.asyncio
async def test_pipeline_notification_failure_keeps_complete(service, memory_store, notifier):
    """Test a failing notifier cannot turn a stored result into an error."""

    async def broken_send(notification):
        raise RuntimeError("notifier down")

    notifier.send = broken_send

    result = await service.run_pipeline(_record(), BASE_URL, notify_topic="t")

    assert result.status is FactCheckStatus.COMPLETE
    assert (await memory_store.get(result.request_id)).status is FactCheckStatus.COMPLETE


@pytest.mark.asyncio
async def test_pipeline_without_topic_sends_nothing(service, notifier):
    """Test notifications are only sent when a topic was given."""
    await service.run_pipeline(_record(), BASE_URL)

    assert notifier.sent == []
