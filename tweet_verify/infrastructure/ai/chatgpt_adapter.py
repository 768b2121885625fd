"""ChatGPT implementation of the AI provider interface."""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, Field, ValidationError

from ...domain.models.claim import Claim, SearchQuery
from ...domain.models.verification import ClaimResult, ConfidenceLevel, Verdict, VerdictLabel
from ...domain.ports.ai_provider import AIProvider, AIProviderError, AIResponseParseError

logger = logging.getLogger(__name__)

NOT_FOUND = "NOT_FOUND"

ItemModel = TypeVar("ItemModel", bound=BaseModel)

_CODE_FENCE = re.compile(r"```(?:json)?\s*\n?|\n?```")


class ChatGPTConfig(BaseModel):
    """Configuration for ChatGPT adapter."""

    api_key: str = Field(..., description="OpenAI API key")
    model: str = Field(default="gpt-4o", description="Model for analysis and vision")
    fast_model: str = Field(default="gpt-4o-mini", description="Model for text extraction from search results")
    temperature: float = Field(default=0.1, description="Temperature for responses")
    timeout: float = Field(default=60.0, description="API timeout in seconds")
    base_url: str = Field(default="https://api.openai.com/v1", description="API base URL")
    verify_on_startup: bool = Field(default=False, description="Check API access during initialize()")


def parse_json_response(text: str) -> Any:
    """Parse model output as JSON, tolerating markdown code fences."""
    cleaned = _CODE_FENCE.sub("", text or "").strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise AIResponseParseError(f"Invalid JSON in model response: {e}", raw_response=text) from e


def _as_list(data: Any, key: str) -> List[Any]:
    """Accept either a bare JSON array or an object wrapping it under ``key``."""
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise AIResponseParseError(f"Expected a list of {key}", raw_response=json.dumps(data))
    return data


def _validate_items(model: Type[ItemModel], items: List[Any], label: str) -> List[ItemModel]:
    """Validate each item on its own, skipping the ones that do not fit ``model``."""
    valid = []
    for item in items:
        if not isinstance(item, dict):
            logger.warning(f"⚠️ Skipping non-object {label}: {item!r}")
            continue
        try:
            valid.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"⚠️ Skipping malformed {label} {item!r}: {e.error_count()} error(s)")
    return valid


class ChatGPTAdapter(AIProvider):
    """ChatGPT implementation of the AI provider interface."""

    def __init__(
        self,
        config: Optional[ChatGPTConfig] = None,
    ):
        """Initialize the adapter."""
        self._config = config or ChatGPTConfig(api_key="")
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the HTTP client and optionally verify API access."""
        try:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self._config.base_url,
                    timeout=self._config.timeout,
                    headers={
                        "Authorization": f"Bearer {self._config.api_key}",
                        "Content-Type": "application/json",
                    },
                )

            if self._config.verify_on_startup:
                response = await self._client.get("/models")
                response.raise_for_status()
            self._initialized = True
        except Exception as e:
            self._initialized = False
            if self._client:
                await self._client.aclose()
                self._client = None
            raise ConnectionError(f"Failed to initialize ChatGPT provider: {e}")

    async def _chat(
        self,
        content: Any,
        max_tokens: int,
        model: Optional[str] = None,
    ) -> str:
        """Send a single user message and return the reply text."""
        if not self._client:
            raise AIProviderError("Provider not initialized")

        try:
            response = await self._client.post(
                "/chat/completions",
                json={
                    "model": model or self._config.model,
                    "messages": [{"role": "user", "content": content}],
                    "temperature": self._config.temperature,
                    "max_tokens": max_tokens,
                },
            )
            response.raise_for_status()
            message = response.json()["choices"][0]["message"]
        except httpx.HTTPError as e:
            raise AIProviderError(f"ChatGPT request failed: {e}") from e
        except (KeyError, IndexError, ValueError) as e:
            raise AIProviderError(f"Unexpected ChatGPT response shape: {e}") from e

        return (message.get("content") or "").strip()

    async def extract_claims(self, tweet_text: str) -> List[Claim]:
        """Extract verifiable claims from post text."""
        prompt = f"""Analyze this tweet and extract all factual claims that can be verified:

Tweet: "{tweet_text}"

For each claim, provide:
1. The specific claim text
2. What type of claim it is (statistical, scientific, historical, medical, etc.)
3. How specific/verifiable it is (very specific, somewhat specific, vague)

Return ONLY valid JSON with this structure:
{{
  "claims": [
    {{"claim": "the exact claim text", "type": "claim type", "specificity": "specificity level"}}
  ]
}}

If there are no verifiable factual claims, return {{"claims": []}}

Do not include opinions, subjective statements, or future predictions. Only extract claims that can be fact-checked against evidence."""

        response_text = await self._chat(prompt, max_tokens=1024)
        logger.debug(f"Claim extraction response: {response_text}")

        items = _as_list(parse_json_response(response_text), "claims")
        return _validate_items(Claim, items, "claim")

    async def generate_search_queries(self, claim: str, tweet_text: str) -> List[SearchQuery]:
        """Generate 2-3 search queries for fact-checking a claim."""
        prompt = f"""Generate 2-3 effective search queries to fact-check this claim:

Claim: "{claim}"
Original tweet context: "{tweet_text}"

For each search query, provide:
1. The search query text (optimized for search engines)
2. A brief rationale for why this query is useful

Return ONLY valid JSON with this structure:
{{
  "queries": [
    {{"query": "search query text", "rationale": "why this query helps verify the claim"}}
  ]
}}

Make queries specific and likely to find authoritative sources."""

        response_text = await self._chat(prompt, max_tokens=512)
        items = _as_list(parse_json_response(response_text), "queries")
        return _validate_items(SearchQuery, items, "search query")

    async def analyze_claim(self, claim: str, tweet_text: str, evidence: str) -> Verdict:
        """Analyze a claim against search results."""
        labels = " | ".join(f'"{label.value}"' for label in VerdictLabel)
        prompt = f"""You are a fact-checker. Analyze this claim from a tweet against the search results below.

Claim: "{claim}"
Original tweet: "{tweet_text}"

Search results:
{evidence or "No search results available."}

Provide a thorough fact-check analysis. Return ONLY a valid JSON object with this structure:
{{
  "verdict": {labels},
  "confidence": "High" | "Medium" | "Low",
  "explanation": "2-3 sentence explanation of your verdict",
  "evidence": ["key piece of evidence 1", "key piece of evidence 2"],
  "context": "important context or nuances that affect the verdict"
}}

Guidelines:
- "True": The claim is accurate and well-supported by evidence
- "Partially True": The claim has some truth but is misleading, lacks context, or is imprecise
- "False": The claim is contradicted by evidence
- "Unverifiable": Insufficient or conflicting evidence to make a determination

Be precise, cite specific evidence, and note important context."""

        response_text = await self._chat(prompt, max_tokens=2048)
        result = parse_json_response(response_text)
        if not isinstance(result, dict):
            raise AIResponseParseError("Verdict is not a JSON object", raw_response=response_text)

        try:
            evidence_items = result.get("evidence") or []
            if isinstance(evidence_items, str):
                evidence_items = [evidence_items]
            return Verdict(
                label=VerdictLabel(result["verdict"]),
                confidence=ConfidenceLevel(result["confidence"]),
                explanation=str(result["explanation"]),
                evidence_snippets=[str(item) for item in evidence_items],
                context=str(result.get("context") or ""),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise AIResponseParseError(f"Malformed verdict: {e}", raw_response=response_text) from e

    async def generate_overall_assessment(
        self,
        tweet_text: str,
        claim_results: List[ClaimResult],
    ) -> str:
        """Summarize the fact-check results in 2-3 sentences."""
        verdict_summary = "\n".join(
            f'- "{cr.claim}": {cr.verdict.label.value} ({cr.verdict.confidence.value} confidence)'
            for cr in claim_results
        )
        prompt = f"""Summarize the fact-check results for this tweet in 2-3 sentences:

Original tweet: "{tweet_text}"

Fact-check results:
{verdict_summary}

Provide a clear, concise overall assessment that captures the main takeaway."""

        return await self._chat(prompt, max_tokens=256)

    async def extract_post_from_search_results(self, search_results: str) -> Optional[str]:
        """Extract the tweet text from search results about it."""
        prompt = f"""I have search results about a tweet but cannot access the tweet directly. Extract the actual tweet text from these search results.

Search Results:
{search_results}

Return ONLY the tweet text itself, nothing else. If you cannot find the tweet text in the results, return "{NOT_FOUND}"."""

        extracted = await self._chat(prompt, max_tokens=500, model=self._config.fast_model)
        if extracted == NOT_FOUND or len(extracted) < 10:
            return None
        return extracted

    async def extract_post_from_image(self, image_base64: str, media_type: str) -> Optional[str]:
        """Read tweet text from a screenshot using the vision model."""
        logger.info(f"👁️ Calling vision model with image ({len(image_base64)} bytes, {media_type})")
        content: List[Dict[str, Any]] = [
            {
                "type": "image_url",
                "image_url": {"url": f"data:{media_type};base64,{image_base64}"},
            },
            {
                "type": "text",
                "text": (
                    "Extract the text of the tweet or social media post shown in this image. "
                    "Return ONLY the post text, without usernames, timestamps or engagement counts. "
                    f'If the image does not contain a post, return "{NOT_FOUND}".'
                ),
            },
        ]

        extracted = await self._chat(content, max_tokens=2048)
        extracted = extracted.strip().strip('"').strip()
        if NOT_FOUND in extracted or len(extracted) < 5:
            logger.info(f"Vision model found no post text: {extracted!r}")
            return None
        return extracted

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the AI provider."""
        return "ChatGPT"

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "claim_extraction": True,
            "query_generation": True,
            "claim_verification": True,
            "assessment_generation": True,
            "vision": True,
        }
