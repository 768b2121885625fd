"""Resolves the plain text of a post from text, a screenshot or a post URL."""

import logging
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urlparse, urlunparse

from ..ports.ai_provider import AIProvider, AIProviderError
from ..ports.page_fetcher import PageFetcher, PageFetchError
from ..ports.search_provider import SearchProvider, SearchResult
from .evidence_gatherer import format_results
from .text_sanitizer import CandidateTextSanitizer

logger = logging.getLogger(__name__)

PLATFORM_DOMAINS: Tuple[str, ...] = ("twitter.com", "x.com")
DEFAULT_MIRROR_HOSTS: Tuple[str, ...] = ("vxtwitter.com", "fxtwitter.com")

MIN_IMAGE_PAYLOAD_LENGTH = 100
MIN_SNIPPET_FALLBACK_LENGTH = 30
DEFAULT_MEDIA_TYPE = "image/jpeg"

# Base64 prefixes of the PNG, JPEG, GIF and WEBP magic bytes.
IMAGE_SIGNATURES: Tuple[Tuple[str, str], ...] = (
    ("/9j/", "image/jpeg"),
    ("iVBORw", "image/png"),
    ("R0lGOD", "image/gif"),
    ("UklGR", "image/webp"),
)

URL_UNRESOLVED_MESSAGE = (
    "Unable to extract tweet content. Please try copying and pasting the tweet "
    "text manually or try again later."
)


class TextAcquisitionError(Exception):
    """Raised when no usable post text can be produced from the request."""

    def __init__(
        self,
        stage: str,
        message: str,
        details: str = "",
        status_code: int = 400,
    ):
        """Initialize the error.

        Args:
            stage: Which input form failed ("input", "image" or "url")
            message: Short client-facing message
            details: Operator-facing diagnosis
            status_code: HTTP status to report
        """
        super().__init__(message)
        self.stage = stage
        self.message = message
        self.details = details
        self.status_code = status_code


def strip_data_uri(image: str) -> str:
    """Drop a ``data:image/...;base64,`` prefix if present."""
    image = image.strip()
    if "," in image:
        prefix, _, payload = image.partition(",")
        if "base64" in prefix:
            return payload
    return image


def detect_media_type(image_base64: str) -> str:
    """Infer the image media type from its base64-encoded magic bytes."""
    for signature, media_type in IMAGE_SIGNATURES:
        if image_base64.startswith(signature):
            return media_type
    return DEFAULT_MEDIA_TYPE


def _host_matches(host: str, domains: Sequence[str]) -> bool:
    host = host.lower()
    return any(host == domain or host.endswith(f".{domain}") for domain in domains)


def is_platform_url(url: str) -> bool:
    """Check if ``url`` points at the post's own platform."""
    return _host_matches(urlparse(url).hostname or "", PLATFORM_DOMAINS)


class TextAcquisitionResolver:
    """Produces post text from whichever input form the caller supplied.

    Strategies are tried in priority order and each runs only if the
    previous one produced nothing: direct text, screenshot, then post URL
    (mirror pages, web search snippets, model extraction over snippets).
    """

    def __init__(
        self,
        ai_provider: AIProvider,
        search_provider: SearchProvider,
        page_fetcher: PageFetcher,
        sanitizer: Optional[CandidateTextSanitizer] = None,
        mirror_hosts: Sequence[str] = DEFAULT_MIRROR_HOSTS,
        search_result_count: int = 5,
    ):
        self._ai = ai_provider
        self._search = search_provider
        self._fetcher = page_fetcher
        self._sanitizer = sanitizer or CandidateTextSanitizer()
        self._mirror_hosts = tuple(mirror_hosts)
        self._search_result_count = search_result_count

    async def resolve(
        self,
        tweet_text: Optional[str] = None,
        image: Optional[str] = None,
        image_type: Optional[str] = None,
        tweet_url: Optional[str] = None,
    ) -> str:
        """Resolve post text.

        Args:
            tweet_text: Text supplied directly by the caller
            image: Base64 screenshot, optionally a data URI
            image_type: Declared media type of ``image``
            tweet_url: URL of the post

        Returns:
            Plain post text

        Raises:
            TextAcquisitionError: If every applicable strategy failed
        """
        if tweet_text and tweet_text.strip():
            return tweet_text

        if image:
            return await self.resolve_image(image, image_type)

        if tweet_url and tweet_url.strip():
            return await self.resolve_url(tweet_url.strip())

        raise TextAcquisitionError("input", "Missing or invalid tweetText")

    async def resolve_image(self, image: str, image_type: Optional[str] = None) -> str:
        """Read post text from a screenshot; no fallback on failure."""
        payload = strip_data_uri(image)
        media_type = image_type or detect_media_type(payload)
        logger.info(f"🖼️ Image provided: {media_type}, base64 length {len(payload)}")

        if len(payload) < MIN_IMAGE_PAYLOAD_LENGTH:
            raise TextAcquisitionError(
                "image",
                "Invalid image data",
                details=(
                    f"Image data is too short or missing. Received {len(payload)} bytes. "
                    "Make sure the image is base64 encoded."
                ),
            )

        try:
            extracted = await self._ai.extract_post_from_image(payload, media_type)
        except AIProviderError as e:
            logger.error(f"❌ Vision extraction failed: {e}")
            raise TextAcquisitionError(
                "image",
                "Failed to process image",
                details=str(e),
                status_code=502,
            ) from e

        if not extracted or not extracted.strip():
            logger.error("❌ Vision extraction found no post text")
            raise TextAcquisitionError(
                "image",
                "Could not extract tweet text from image",
                details=f"Image received: {media_type}, {len(payload)} bytes. Try a different screenshot.",
            )

        logger.info(f"✅ Extracted post text from image: {extracted[:100]}...")
        return extracted.strip()

    def mirror_urls(self, tweet_url: str) -> List[str]:
        """Rewrite a platform URL onto each mirror host, in priority order."""
        if "://" not in tweet_url:
            tweet_url = f"https://{tweet_url}"
        parsed = urlparse(tweet_url)
        if not _host_matches(parsed.hostname or "", PLATFORM_DOMAINS):
            return []
        return [urlunparse(parsed._replace(netloc=host)) for host in self._mirror_hosts]

    async def resolve_url(self, tweet_url: str) -> str:
        """Resolve post text from its URL, raising if every strategy fails."""
        for mirror_url in self.mirror_urls(tweet_url):
            text = await self._from_mirror(mirror_url)
            if text:
                return text

        text = await self._from_search(tweet_url)
        if text:
            return text

        logger.warning(f"⚠️ All extraction methods failed for {tweet_url}")
        raise TextAcquisitionError(
            "url",
            URL_UNRESOLVED_MESSAGE,
            details="Tweet content could not be extracted from the URL. The platform may be blocking automated access.",
        )

    async def _from_mirror(self, mirror_url: str) -> Optional[str]:
        logger.info(f"🔗 Trying mirror {mirror_url}")
        try:
            html = await self._fetcher.fetch_html(mirror_url)
        except PageFetchError as e:
            logger.warning(f"⚠️ Mirror fetch failed for {mirror_url}: {e}")
            return None

        text = self._sanitizer.extract_meta_description(html)
        if text:
            logger.info(f"✅ Extracted post text from {mirror_url}")
        return text

    def pick_snippet(self, results: Sequence[SearchResult]) -> Optional[str]:
        """Choose the best search snippet as post text.

        A usable snippet from the platform's own domain wins, otherwise the
        first usable snippet longer than the fallback threshold.
        """
        candidates = []
        for result in results:
            text = self._sanitizer.clean(result.description)
            if text:
                candidates.append((result, text))

        for result, text in candidates:
            if is_platform_url(result.url):
                return text
        for _, text in candidates:
            if len(text) > MIN_SNIPPET_FALLBACK_LENGTH:
                return text
        return None

    async def _from_search(self, tweet_url: str) -> Optional[str]:
        logger.info("🔎 Mirror extraction failed, trying web search...")
        results = await self._search.search(tweet_url, self._search_result_count)
        if not results:
            return None

        text = self.pick_snippet(results)
        if text:
            logger.info("✅ Extracted post text from search snippet")
            return text

        logger.info("🤖 Trying model extraction from search results...")
        try:
            extracted = await self._ai.extract_post_from_search_results(
                format_results(results, tweet_url)
            )
        except AIProviderError as e:
            logger.error(f"❌ Model extraction from search results failed: {e}")
            return None

        text = self._sanitizer.clean(extracted)
        if text:
            logger.info("✅ Extracted post text using the model")
        return text
