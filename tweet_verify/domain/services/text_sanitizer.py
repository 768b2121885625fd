"""Heuristics for judging candidate post text scraped from HTML and search snippets."""

import re
from typing import List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

DEFAULT_BOILERPLATE_MARKERS: Tuple[str, ...] = (
    "JavaScript is not available",
    "JavaScript is disabled",
    "enable JavaScript",
    "Sign up now",
    "personalized timeline",
    "Page not found",
    "404",
    "Failed to scan",
    "private/suspended account",
)

# Tried in order; the first non-empty content wins.
META_DESCRIPTION_ATTRS: Tuple[Tuple[str, str], ...] = (
    ("property", "og:description"),
    ("name", "description"),
    ("property", "twitter:description"),
)

_ENTITIES = (
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
)

_SOURCE_URL_PATTERN = re.compile(r"URL: (https?://\S+)")


class CandidateTextSanitizer:
    """Decides whether a scraped string is plausibly the text of a post.

    Keeps string matching rules in one place so the text acquisition
    strategies only deal with "usable text or nothing".
    """

    def __init__(
        self,
        min_length: int = 20,
        boilerplate_markers: Sequence[str] = DEFAULT_BOILERPLATE_MARKERS,
    ):
        self.min_length = min_length
        self.boilerplate_markers = tuple(boilerplate_markers)

    @staticmethod
    def unescape(text: str) -> str:
        """Replace escaped quotes, apostrophes, angle brackets and ampersands."""
        for entity, char in _ENTITIES:
            text = text.replace(entity, char)
        return text

    def is_boilerplate(self, text: str) -> bool:
        """Check for login walls, error pages and similar non-content."""
        return any(marker in text for marker in self.boilerplate_markers)

    def is_usable(self, text: Optional[str]) -> bool:
        """Check that text is long enough and not boilerplate."""
        if not text:
            return False
        return len(text) >= self.min_length and not self.is_boilerplate(text)

    def clean(self, text: Optional[str]) -> Optional[str]:
        """Unescape and strip ``text``; None if the result is not usable."""
        if not text:
            return None
        cleaned = self.unescape(text).strip()
        return cleaned if self.is_usable(cleaned) else None

    def extract_meta_description(self, html: str) -> Optional[str]:
        """Clean the first non-empty description meta tag in ``html``.

        Later tag variants are only consulted when earlier ones are missing or
        empty; boilerplate in the first filled tag yields None.
        """
        if not html:
            return None
        soup = BeautifulSoup(html, "html.parser")
        for attr, value in META_DESCRIPTION_ATTRS:
            tag = soup.find("meta", attrs={attr: value})
            if tag is None:
                continue
            content = tag.get("content")
            if content:
                return self.clean(content)
        return None


def extract_source_urls(evidence: str, limit: int = 5) -> List[str]:
    """Pull ``URL: ...`` tokens from an evidence blob, in order, at most ``limit``."""
    return _SOURCE_URL_PATTERN.findall(evidence or "")[:limit]
