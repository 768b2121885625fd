"""Application configuration loaded from environment variables."""

import logging
import os
from typing import Optional, Tuple

from pydantic import BaseModel, Field

from .ai.chatgpt_adapter import ChatGPTConfig
from .notify.ntfy_adapter import NtfyConfig
from .search.brave_adapter import BraveSearchConfig
from .storage.kv_store import KVStoreConfig
from .web.page_fetcher import PageFetcherConfig

logger = logging.getLogger(__name__)

THIRTY_DAYS = 60 * 60 * 24 * 30


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class AppSettings(BaseModel):
    """Top-level settings for the fact-check service."""

    openai: ChatGPTConfig
    search: BraveSearchConfig
    kv_store: Optional[KVStoreConfig] = None
    ntfy: NtfyConfig = Field(default_factory=NtfyConfig)
    fetcher: PageFetcherConfig = Field(default_factory=PageFetcherConfig)
    mirror_hosts: Tuple[str, ...] = ("vxtwitter.com", "fxtwitter.com")
    result_ttl_seconds: int = THIRTY_DAYS
    public_base_url: Optional[str] = None
    max_tweet_length: int = 1000
    stale_after_seconds: int = 600
    shutdown_grace_seconds: float = 60.0

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Create settings from environment variables."""
        openai = ChatGPTConfig(
            api_key=os.getenv("OPENAI_API_KEY", ""),
            model=os.getenv("OPENAI_MODEL", "gpt-4o"),
            fast_model=os.getenv("OPENAI_FAST_MODEL", "gpt-4o-mini"),
            timeout=float(os.getenv("OPENAI_TIMEOUT", "60")),
            verify_on_startup=_env_bool("OPENAI_VERIFY_ON_STARTUP"),
        )
        if not openai.api_key:
            logger.warning("⚠️ OPENAI_API_KEY not found in environment variables")

        search = BraveSearchConfig(
            api_key=os.getenv("BRAVE_SEARCH_API_KEY", ""),
            result_count=int(os.getenv("SEARCH_RESULT_COUNT", "5")),
            timeout=float(os.getenv("SEARCH_TIMEOUT", "15")),
        )
        if not search.api_key:
            logger.warning("⚠️ BRAVE_SEARCH_API_KEY not configured - searches will return no results")

        result_ttl = int(os.getenv("RESULT_TTL_SECONDS", str(THIRTY_DAYS)))

        kv_store = None
        kv_url = os.getenv("KV_REST_API_URL")
        kv_token = os.getenv("KV_REST_API_TOKEN")
        if kv_url and kv_token:
            kv_store = KVStoreConfig(url=kv_url, token=kv_token, ttl_seconds=result_ttl)
            logger.info(f"🗄️ Durable result store configured: {kv_url}")
        else:
            logger.info("🗄️ KV store not configured, using in-memory storage")

        mirror_hosts = tuple(
            host.strip()
            for host in os.getenv("MIRROR_HOSTS", "vxtwitter.com,fxtwitter.com").split(",")
            if host.strip()
        )

        return cls(
            openai=openai,
            search=search,
            kv_store=kv_store,
            ntfy=NtfyConfig(base_url=os.getenv("NTFY_BASE_URL", "https://ntfy.sh")),
            fetcher=PageFetcherConfig(timeout=float(os.getenv("FETCH_TIMEOUT", "10"))),
            mirror_hosts=mirror_hosts,
            result_ttl_seconds=result_ttl,
            public_base_url=os.getenv("PUBLIC_BASE_URL") or None,
            max_tweet_length=int(os.getenv("MAX_TWEET_LENGTH", "1000")),
            stale_after_seconds=int(os.getenv("STALE_AFTER_SECONDS", "600")),
            shutdown_grace_seconds=float(os.getenv("SHUTDOWN_GRACE_SECONDS", "60")),
        )
