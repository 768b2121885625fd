"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import HTTPException

from ..domain.ports.ai_provider import AIProvider
from ..domain.ports.result_store import ResultStore
from ..domain.services.assessment_synthesizer import AssessmentSynthesizer
from ..domain.services.claim_analyzer import ClaimAnalyzer
from ..domain.services.claim_extractor import ClaimExtractor
from ..domain.services.evidence_gatherer import EvidenceGatherer
from ..domain.services.fact_checking_service import FactCheckingService
from ..domain.services.task_supervisor import BackgroundTaskSupervisor
from ..domain.services.text_acquisition import TextAcquisitionResolver
from .ai.factory import AIProviderFactory
from .config import AppSettings
from .notify.ntfy_adapter import NtfyNotifier
from .search.brave_adapter import BraveSearchAdapter
from .storage.kv_store import KVResultStore
from .storage.memory_store import MemoryResultStore
from .web.page_fetcher import HttpxPageFetcher

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(self, settings: Optional[AppSettings] = None):
        """Initialize service container.

        Args:
            settings: Application settings, read from the environment if omitted
        """
        self.settings = settings or AppSettings.from_env()
        self.ai_factory = AIProviderFactory(self.settings.openai)
        self._services: Dict[str, Any] = {}
        self._started = False
        self._setup_services()

    def _build_result_store(self) -> ResultStore:
        memory_store = MemoryResultStore(ttl_seconds=self.settings.result_ttl_seconds)
        if self.settings.kv_store is None:
            return memory_store
        return KVResultStore(self.settings.kv_store, fallback=memory_store)

    def _setup_services(self) -> None:
        """Setup adapters that need no network round-trip to create."""
        logger.info("🔧 Setting up service container...")

        self._services = {
            "search_provider": BraveSearchAdapter(self.settings.search),
            "page_fetcher": HttpxPageFetcher(self.settings.fetcher),
            "result_store": self._build_result_store(),
            "notifier": NtfyNotifier(self.settings.ntfy),
            "supervisor": BackgroundTaskSupervisor(),
            "ai_provider": None,  # Created in startup()
            "fact_checking_service": None,
            "text_resolver": None,
        }

        logger.info("✅ Service container setup completed")

    async def startup(self) -> None:
        """Initialize the AI provider and the services that depend on it."""
        if self._started:
            return

        logger.info("🤖 Setting up AI provider...")
        ai_provider = await self.ai_factory.create_provider("chatgpt")
        self._wire_ai_services(ai_provider)
        self._started = True

    def _wire_ai_services(self, ai_provider: AIProvider) -> None:
        search_provider = self._services["search_provider"]
        self._services["ai_provider"] = ai_provider
        self._services["text_resolver"] = TextAcquisitionResolver(
            ai_provider=ai_provider,
            search_provider=search_provider,
            page_fetcher=self._services["page_fetcher"],
            mirror_hosts=self.settings.mirror_hosts,
            search_result_count=self.settings.search.result_count,
        )
        self._services["fact_checking_service"] = FactCheckingService(
            claim_extractor=ClaimExtractor(ai_provider),
            evidence_gatherer=EvidenceGatherer(
                ai_provider,
                search_provider,
                results_per_query=self.settings.search.result_count,
            ),
            claim_analyzer=ClaimAnalyzer(ai_provider),
            assessment_synthesizer=AssessmentSynthesizer(ai_provider),
            result_store=self._services["result_store"],
            notifier=self._services["notifier"],
            supervisor=self._services["supervisor"],
            max_tweet_length=self.settings.max_tweet_length,
        )

    async def shutdown(self) -> None:
        """Drain background pipelines, then close every client."""
        supervisor: BackgroundTaskSupervisor = self._services["supervisor"]
        finished = await supervisor.wait_all(timeout=self.settings.shutdown_grace_seconds)
        if not finished:
            await supervisor.cancel_all()

        await self.ai_factory.shutdown()
        for name in ("search_provider", "page_fetcher", "result_store", "notifier"):
            await self._services[name].shutdown()
        self._started = False
        logger.info("👋 Service container shut down")

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    @property
    def is_ready(self) -> bool:
        """Check if the AI-backed services are wired."""
        return self._services["fact_checking_service"] is not None

    def get_fact_checking_service(self) -> Optional[FactCheckingService]:
        """Get the fact checking service, None before startup."""
        return self.get("fact_checking_service")

    def get_text_resolver(self) -> Optional[TextAcquisitionResolver]:
        """Get the text acquisition resolver, None before startup."""
        return self.get("text_resolver")

    def get_result_store(self) -> ResultStore:
        """Get the result store."""
        return self.get("result_store")

    def get_supervisor(self) -> BackgroundTaskSupervisor:
        """Get the background task supervisor."""
        return self.get("supervisor")


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
def get_settings() -> AppSettings:
    """FastAPI dependency for application settings."""
    return get_service_container().settings


def get_fact_checking_service() -> FactCheckingService:
    """FastAPI dependency for the fact checking service."""
    service = get_service_container().get_fact_checking_service()
    if service is None:
        raise HTTPException(status_code=503, detail="AI provider is not available")
    return service


def get_text_resolver() -> TextAcquisitionResolver:
    """FastAPI dependency for the text acquisition resolver."""
    resolver = get_service_container().get_text_resolver()
    if resolver is None:
        raise HTTPException(status_code=503, detail="AI provider is not available")
    return resolver


def get_result_store() -> ResultStore:
    """FastAPI dependency for the result store."""
    return get_service_container().get_result_store()
