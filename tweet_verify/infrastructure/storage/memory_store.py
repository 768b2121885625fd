"""Process-local result store backed by a TTL cache."""

import logging
from typing import Optional

from cachetools import TTLCache

from ...domain.models.fact_check_result import FactCheckResult
from ...domain.ports.result_store import ResultStore

logger = logging.getLogger(__name__)


class MemoryResultStore(ResultStore):
    """Keeps results in memory for ``ttl_seconds``.

    Records are lost when the process exits. Each instance owns its own
    cache, so tests and containers never share state by accident.
    """

    def __init__(self, ttl_seconds: int = 60 * 60 * 24 * 30, maxsize: int = 10_000):
        """Initialize the store.

        Args:
            ttl_seconds: Retention window for each record
            maxsize: Maximum number of records before least-recently-used eviction
        """
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl_seconds)

    async def put(self, result: FactCheckResult) -> None:
        """Store or overwrite a result."""
        self._cache[result.request_id] = result

    async def get(self, request_id: str) -> Optional[FactCheckResult]:
        """Fetch a result, None if absent or expired."""
        return self._cache.get(request_id)

    def discard(self, request_id: str) -> None:
        """Drop a record if present."""
        self._cache.pop(request_id, None)

    async def shutdown(self) -> None:
        """Nothing to release."""
        pass

    def __len__(self) -> int:
        return len(self._cache)

    @property
    def is_durable(self) -> bool:
        """In-memory records do not survive restarts."""
        return False
