"""Durable result store on a Redis-compatible REST key-value service."""

import json
import logging
from typing import Any, List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from ...domain.models.fact_check_result import FactCheckResult
from ...domain.ports.result_store import ResultStore
from .memory_store import MemoryResultStore

logger = logging.getLogger(__name__)


class KVStoreConfig(BaseModel):
    """Configuration for the REST key-value store."""

    url: str = Field(..., description="REST endpoint of the key-value service")
    token: str = Field(..., description="Bearer token for the REST endpoint")
    ttl_seconds: int = Field(default=60 * 60 * 24 * 30, description="Retention window per record")
    key_prefix: str = Field(default="result:", description="Prefix for result keys")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")


class KVStoreError(RuntimeError):
    """Raised when the key-value service rejects or fails a command."""


class KVResultStore(ResultStore):
    """Stores results as JSON strings with an expiry.

    Commands are sent as JSON arrays (``["SET", key, value, "EX", ttl]``).
    When the service is unreachable the store falls back to the in-memory
    store it was given, so a request is never lost within the running
    process.
    """

    def __init__(
        self,
        config: KVStoreConfig,
        fallback: Optional[MemoryResultStore] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the store.

        Args:
            config: Key-value service configuration
            fallback: Store used when the service fails
            client: Preconfigured HTTP client
        """
        self._config = config
        self._fallback = fallback or MemoryResultStore(ttl_seconds=config.ttl_seconds)
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                headers={"Authorization": f"Bearer {self._config.token}"},
            )
        return self._client

    def _key(self, request_id: str) -> str:
        return f"{self._config.key_prefix}{request_id}"

    async def _command(self, *args: Any) -> Any:
        """Run one command and return its ``result`` field."""
        command: List[Any] = [str(arg) for arg in args]
        try:
            response = await self._get_client().post(self._config.url, json=command)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise KVStoreError(f"{args[0]} failed: {e}") from e

        if isinstance(payload, dict) and payload.get("error"):
            raise KVStoreError(f"{args[0]} failed: {payload['error']}")
        return payload.get("result") if isinstance(payload, dict) else None

    async def put(self, result: FactCheckResult) -> None:
        """Store a result, falling back to memory on failure."""
        value = json.dumps(result.to_dict())
        try:
            await self._command("SET", self._key(result.request_id), value, "EX", self._config.ttl_seconds)
        except KVStoreError as e:
            logger.error(f"❌ Error storing result in KV store: {e}")
            await self._fallback.put(result)
            return

        # The fallback only ever holds a record whose latest write missed the service.
        self._fallback.discard(result.request_id)

    async def get(self, request_id: str) -> Optional[FactCheckResult]:
        """Fetch a result, preferring a newer copy held by the memory fallback."""
        fallback_result = await self._fallback.get(request_id)
        if fallback_result is not None:
            return fallback_result

        try:
            data = await self._command("GET", self._key(request_id))
        except KVStoreError as e:
            logger.error(f"❌ Error retrieving result from KV store: {e}")
            return None
        if not data:
            return None

        try:
            if isinstance(data, str):
                data = json.loads(data)
            return FactCheckResult.from_dict(data)
        except (ValueError, ValidationError) as e:
            logger.error(f"❌ Corrupt result stored under {request_id}: {e}")
            return None

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def is_durable(self) -> bool:
        """Records survive restarts while the service is reachable."""
        return True
