"""Persistence interface for fact-check results."""

from typing import Optional, Protocol

from ..models.fact_check_result import FactCheckResult


class ResultStore(Protocol):
    """Key-value store of results keyed by request id.

    ``put`` overwrites any existing record for the same request id.
    """

    async def put(self, result: FactCheckResult) -> None:
        """Store or overwrite a result."""
        ...

    async def get(self, request_id: str) -> Optional[FactCheckResult]:
        """Fetch a result, None if absent or expired."""
        ...

    async def shutdown(self) -> None:
        """Release backend resources."""
        ...

    @property
    def is_durable(self) -> bool:
        """Whether records survive a process restart."""
        ...
