"""Health check endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    container: ServiceContainer = Depends(get_service_container),
) -> Dict[str, Any]:
    """Check the health of all service components.

    Returns:
        Availability of providers, storage mode and pending background work
    """
    ai_status = {}
    for provider_name, is_active in container.ai_factory.available_providers.items():
        ai_status[provider_name.title()] = is_active

    return {
        "status": "healthy" if container.is_ready else "degraded",
        "ai_providers": ai_status,
        "search_configured": container.get("search_provider").is_available,
        "durable_storage": container.get_result_store().is_durable,
        "pending_fact_checks": container.get_supervisor().pending,
    }
