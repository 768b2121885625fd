"""Fact-checking API endpoints."""

import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from ...domain.ports.result_store import ResultStore
from ...domain.services.fact_checking_service import (
    FactCheckingService,
    InputValidationError,
    SubmissionReceipt,
)
from ...domain.services.text_acquisition import TextAcquisitionError, TextAcquisitionResolver
from ...infrastructure.config import AppSettings
from ...infrastructure.dependencies import (
    get_fact_checking_service,
    get_result_store,
    get_settings,
    get_text_resolver,
)

logger = logging.getLogger(__name__)

RESULT_PAGE = Path(__file__).resolve().parent.parent / "static" / "result.html"
TERMINAL_CACHE_CONTROL = "s-maxage=60, stale-while-revalidate"

router = APIRouter(prefix="/api", tags=["fact-check"])
page_router = APIRouter(tags=["pages"])


class CheckTweetRequest(BaseModel):
    """Request model for submitting a post for fact-checking."""

    tweet_text: Optional[str] = Field(None, alias="tweetText", description="Post text")
    tweet_url: Optional[str] = Field(None, alias="tweetUrl", description="Post URL")
    ntfy_topic: Optional[str] = Field(None, alias="ntfyTopic", description="Notification topic")
    image: Optional[str] = Field(None, description="Base64 screenshot, optionally a data URI")
    image_type: Optional[str] = Field(None, alias="imageType", description="Screenshot media type")

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True


def public_base_url(request: Request, settings: AppSettings) -> str:
    """Base URL used for result links."""
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")
    protocol = request.headers.get("x-forwarded-proto") or request.url.scheme
    host = request.headers.get("host") or request.url.netloc
    return f"{protocol}://{host}"


@router.post("/check-tweet", response_model=SubmissionReceipt)
async def check_tweet(
    body: CheckTweetRequest,
    request: Request,
    resolver: TextAcquisitionResolver = Depends(get_text_resolver),
    service: FactCheckingService = Depends(get_fact_checking_service),
    settings: AppSettings = Depends(get_settings),
) -> JSONResponse:
    """Accept a post for fact-checking.

    The post text is resolved synchronously; the pipeline then runs in the
    background and the response returns immediately.

    Returns:
        Request id, status and the result page URL
    """
    try:
        tweet_text = await resolver.resolve(
            tweet_text=body.tweet_text,
            image=body.image,
            image_type=body.image_type,
            tweet_url=body.tweet_url,
        )
    except TextAcquisitionError as e:
        logger.warning(f"❌ Text acquisition failed at stage '{e.stage}': {e.message} {e.details}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    try:
        receipt = await service.submit(
            tweet_text,
            base_url=public_base_url(request, settings),
            tweet_url=body.tweet_url,
            notify_topic=body.ntfy_topic,
        )
    except InputValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return JSONResponse(receipt.model_dump(by_alias=True))


async def _result_response(
    request_id: Optional[str],
    store: ResultStore,
    settings: AppSettings,
) -> JSONResponse:
    if not request_id or not request_id.strip():
        raise HTTPException(status_code=400, detail="Missing or invalid requestId")

    result = await store.get(request_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Result not found")

    headers = {"Cache-Control": TERMINAL_CACHE_CONTROL if result.is_terminal else "no-store"}
    if result.is_stale(timedelta(seconds=settings.stale_after_seconds)):
        logger.warning(f"[{request_id}] ⚠️ Result still processing after {settings.stale_after_seconds}s")
        headers["X-Result-Stale"] = "true"

    return JSONResponse(result.to_dict(), headers=headers)


@router.get("/get-result")
async def get_result(
    request_id: Optional[str] = Query(None, alias="requestId"),
    store: ResultStore = Depends(get_result_store),
    settings: AppSettings = Depends(get_settings),
) -> JSONResponse:
    """Return the stored fact-check record for ``requestId``."""
    return await _result_response(request_id, store, settings)


@router.get("/result/{request_id}")
async def get_result_by_path(
    request_id: str,
    store: ResultStore = Depends(get_result_store),
    settings: AppSettings = Depends(get_settings),
):
    """Return the stored fact-check record for a path request id."""
    return await _result_response(request_id, store, settings)


@page_router.get("/result/{request_id}", response_class=HTMLResponse)
async def result_page(request_id: str):
    """Serve the result display page; it polls the result endpoint itself."""
    try:
        return HTMLResponse(RESULT_PAGE.read_text(encoding="utf-8"))
    except OSError as e:
        logger.error(f"Error loading result page: {e}")
        return PlainTextResponse("Error loading result page", status_code=500)
