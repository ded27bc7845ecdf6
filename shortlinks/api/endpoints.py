"""
FastAPI Endpoints for URL Shortener Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request parsing (Pydantic models)
- Building the per-request context (correlation id, visitor metadata)
- Delegating to service layer

Service errors propagate to the handlers in ``shortlinks.api.errors``.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from shortlinks.api.dependencies import (
    RequestContext,
    get_redirect_service,
    get_request_context,
    get_stats_service,
    get_url_service,
)
from shortlinks.api.schemas import (
    ClickDetail,
    ErrorResponse,
    ShortenRequest,
    ShortenResponse,
    StatsResponse,
)
from shortlinks.core.exceptions import VisitRecordingError
from shortlinks.services.redirect_service import RedirectService
from shortlinks.services.stats_service import StatsService
from shortlinks.services.url_service import URLShorteningService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/shorturls",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short URL",
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def create_short_url(
    body: ShortenRequest,
    context: RequestContext = Depends(get_request_context),
    url_service: URLShorteningService = Depends(get_url_service)
) -> ShortenResponse:
    """
    Create a new short URL from a long URL.

    An optional validity (minutes) and custom shortcode may be supplied.
    """
    created = await url_service.create_short_link(
        body.url,
        validity_minutes=body.validity,
        requested_code=body.shortcode
    )

    return ShortenResponse(
        logID=context.log_id,
        shortLink=created.short_link,
        expiry=created.expiry_at
    )


@router.get(
    "/shorturls/{short_code}",
    response_model=StatsResponse,
    summary="Get URL statistics",
    responses={404: {"model": ErrorResponse}},
)
async def get_url_stats(
    short_code: str,
    context: RequestContext = Depends(get_request_context),
    stats_service: StatsService = Depends(get_stats_service)
) -> StatsResponse:
    """
    Get click statistics for a short code, including every recorded visit.
    """
    stats = await stats_service.get_stats(short_code)

    return StatsResponse(
        log_id=context.log_id,
        code=stats.code,
        long_url=stats.long_url,
        created_at=stats.created_at,
        expiry_at=stats.expiry_at,
        total_clicks=stats.total_clicks,
        unique_visitors=stats.unique_visitors,
        detailed_clicks=[
            ClickDetail(
                timestamp=visit.visited_at,
                ip=visit.ip,
                user_agent=visit.user_agent,
                referrer=visit.referrer,
            )
            for visit in stats.detailed_clicks
        ],
    )


@router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to original URL",
    responses={404: {"model": ErrorResponse}, 410: {"model": ErrorResponse}},
)
async def redirect_to_url(
    short_code: str,
    context: RequestContext = Depends(get_request_context),
    redirect_service: RedirectService = Depends(get_redirect_service)
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short code.

    Raises:
        ShortCodeNotFoundError: 404 for unknown codes
        ShortCodeExpiredError: 410 once the validity window has passed
    """
    try:
        long_url = await redirect_service.resolve_and_record(short_code, context.visitor)
    except VisitRecordingError as e:
        # The redirect is served even when the click could not be recorded
        logger.error(
            f"Visit not recorded for {e.short_code} logID:{context.log_id}: {e}",
            exc_info=e.original_error
        )
        long_url = e.long_url

    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
