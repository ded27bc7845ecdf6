"""
FastAPI dependencies for dependency injection.

The Database handle lives on ``app.state`` for the lifetime of the process;
stores and services are built per request around it. The correlation id set
by the logging middleware is turned into an explicit RequestContext value.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from shortlinks.core.setting import Settings
from shortlinks.db.session import Database
from shortlinks.services.link_store import LinkStore
from shortlinks.services.redirect_service import RedirectService, VisitorContext
from shortlinks.services.stats_service import StatsService
from shortlinks.services.url_service import URLShorteningService
from shortlinks.services.visit_ledger import VisitLedger


@dataclass(frozen=True)
class RequestContext:
    log_id: str
    visitor: VisitorContext


def get_client_ip(request: Request) -> Optional[str]:
    """
    Extract client IP address from request.

    Handles proxies and load balancers by checking X-Forwarded-For header.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else None


def get_log_id(request: Request) -> str:
    return getattr(request.state, "log_id", None) or ""


def get_request_context(request: Request) -> RequestContext:
    return RequestContext(
        log_id=get_log_id(request),
        visitor=VisitorContext(
            ip=get_client_ip(request),
            user_agent=request.headers.get("User-Agent"),
            referrer=request.headers.get("Referer"),
        ),
    )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_link_store(database: Database = Depends(get_database)) -> LinkStore:
    return LinkStore(database)


def get_visit_ledger(database: Database = Depends(get_database)) -> VisitLedger:
    return VisitLedger(database)


def get_url_service(
    link_store: LinkStore = Depends(get_link_store),
    settings: Settings = Depends(get_settings)
) -> URLShorteningService:
    return URLShorteningService(
        link_store,
        base_url=settings.BASE_URL,
        default_validity_minutes=settings.DEFAULT_VALIDITY_MINUTES,
        code_length=settings.SHORT_CODE_LENGTH,
        max_attempts=settings.SHORT_CODE_MAX_ATTEMPTS,
    )


def get_redirect_service(
    link_store: LinkStore = Depends(get_link_store),
    visit_ledger: VisitLedger = Depends(get_visit_ledger)
) -> RedirectService:
    return RedirectService(link_store, visit_ledger)


def get_stats_service(
    link_store: LinkStore = Depends(get_link_store),
    visit_ledger: VisitLedger = Depends(get_visit_ledger)
) -> StatsService:
    return StatsService(link_store, visit_ledger)
