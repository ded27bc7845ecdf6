"""
Logging Middleware for Request/Response Logging

This middleware assigns a correlation id to every request and logs the
request/response cycle. It captures:
- Correlation id (UUID4), exposed on request.state.log_id and the X-Log-ID header
- Request method and path
- Response status code
- Request processing time
- Client IP address
"""

import time
import logging
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shortlinks.api.dependencies import get_client_ip

logger = logging.getLogger("shortlinks.requests")

LOG_ID_HEADER = "X-Log-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.

    The correlation id is assigned before the request reaches any endpoint,
    so endpoints and error handlers can echo it back.
    """

    async def dispatch(self, request: Request, call_next):
        log_id = str(uuid.uuid4())
        request.state.log_id = log_id

        client_ip = get_client_ip(request) or "unknown"
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time

        # Format: METHOD PATH STATUS_CODE PROCESS_TIME_MS CLIENT_IP LOG_ID
        logger.info(
            f"{request.method} {request.url.path} "
            f"{response.status_code} {process_time*1000:.2f}ms "
            f"IP:{client_ip} logID:{log_id}"
        )

        response.headers[LOG_ID_HEADER] = log_id
        response.headers["X-Process-Time"] = str(process_time)

        return response


def add_logging_middleware(app):
    """
    Add logging middleware to FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(LoggingMiddleware)
