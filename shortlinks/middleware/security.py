"""
Security Middleware

Hardening applied to every response and request:
- Standard security headers on every response (nosniff, frame options,
  referrer policy, HSTS, cross-origin policies, CSP outside the docs pages)
- No X-Powered-By / Server disclosure
- Request bodies larger than MAX_BODY_BYTES are refused with 413

The body limit is a plain ASGI middleware: it buffers the body up to the
limit before the application sees it, so chunked uploads without a
Content-Length are bounded too.
"""

import json
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
}

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; base-uri 'self'; frame-ancestors 'self'; "
    "object-src 'none'; form-action 'self'"
)

# Swagger UI and ReDoc load their assets from a CDN
CSP_EXEMPT_PATHS = frozenset({"/docs", "/docs/oauth2-redirect", "/redoc"})

DISCLOSING_HEADERS = ("X-Powered-By", "Server")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to every response and strips server disclosure headers.
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)

        if request.url.path not in CSP_EXEMPT_PATHS:
            response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)

        for name in DISCLOSING_HEADERS:
            if name in response.headers:
                del response.headers[name]

        return response


class BodySizeLimitMiddleware:
    """
    Refuses request bodies larger than ``max_body_bytes`` with a 413 response.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = self._declared_length(scope)
        if declared is not None and declared > self.max_body_bytes:
            await self._reject(scope, send)
            return

        messages: list[Message] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self.max_body_bytes:
                await self._reject(scope, send)
                return
            more_body = message.get("more_body", False)

        async def replay() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    @staticmethod
    def _declared_length(scope: Scope):
        for name, value in scope.get("headers", []):
            if name == b"content-length":
                try:
                    return int(value)
                except ValueError:
                    return None
        return None

    async def _reject(self, scope: Scope, send: Send) -> None:
        log_id = scope.get("state", {}).get("log_id", "")
        logger.warning(f"{scope.get('method')} {scope.get('path')} body over {self.max_body_bytes} bytes")
        body = json.dumps({
            "logID": log_id,
            "kind": "payload_too_large",
            "error": f"Request body exceeds {self.max_body_bytes} bytes.",
        }).encode("utf-8")
        await send({
            "type": "http.response.start",
            "status": 413,
            "headers": [
                (b"content-type", b"application/json"),
                (b"content-length", str(len(body)).encode("latin-1")),
            ],
        })
        await send({"type": "http.response.body", "body": body})


def add_security_middleware(app, max_body_bytes: int) -> None:
    """
    Add the body size limit and security headers to a FastAPI app.

    Must be called before add_logging_middleware so the logging middleware
    stays outermost and every response, 413s included, carries X-Log-ID.
    """
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=max_body_bytes)
    app.add_middleware(SecurityHeadersMiddleware)
