"""Tests for the security headers and request body limit."""

import json

import pytest
from pydantic import ValidationError

from shortlinks.core.setting import Settings
from shortlinks.middleware.security import (
    CONTENT_SECURITY_POLICY,
    BodySizeLimitMiddleware,
    SECURITY_HEADERS,
)

MAX_BODY = 64 * 1024


class TestSecurityHeaders:
    def test_headers_on_api_responses(self, client):
        response = client.get("/health")

        for name, value in SECURITY_HEADERS.items():
            assert response.headers[name] == value
        assert response.headers["Content-Security-Policy"] == CONTENT_SECURITY_POLICY
        assert "x-powered-by" not in response.headers

    def test_headers_on_errors_and_redirects(self, client):
        client.post("/shorturls", json={"url": "https://example.com", "shortcode": "safe"})

        redirect = client.get("/safe", follow_redirects=False)
        missing = client.get("/unknown-code", follow_redirects=False)

        for response in (redirect, missing):
            assert response.headers["X-Content-Type-Options"] == "nosniff"
            assert response.headers["X-Frame-Options"] == "SAMEORIGIN"

    def test_docs_page_has_no_csp(self, client):
        response = client.get("/docs")

        assert response.status_code == 200
        assert "Content-Security-Policy" not in response.headers
        assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestBodySizeLimit:
    def test_oversized_body_rejected(self, client):
        body = json.dumps({"url": "https://example.com/" + "a" * MAX_BODY})

        response = client.post("/shorturls", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 413
        assert response.json()["kind"] == "payload_too_large"
        assert response.json()["logID"] == response.headers["X-Log-ID"]
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_body_at_limit_accepted(self, client):
        prefix = '{"url": "https://example.com/'
        suffix = '"}'
        body = prefix + "a" * (MAX_BODY - len(prefix) - len(suffix)) + suffix
        assert len(body.encode()) == MAX_BODY

        response = client.post("/shorturls", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_chunked_body_without_length_is_bounded(self):
        called = []

        async def app(scope, receive, send):
            called.append(True)

        chunks = [
            {"type": "http.request", "body": b"x" * 60, "more_body": True},
            {"type": "http.request", "body": b"x" * 60, "more_body": False},
        ]

        async def receive():
            return chunks.pop(0)

        sent = []

        async def send(message):
            sent.append(message)

        middleware = BodySizeLimitMiddleware(app, max_body_bytes=100)
        await middleware({"type": "http", "method": "POST", "path": "/shorturls", "headers": []}, receive, send)

        assert called == []
        assert sent[0]["status"] == 413
        assert json.loads(sent[1]["body"])["kind"] == "payload_too_large"

    @pytest.mark.asyncio
    async def test_small_chunked_body_is_replayed(self):
        seen = []

        async def app(scope, receive, send):
            while True:
                message = await receive()
                seen.append(message["body"])
                if not message.get("more_body"):
                    break

        chunks = [
            {"type": "http.request", "body": b"ab", "more_body": True},
            {"type": "http.request", "body": b"cd", "more_body": False},
        ]

        async def receive():
            return chunks.pop(0)

        async def send(message):
            pass

        middleware = BodySizeLimitMiddleware(app, max_body_bytes=100)
        await middleware({"type": "http", "method": "POST", "path": "/", "headers": []}, receive, send)

        assert b"".join(seen) == b"abcd"


class TestSettingsBounds:
    @pytest.mark.parametrize("length", [3, 33])
    def test_short_code_length_out_of_range(self, length):
        with pytest.raises(ValidationError):
            Settings(SHORT_CODE_LENGTH=length)

    def test_short_code_length_bounds_accepted(self):
        assert Settings(SHORT_CODE_LENGTH=4).SHORT_CODE_LENGTH == 4
        assert Settings(SHORT_CODE_LENGTH=32).SHORT_CODE_LENGTH == 32
