"""HTTP-level tests for the FastAPI endpoints."""

from datetime import datetime, timedelta, timezone

from shortlinks.api.dependencies import get_visit_ledger
from shortlinks.core.exceptions import StorageError
from shortlinks.db.models import ShortLink


def create(client, **body):
    return client.post("/shorturls", json=body)


class TestCreateEndpoint:
    def test_create_with_generated_code(self, client):
        response = create(client, url="https://example.com/page", validity=5)

        assert response.status_code == 201
        data = response.json()
        assert data["shortLink"].startswith("http://sho.rt/")
        assert len(data["shortLink"].rsplit("/", 1)[1]) == 7
        assert data["logID"]
        assert data["logID"] == response.headers["X-Log-ID"]
        assert "expiry" in data

    def test_create_with_custom_code(self, client):
        response = create(client, url="https://example.com", shortcode="Launch-2026")

        assert response.status_code == 201
        assert response.json()["shortLink"] == "http://sho.rt/launch-2026"

    def test_missing_url(self, client):
        response = create(client)

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_url"
        assert response.json()["logID"] == response.headers["X-Log-ID"]

    def test_invalid_url(self, client):
        response = create(client, url="ftp://example.com")

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_url"

    def test_invalid_shortcode(self, client):
        response = create(client, url="https://example.com", shortcode="bad code!")

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_shortcode"

    def test_duplicate_shortcode(self, client):
        assert create(client, url="https://example.com/1", shortcode="taken").status_code == 201

        response = create(client, url="https://example.com/2", shortcode="taken")

        assert response.status_code == 409
        assert response.json()["kind"] == "duplicate_shortcode"

    def test_reserved_code_rejected(self, client):
        response = create(client, url="https://example.com", shortcode="docs")

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_shortcode"
        assert client.get("/docs", follow_redirects=False).status_code == 200

    def test_huge_validity_is_capped(self, client):
        response = create(client, url="https://example.com", validity=10**10)

        assert response.status_code == 201
        expiry = datetime.fromisoformat(response.json()["expiry"].replace("Z", "+00:00"))
        assert expiry - datetime.now(timezone.utc) > timedelta(days=9 * 365)

    def test_whole_float_validity(self, client):
        response = create(client, url="https://example.com", validity=5.0)

        assert response.status_code == 201
        expiry = datetime.fromisoformat(response.json()["expiry"].replace("Z", "+00:00"))
        assert timedelta(minutes=4) < expiry - datetime.now(timezone.utc) <= timedelta(minutes=5)

    def test_malformed_body(self, client):
        response = client.post("/shorturls", content="not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_request"


class TestRedirectEndpoint:
    def test_redirect(self, client):
        create(client, url="https://example.com/target", shortcode="go-there")

        response = client.get("/go-there", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/target"

    def test_unknown_code(self, client):
        response = client.get("/nothing-here", follow_redirects=False)

        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    def test_expired_code(self, client, app):
        async def insert_expired():
            async with app.state.database.session() as session:
                now = datetime.now(timezone.utc)
                session.add(ShortLink(
                    code="old-news",
                    long_url="https://example.com/old",
                    created_at=now - timedelta(minutes=10),
                    expiry_at=now - timedelta(minutes=5),
                ))

        client.portal.call(insert_expired)

        response = client.get("/old-news", follow_redirects=False)

        assert response.status_code == 410
        assert response.json()["kind"] == "expired"

        stats = client.get("/shorturls/old-news").json()
        assert stats["totalClicks"] == 0
        assert stats["detailedClicks"] == []

    def test_redirect_survives_analytics_failure(self, client, app):
        class BrokenLedger:
            async def append(self, *args, **kwargs):
                raise StorageError("ledger unavailable")

        create(client, url="https://example.com/still-works", shortcode="resilient")
        app.dependency_overrides[get_visit_ledger] = lambda: BrokenLedger()

        response = client.get("/resilient", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/still-works"


class TestStatsEndpoint:
    def test_stats(self, client):
        create(client, url="https://example.com/popular", shortcode="popular")
        for ip in ["10.0.0.1", "10.0.0.2", "10.0.0.1"]:
            client.get(
                "/popular",
                follow_redirects=False,
                headers={"X-Forwarded-For": ip, "User-Agent": "pytest-agent", "Referer": "https://ref.example"},
            )

        response = client.get("/shorturls/POPULAR")

        assert response.status_code == 200
        data = response.json()
        assert data["code"] == "popular"
        assert data["longUrl"] == "https://example.com/popular"
        assert data["totalClicks"] == 3
        assert data["uniqueVisitors"] == 2
        assert set(data) >= {"logID", "createdAt", "expiryAt", "detailedClicks"}
        clicks = data["detailedClicks"]
        assert [c["ip"] for c in clicks] == ["10.0.0.1", "10.0.0.2", "10.0.0.1"]
        assert clicks[0]["userAgent"] == "pytest-agent"
        assert clicks[0]["referrer"] == "https://ref.example"
        assert "timestamp" in clicks[0]

    def test_stats_unknown_code(self, client):
        response = client.get("/shorturls/unknown")

        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
