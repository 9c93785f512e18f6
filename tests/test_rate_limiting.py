"""Rate limiting tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import create_app
from app.middleware import rate_limit
from app.middleware.rate_limit import RateLimiter
from tests.conftest import make_settings


@pytest.mark.asyncio
async def test_rate_limit_allows_within_window():
    """Requests within the limit should all be allowed."""
    limiter = RateLimiter(max_requests=10, window_seconds=60)
    for expected_remaining in range(9, -1, -1):
        allowed, remaining, retry_after = await limiter.hit("10.0.0.1")
        assert allowed is True
        assert remaining == expected_remaining
        assert retry_after == 0


@pytest.mark.asyncio
async def test_rate_limit_blocks_over_window():
    """The N+1-th request should be blocked when the limit is N."""
    limiter = RateLimiter(max_requests=60, window_seconds=60)

    for _ in range(60):
        allowed, _, _ = await limiter.hit("10.0.0.1")
        assert allowed is True

    allowed, remaining, retry_after = await limiter.hit("10.0.0.1")
    assert allowed is False
    assert remaining == 0
    assert 1 <= retry_after <= 60


@pytest.mark.asyncio
async def test_rate_limit_per_client_isolation():
    """Rate limits should be independent per client."""
    limiter = RateLimiter(max_requests=5)

    for _ in range(5):
        await limiter.hit("client_a")

    allowed_a, _, _ = await limiter.hit("client_a")
    assert allowed_a is False

    allowed_b, _, _ = await limiter.hit("client_b")
    assert allowed_b is True


@pytest.mark.asyncio
async def test_rate_limit_reset():
    """Resetting counters should allow requests again."""
    limiter = RateLimiter(max_requests=5)

    for _ in range(5):
        await limiter.hit("client_c")
    allowed, _, _ = await limiter.hit("client_c")
    assert allowed is False

    await limiter.reset("client_c")
    allowed, _, _ = await limiter.hit("client_c")
    assert allowed is True


@pytest.mark.asyncio
async def test_rate_limit_reset_all():
    limiter = RateLimiter(max_requests=1)
    await limiter.hit("a")
    await limiter.hit("b")

    await limiter.reset()
    assert (await limiter.hit("a"))[0] is True
    assert (await limiter.hit("b"))[0] is True


@pytest.mark.asyncio
async def test_window_expiry(monkeypatch):
    """Requests older than the window no longer count."""
    clock = [1000.0]
    monkeypatch.setattr(rate_limit, "time", SimpleNamespace(monotonic=lambda: clock[0]))
    limiter = RateLimiter(max_requests=1, window_seconds=10)

    assert (await limiter.hit("k"))[0] is True
    clock[0] += 4
    allowed, _, retry_after = await limiter.hit("k")
    assert allowed is False
    assert retry_after == 6

    clock[0] += 6
    assert (await limiter.hit("k"))[0] is True


@pytest.mark.asyncio
async def test_idle_clients_are_forgotten(monkeypatch):
    """Clients with no request inside the window stop being tracked."""
    clock = [1000.0]
    monkeypatch.setattr(rate_limit, "time", SimpleNamespace(monotonic=lambda: clock[0]))
    limiter = RateLimiter(max_requests=5, window_seconds=10)

    for i in range(50):
        await limiter.hit(f"10.0.0.{i}")
    assert limiter.tracked_clients == 50

    clock[0] += 5
    await limiter.hit("10.0.0.0")
    assert limiter.tracked_clients == 50

    clock[0] += 6
    await limiter.hit("10.0.1.1")
    assert limiter.tracked_clients == 2


@pytest.mark.asyncio
async def test_middleware_returns_429_envelope(database):
    """Once the budget is spent the API answers with a 429 envelope."""
    settings = make_settings(rate_limit_enabled=True, rate_limit_max_requests=2)
    app = create_app(settings=settings, database=database)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        first = await client.get("/api/v1/health/ping")
        second = await client.get("/api/v1/health/ping")
        third = await client.get("/api/v1/health/ping")

    assert first.status_code == second.status_code == 200
    assert first.headers["ratelimit-limit"] == "2"
    assert first.headers["ratelimit-remaining"] == "1"
    assert second.headers["ratelimit-remaining"] == "0"

    assert third.status_code == 429
    assert int(third.headers["retry-after"]) >= 1
    body = third.json()
    assert body["success"] is False
    assert body["statusCode"] == 429
    assert body["message"] == "Too many requests from this IP, please try again later."
    assert body["path"] == "/api/v1/health/ping"


@pytest.mark.asyncio
async def test_middleware_disabled(client):
    response = await client.get("/api/v1/health/ping")
    assert "ratelimit-limit" not in response.headers
