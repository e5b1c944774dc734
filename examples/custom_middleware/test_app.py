"""Tests for the custom middleware example."""

from sparrow.testing import TestClient


class TestCustomMiddleware:
    """Verify timing, rate limit and request id middleware."""

    async def test_index_returns_ok(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.text == "OK"

    async def test_request_id_is_echoed(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/", headers={"X-Request-Id": "abc"})
            assert response.header("x-request-id") == "abc"

    async def test_slow_route_has_timing(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/slow")
            assert response.status == 200
            value = response.header("x-response-time")
            assert value is not None
            assert float(value.rstrip("s")) >= 0.09

    async def test_rate_limit_exceeded_returns_429(self, example_app) -> None:
        async with TestClient(example_app) as client:
            for _ in range(5):
                response = await client.get("/")
                assert response.status == 200
            response = await client.get("/")
            assert response.status == 429
            assert "Too Many" in response.text
