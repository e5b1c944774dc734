"""Test utilities for sparrow applications.

Drives the ASGI app in-process; no sockets, no server::

    from sparrow.testing import TestClient

    async with TestClient(app) as client:
        response = await client.get("/ping")
        assert response.text == "pong"
"""

from sparrow.testing.client import ClientResponse, TestClient

__all__ = [
    "ClientResponse",
    "TestClient",
]
