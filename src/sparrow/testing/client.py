"""In-process test client for sparrow applications.

Drives the app through its ASGI entry point with a synthetic scope and
records every message sent back. No sockets, no server.
"""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass, field
from typing import Any

from sparrow._internal.invoke import invoke
from sparrow.app import App


@dataclass(frozen=True, slots=True)
class ClientResponse:
    """What the app sent for one request.

    ``status`` is ``None`` when the app never started a response (for
    example when no handler matched), and ``finished`` is ``False`` when
    it never sent the final body message.
    """

    status: int | None
    headers: tuple[tuple[str, str], ...]
    body: bytes
    finished: bool
    messages: tuple[dict[str, Any], ...] = ()

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    def json(self) -> Any:
        return json_module.loads(self.body)

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or ``None``."""
        lowered = name.lower()
        return next((v for n, v in self.headers if n == lowered), None)

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    @classmethod
    def from_messages(cls, messages: list[dict[str, Any]]) -> ClientResponse:
        status: int | None = None
        headers: tuple[tuple[str, str], ...] = ()
        chunks: list[bytes] = []
        finished = False
        for message in messages:
            match message["type"]:
                case "http.response.start":
                    status = message["status"]
                    headers = tuple(
                        (n.decode("latin-1"), v.decode("latin-1"))
                        for n, v in message.get("headers", ())
                    )
                case "http.response.body":
                    chunks.append(message.get("body", b""))
                    finished = not message.get("more_body", False)
        return cls(status, headers, b"".join(chunks), finished, tuple(messages))


@dataclass(slots=True)
class _Exchange:
    """One request body going in, the app's messages coming out."""

    body: bytes
    delivered: bool = False
    sent: list[dict[str, Any]] = field(default_factory=list)

    async def receive(self) -> dict[str, Any]:
        if self.delivered:
            return {"type": "http.disconnect"}
        self.delivered = True
        return {"type": "http.request", "body": self.body, "more_body": False}

    async def send(self, message: dict[str, Any]) -> None:
        self.sent.append(dict(message))


def build_scope(method: str, target: str, headers: dict[str, str] | None = None) -> dict[str, Any]:
    """An ASGI ``http`` scope for *method* and *target* (``/path?query``)."""
    path, _, query = target.partition("?")
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "scheme": "http",
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or {}).items()
        ],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


class TestClient:
    """Async test client for sparrow applications.

    Entering the context freezes the app and runs its startup hooks;
    leaving it runs the shutdown hooks::

        async with TestClient(app) as client:
            response = await client.get("/ping?x=1")
            assert response.text == "pong"
    """

    __test__ = False  # collected by pytest otherwise

    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        for hook in self.app._startup_hooks:
            await invoke(hook)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        for hook in self.app._shutdown_hooks:
            await invoke(hook)

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> ClientResponse:
        return await self.request("GET", path, headers=headers)

    async def delete(self, path: str, *, headers: dict[str, str] | None = None) -> ClientResponse:
        return await self.request("DELETE", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> ClientResponse:
        """POST *body*, or *json* serialized with a JSON content type."""
        if json is not None:
            body = json_module.dumps(json).encode("utf-8")
            headers = {"content-type": "application/json", **(headers or {})}
        return await self.request("POST", path, headers=headers, body=body)

    async def put(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> ClientResponse:
        return await self.request("PUT", path, headers=headers, body=body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> ClientResponse:
        """Run one request through the app's ASGI entry point."""
        exchange = _Exchange(body or b"")
        await self.app(build_scope(method, path, headers), exchange.receive, exchange.send)
        return ClientResponse.from_messages(exchange.sent)
