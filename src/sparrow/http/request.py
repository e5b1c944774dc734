"""Decorated HTTP request.

Built once per request from the ASGI scope. The URL is parsed up front
so handlers get ``path`` and ``query`` without touching the raw target;
the body stays unread until a handler asks for it.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from sparrow._internal.asgi import Receive, Scope
from sparrow.http.headers import Headers
from sparrow.http.query import QueryParams
from sparrow.http.url import parse_url, raw_url_from_scope


@dataclass(slots=True)
class Request:
    """An incoming HTTP request.

    ``method``, ``url``, ``path`` and ``query`` are the decorations every
    handler can rely on. ``path`` is writable: middleware may rewrite it
    and later entries match against the new value. ``locals`` is free
    for middleware to hang per-request values on (the current user, a
    request id, ...).
    """

    method: str
    url: str
    path: str
    query: QueryParams
    headers: Headers
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None
    locals: dict[str, Any] = field(default_factory=dict)

    _receive: Receive | None = field(default=None, repr=False, compare=False)
    _body: bytes | None = field(default=None, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    # -- Body --

    async def stream(self) -> AsyncIterator[bytes]:
        """Yield body chunks as the server delivers them.

        Once the body has been read through ``body()`` the cached bytes
        are yielded instead, since the channel cannot be read twice.
        """
        if self._body is not None:
            if self._body:
                yield self._body
            return
        if self._receive is None:
            return
        more_body = True
        while more_body:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                return
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            more_body = message.get("more_body", False)

    async def body(self) -> bytes:
        """The whole body, read once and cached."""
        if self._body is None:
            self._body = b"".join([chunk async for chunk in self.stream()])
        return self._body

    async def text(self, encoding: str = "utf-8") -> str:
        return (await self.body()).decode(encoding)

    async def json(self) -> Any:
        return json.loads(await self.body())

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive | None = None) -> Request:
        """Decorate an ASGI ``http`` scope.

        ``url`` keeps the raw target (``/ping?x=1``); ``path`` and
        ``query`` are its parsed halves.
        """
        url = raw_url_from_scope(scope)
        parsed = parse_url(url)
        server, client = scope.get("server"), scope.get("client")
        return cls(
            method=scope["method"],
            url=url,
            path=parsed.pathname,
            query=parsed.query,
            headers=Headers(tuple(scope.get("headers", ()))),
            http_version=scope.get("http_version", "1.1"),
            server=(server[0], server[1]) if server else None,
            client=(client[0], client[1]) if client else None,
            _receive=receive,
        )
