"""Writable HTTP response.

A thin, stateful writer over ASGI ``send``. Status and headers are
collected until the first body write; ``end()`` finalizes. ``send()``
and ``render()`` are the conveniences most handlers use.
"""

from __future__ import annotations

import json as json_module
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sparrow._internal.asgi import Send
from sparrow.errors import ConfigurationError, ResponseStateError, ResponseTypeError
from sparrow.server.sender import body_allowed, send_body, send_start

if TYPE_CHECKING:
    from sparrow.templating.engines import TemplateRenderer

logger = logging.getLogger("sparrow.templating")


def _encode(chunk: str | bytes) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else chunk


class Response:
    """The response half of a request/response pair.

    Lifecycle: *pending* (status and headers mutable) → *streaming*
    (after the first ``write()``; headers sent) → *finished* (after
    ``end()``). Writing to a finished response raises
    ``ResponseStateError``.

    Usage in a handler::

        async def ping(request, response, next):
            await response.send("pong")

        async def download(request, response, next):
            response.set_header("content-type", "text/csv")
            for row in rows:
                await response.write(row)
            await response.end()
    """

    __slots__ = ("_finished", "_headers", "_headers_sent", "_renderer", "_send", "_status")

    def __init__(self, send: Send, *, renderer: TemplateRenderer | None = None) -> None:
        self._send = send
        self._renderer = renderer
        self._status = 200
        self._headers: list[tuple[str, str]] = []
        self._headers_sent = False
        self._finished = False

    def __repr__(self) -> str:
        state = "finished" if self._finished else "streaming" if self._headers_sent else "pending"
        return f"<Response {self._status} {state}>"

    # -- State --

    @property
    def status(self) -> int:
        return self._status

    @status.setter
    def status(self, value: int) -> None:
        self._check_headers_not_sent()
        self._status = value

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        """Header pairs queued (or already sent) for this response."""
        return tuple(self._headers)

    @property
    def headers_sent(self) -> bool:
        """True once ``http.response.start`` has gone out."""
        return self._headers_sent

    @property
    def finished(self) -> bool:
        """True once the final body message has gone out."""
        return self._finished

    # -- Headers --

    def set_header(self, name: str, value: str) -> Response:
        """Set a header, replacing any existing value with the same name."""
        self._check_headers_not_sent()
        lowered = name.lower()
        self._headers = [(n, v) for n, v in self._headers if n.lower() != lowered]
        self._headers.append((name, value))
        return self

    def append_header(self, name: str, value: str) -> Response:
        """Add a header without replacing existing ones (e.g. ``Set-Cookie``)."""
        self._check_headers_not_sent()
        self._headers.append((name, value))
        return self

    def get_header(self, name: str) -> str | None:
        lowered = name.lower()
        for n, v in self._headers:
            if n.lower() == lowered:
                return v
        return None

    def remove_header(self, name: str) -> Response:
        self._check_headers_not_sent()
        lowered = name.lower()
        self._headers = [(n, v) for n, v in self._headers if n.lower() != lowered]
        return self

    def write_head(self, status: int, headers: Mapping[str, str] | None = None) -> Response:
        """Set the status and any number of headers in one call."""
        self.status = status
        for name, value in (headers or {}).items():
            self.set_header(name, value)
        return self

    # -- Body --

    async def write(self, chunk: str | bytes) -> None:
        """Stream a chunk of the body. Sends headers on first use."""
        self._check_not_finished()
        if not self._headers_sent:
            await self._start()
        if chunk and body_allowed(self._status):
            await send_body(self._send, _encode(chunk), more_body=True)

    async def end(self, chunk: str | bytes | None = None) -> None:
        """Finalize the response, optionally with a last chunk of body."""
        self._check_not_finished()
        body = _encode(chunk) if chunk else b""
        if not body_allowed(self._status):
            body = b""
        if not self._headers_sent:
            await self._start(content_length=len(body))
        self._finished = True
        await send_body(self._send, body, more_body=False)

    async def send(self, value: Any) -> None:
        """Serialize *value* by its type and finalize the response.

        - ``str``: sent as-is.
        - ``bytes``: sent raw.
        - ``int`` / ``float``: sent as their decimal string.
        - ``dict`` / ``list`` / ``tuple`` / ``None``: compact JSON.

        Anything else (``bool`` included) raises ``ResponseTypeError``.
        A ``content-type`` is only set when the handler has not set one.
        """
        if isinstance(value, bool):
            raise ResponseTypeError(value)
        if isinstance(value, str):
            self._default_content_type("text/html; charset=utf-8")
            await self.end(value)
        elif isinstance(value, bytes):
            self._default_content_type("application/octet-stream")
            await self.end(value)
        elif isinstance(value, int | float):
            self._default_content_type("text/plain; charset=utf-8")
            await self.end(str(value))
        elif value is None or isinstance(value, dict | list | tuple):
            self._default_content_type("application/json")
            await self.end(json_module.dumps(value, separators=(",", ":")))
        else:
            raise ResponseTypeError(value)

    async def render(self, template: str, data: Mapping[str, Any] | None = None) -> None:
        """Render *template* from the views directory and finalize.

        ``200 text/html`` with the rendered body on success. Any failure
        (missing file, syntax error, engine fault) becomes a ``503`` with
        no body; the detail goes to the ``sparrow.templating`` log only.
        """
        if self._renderer is None:
            msg = "This response has no template renderer; it was not created by an App."
            raise ConfigurationError(msg)
        try:
            body = await self._renderer.render(template, data or {})
        except Exception:
            logger.warning("Rendering %r failed", template, exc_info=True)
            self.status = 503
            await self.end()
            return
        self.status = 200
        self.set_header("content-type", "text/html")
        await self.end(body)

    # -- Internal --

    async def _start(self, *, content_length: int | None = None) -> None:
        self._headers_sent = True
        await send_start(
            self._send, self._status, self._headers, content_length=content_length
        )

    def _default_content_type(self, content_type: str) -> None:
        if self.get_header("content-type") is None and not self._headers_sent:
            self.set_header("content-type", content_type)

    def _check_headers_not_sent(self) -> None:
        if self._headers_sent:
            msg = "Cannot change status or headers after they have been sent."
            raise ResponseStateError(msg)

    def _check_not_finished(self) -> None:
        if self._finished:
            msg = "Cannot write to a response that has already ended."
            raise ResponseStateError(msg)
