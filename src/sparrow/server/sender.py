"""ASGI response sending — translates response state into ASGI messages.

``Response`` calls these; nothing else writes to ``send`` directly.
"""

from collections.abc import Iterable

from sparrow._internal.asgi import Send


def body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def encode_headers(headers: Iterable[tuple[str, str]]) -> list[tuple[bytes, bytes]]:
    """Encode header pairs to lower-cased latin-1 bytes for ASGI."""
    return [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in headers
    ]


async def send_start(
    send: Send,
    status: int,
    headers: Iterable[tuple[str, str]],
    *,
    content_length: int | None = None,
) -> None:
    """Send ``http.response.start``.

    With *content_length* the length header is appended; without it the
    server falls back to chunked transfer encoding.
    """
    raw_headers = encode_headers(headers)
    if content_length is not None:
        raw_headers.append((b"content-length", str(content_length).encode("latin-1")))
    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": raw_headers,
        }
    )


async def send_body(send: Send, body: bytes, *, more_body: bool) -> None:
    """Send one ``http.response.body`` message."""
    await send(
        {
            "type": "http.response.body",
            "body": body,
            "more_body": more_body,
        }
    )
