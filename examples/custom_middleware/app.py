"""Custom Middleware — function and class middleware examples.

Demonstrates:
- Async middleware that wraps the rest of the chain (timing)
- Class middleware that short-circuits (rate limiter, 429 when exceeded)
- Sync middleware that only annotates the request and continues
- threading.Lock for thread-safe shared state (free-threading)

Run with any ASGI server, for example::

    uvicorn app:app
"""

import asyncio
import logging
import threading
import time

from sparrow import App, Next, Request, RequestLogger, Response

logger = logging.getLogger(__name__)

app = App()


# ---------------------------------------------------------------------------
# Async middleware — timing
# ---------------------------------------------------------------------------


async def timing(request: Request, response: Response, next: Next) -> None:
    """Stamp the start time, run the rest of the chain, log the total."""
    request.locals["started"] = time.monotonic()
    await next()
    logger.debug("%s took %.3fs", request.path, time.monotonic() - request.locals["started"])


# ---------------------------------------------------------------------------
# Class middleware — rate limiter
# ---------------------------------------------------------------------------


class RateLimiter:
    """Per-IP rate limiter. Answers 429 when the limit is exceeded."""

    def __init__(self, max_requests: int, window: float) -> None:
        self.max_requests = max_requests
        self.window = window
        self._counts: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    async def __call__(self, request: Request, response: Response, next: Next) -> None:
        # Use X-Forwarded-For if behind a proxy; else a simple client identifier
        client_ip = request.headers.get("x-forwarded-for", "127.0.0.1")
        if "," in client_ip:
            client_ip = client_ip.split(",")[0].strip()

        with self._lock:
            now = time.monotonic()
            hits = self._counts.setdefault(client_ip, [])
            hits[:] = [t for t in hits if now - t < self.window]
            limited = len(hits) >= self.max_requests
            if not limited:
                hits.append(now)

        if limited:
            response.status = 429
            await response.send("Too Many Requests")
            return
        await next()


# ---------------------------------------------------------------------------
# Sync middleware — request id
# ---------------------------------------------------------------------------


def request_id(request: Request, response: Response, next: Next) -> None:
    request.locals["request_id"] = request.headers.get("x-request-id", "anonymous")
    next()


# ---------------------------------------------------------------------------
# Chain (runs in registration order)
# ---------------------------------------------------------------------------

app.use(RequestLogger())
app.use(timing)
app.use(RateLimiter(max_requests=5, window=60.0))
app.use(request_id)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/")
async def index(request, response, next):
    response.set_header("X-Request-Id", request.locals["request_id"])
    await response.send("OK")


@app.get("/slow")
async def slow(request, response, next):
    await asyncio.sleep(0.1)
    waited = time.monotonic() - request.locals["started"]
    response.set_header("X-Response-Time", f"{waited:.3f}s")
    await response.send("OK")
