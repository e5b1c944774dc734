"""Access logging middleware.

Logs one line per request to the ``sparrow.access`` logger once the
rest of the chain has finished::

    GET /ping 200 1.42ms

Configure it like any other logger::

    logging.getLogger("sparrow.access").setLevel(logging.INFO)
"""

import logging
import time

from sparrow.http.request import Request
from sparrow.http.response import Response
from sparrow.routing.dispatcher import Next

logger = logging.getLogger("sparrow.access")


class RequestLogger:
    """Time the downstream chain and log method, path, status and duration.

    Requests whose response was never sent are logged with ``-`` as the
    status, which makes handler chains that fall off the table easy to
    spot.

    Usage::

        app.use(RequestLogger())
    """

    __slots__ = ("level",)

    def __init__(self, level: int = logging.INFO) -> None:
        self.level = level

    async def __call__(self, request: Request, response: Response, next: Next) -> None:
        start = time.perf_counter()
        try:
            await next()
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            status = response.status if response.headers_sent else "-"
            logger.log(
                self.level,
                "%s %s %s %.2fms",
                request.method,
                request.path,
                status,
                duration_ms,
            )
