"""Fault handling for the request entry point.

The dispatcher lets handler exceptions propagate. This module is where
the app's ``FaultPolicy`` turns them into a response (or re-raises).
"""

import logging
import traceback

from sparrow.config import FaultPolicy
from sparrow.http.request import Request
from sparrow.http.response import Response

logger = logging.getLogger("sparrow.server")


def error_body(exc: Exception, *, debug: bool) -> str:
    """Plain-text body for a 500 response."""
    if debug:
        return "Internal Server Error\n\n" + "".join(traceback.format_exception(exc))
    return "Internal Server Error"


async def handle_fault(
    exc: Exception,
    request: Request,
    response: Response,
    *,
    policy: FaultPolicy,
    debug: bool,
) -> None:
    """Apply *policy* to an exception raised by a handler.

    ``FaultPolicy.PROPAGATE`` re-raises *exc* untouched.
    ``FaultPolicy.RESPOND`` logs it and answers ``500`` when nothing has
    been sent; a response already streaming is ended as-is, since its
    status can no longer change.
    """
    if policy is FaultPolicy.PROPAGATE:
        raise exc

    logger.exception("500 %s %s", request.method, request.path, exc_info=exc)

    if response.finished:
        return
    if response.headers_sent:
        await response.end()
        return

    for name, _ in response.headers:
        response.remove_header(name)
    response.write_head(500, {"content-type": "text/plain; charset=utf-8"})
    await response.end(error_body(exc, debug=debug))
