"""Handler protocol.

Middleware and routes share one shape::

    async def handler(request: Request, response: Response, next: Next) -> None: ...

No base class required. Plain ``def`` handlers work too; they call
``next()`` without awaiting it.
"""

from collections.abc import Awaitable
from typing import Protocol

from sparrow.http.request import Request
from sparrow.http.response import Response
from sparrow.routing.dispatcher import Next


class Middleware(Protocol):
    """Protocol for sparrow handlers.

    Accepts both functions and callable objects::

        # Function middleware
        async def auth(request, response, next):
            if request.headers.get("authorization") is None:
                response.status = 401
                await response.end()
                return
            await next()

        # Class middleware
        class RequestCounter:
            def __call__(self, request, response, next):
                self.count += 1
                next()
    """

    def __call__(self, request: Request, response: Response, next: Next) -> Awaitable[None] | None: ...
