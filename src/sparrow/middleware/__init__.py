"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    handler(request: Request, response: Response, next: Next)

Built-in middleware:
    RequestLogger -- Access log line per request, after the chain has run
    StaticFiles -- Serve files from a directory (see ``sparrow.static``)
"""

from sparrow.middleware.logging import RequestLogger
from sparrow.middleware.protocol import Middleware
from sparrow.middleware.static import StaticFiles, static
from sparrow.routing.dispatcher import Next

__all__ = [
    "Middleware",
    "Next",
    "RequestLogger",
    "StaticFiles",
    "static",
]
