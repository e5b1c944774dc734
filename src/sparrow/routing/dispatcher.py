"""Per-request dispatch over the route table.

The dispatcher owns a cursor into the frozen table. Each step scans
forward (a plain loop, no recursion) to the next entry whose path
matcher and method filter accept the request, invokes its handler with
``(request, response, next)``, and stops unless the handler asked to
continue.

``next`` works for both handler styles::

    async def timing(request, response, next):
        start = time.monotonic()
        await next()              # downstream handlers run here
        log(time.monotonic() - start)

    def tag(request, response, next):
        request.locals["tagged"] = True
        next()                    # chain resumes after tag() returns

A handler that never calls ``next`` ends the chain. Running off the end
of the table ends it too, silently: whatever the handlers sent is the
response.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

from sparrow._internal.invoke import invoke
from sparrow.http.request import Request
from sparrow.http.response import Response
from sparrow.routing.route import RouteEntry
from sparrow.routing.table import RouteTable

logger = logging.getLogger("sparrow.dispatch")


class Next:
    """The continuation handed to one handler invocation.

    Single use: the chain resumes at most once per continuation, however
    many times it is called or awaited.
    """

    __slots__ = ("_called", "_dispatcher", "_resumed")

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher
        self._called = False
        self._resumed = False

    def __call__(self) -> Next:
        if self._called:
            logger.debug("next() called more than once for %s %s; ignored",
                         self._dispatcher.request.method, self._dispatcher.request.path)
        self._called = True
        return self

    def __await__(self) -> Generator[Any, None, None]:
        return self._resume().__await__()

    @property
    def pending(self) -> bool:
        """Called but not yet resumed: the dispatcher should continue."""
        return self._called and not self._resumed

    def _claim(self) -> bool:
        """Mark this continuation as resumed; False if it already was."""
        if self._resumed:
            return False
        self._called = True
        self._resumed = True
        return True

    async def _resume(self) -> None:
        if self._claim():
            await self._dispatcher.walk()


class Dispatcher:
    """Walks a route table for one request.

    Created fresh for every request and discarded afterwards. The cursor
    only moves forward; entries are visited in registration order.

    Handler exceptions are not caught here; they propagate to the entry
    point, which applies the app's fault policy.
    """

    __slots__ = ("_cursor", "_table", "invocations", "request", "response")

    def __init__(self, table: RouteTable, request: Request, response: Response) -> None:
        self._table = table
        self._cursor = 0
        self.request = request
        self.response = response
        self.invocations = 0

    @property
    def cursor(self) -> int:
        """Index of the next table entry to examine."""
        return self._cursor

    async def run(self) -> None:
        """Start the chain at the first registered entry."""
        await self.walk()

    async def walk(self) -> None:
        """Invoke matching entries from the cursor on, while handlers continue."""
        entry = self._advance()
        while entry is not None:
            step = Next(self)
            self.invocations += 1
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("%s %s -> %s", self.request.method, self.request.path, entry.describe())
            await invoke(entry.handler, self.request, self.response, step)
            if not step.pending:
                return
            step._claim()
            entry = self._advance()

    def _advance(self) -> RouteEntry | None:
        """Move the cursor past the next accepting entry and return it.

        Path and method are read on every step, so a middleware that
        rewrites ``request.path`` changes what later entries see.
        """
        table = self._table
        while self._cursor < len(table):
            entry = table[self._cursor]
            self._cursor += 1
            if entry.accepts(self.request.method, self.request.path):
                return entry
        return None
