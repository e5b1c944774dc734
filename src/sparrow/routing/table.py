"""Append-only route table.

Filled during setup and frozen before the first request, so dispatch
always reads a table that cannot change underneath it.
"""

from collections.abc import Iterator, Sequence

from sparrow._internal.types import Handler
from sparrow.errors import ConfigurationError
from sparrow.routing.matcher import PathMatcher
from sparrow.routing.route import MethodFilter, RouteEntry


class RouteTable(Sequence[RouteEntry]):
    """Ordered sequence of ``RouteEntry``.

    Usage::

        table = RouteTable()
        table.register(Prefix("/api"), ANY_METHOD, auth)
        table.register(Exact("/ping"), Verb("GET"), ping)
        table.freeze()
    """

    __slots__ = ("_entries", "_frozen")

    def __init__(self) -> None:
        self._entries: list[RouteEntry] = []
        self._frozen = False

    def register(self, matcher: PathMatcher, method: MethodFilter, *handlers: Handler) -> None:
        """Append one entry per handler, in the order given.

        All entries share *matcher* and *method*. Nothing is removed,
        reordered or deduplicated.
        """
        if self._frozen:
            msg = "Cannot register handlers after the route table is frozen."
            raise RuntimeError(msg)
        for handler in handlers:
            if not callable(handler):
                msg = f"Handler {handler!r} is not callable."
                raise ConfigurationError(msg)
        self._entries.extend(RouteEntry(matcher, method, handler) for handler in handlers)

    def freeze(self) -> None:
        """Refuse further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __getitem__(self, index):  # type: ignore[override]
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self._entries)
