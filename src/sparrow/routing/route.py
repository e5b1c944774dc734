"""Method filters and the RouteEntry frozen dataclass."""

from dataclasses import dataclass

from sparrow._internal.types import Handler
from sparrow.routing.matcher import PathMatcher, matches


@dataclass(frozen=True, slots=True)
class AnyMethod:
    """Passes every request method (middleware and ``all()`` routes)."""

    def __str__(self) -> str:
        return "*"


@dataclass(frozen=True, slots=True)
class Verb:
    """Passes only requests whose method equals ``name`` exactly."""

    name: str

    def __str__(self) -> str:
        return self.name


type MethodFilter = AnyMethod | Verb

ANY_METHOD = AnyMethod()


def method_allows(method_filter: MethodFilter, method: str) -> bool:
    """Test a method filter against a request method (no case folding)."""
    match method_filter:
        case AnyMethod():
            return True
        case Verb(name=name):
            return method == name


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """One registered handler with its path matcher and method filter.

    Created by ``RouteTable.register()``; never changed afterwards.
    """

    matcher: PathMatcher
    method: MethodFilter
    handler: Handler

    def accepts(self, method: str, path: str) -> bool:
        """True if this entry should run for *method* and *path*."""
        return matches(self.matcher, path) and method_allows(self.method, method)

    def describe(self) -> str:
        name = getattr(self.handler, "__qualname__", None) or repr(self.handler)
        return f"{self.method} {self.matcher} -> {name}"
