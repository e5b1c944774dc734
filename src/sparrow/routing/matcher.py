"""Path matchers.

A closed set of matcher kinds, built once at registration time and
tested against the request pathname on every dispatch step::

    Exact("/users")            routes: path == "/users"
    Prefix("/api")             middleware: path.startswith("/api")
    Pattern(re, anchored=True) middleware given a compiled pattern
    CatchAll()                 no path given
"""

import re
from dataclasses import dataclass
from typing import Any

from sparrow.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class Exact:
    """Matches only a path equal to ``path``."""

    path: str


@dataclass(frozen=True, slots=True)
class Prefix:
    """Matches any path starting with ``path`` (plain string prefix)."""

    path: str


@dataclass(frozen=True, slots=True)
class Pattern:
    """Matches with a caller-supplied regex.

    ``anchored`` patterns must match at the start of the path
    (``re.match``); unanchored ones may match anywhere (``re.search``)
    and rely on the caller's own ``^``/``$``.
    """

    regex: re.Pattern[str]
    anchored: bool = True


@dataclass(frozen=True, slots=True)
class CatchAll:
    """Matches every path."""


type PathMatcher = Exact | Prefix | Pattern | CatchAll


def build(spec: Any, *, prefix: bool) -> PathMatcher:
    """Build a matcher from a registration's path argument.

    Args:
        spec: A literal path, a compiled ``re.Pattern``, an already built
            matcher, a handler (no explicit path) or ``None``.
        prefix: ``True`` for middleware (prefix semantics), ``False`` for
            routes (exact semantics).

    Raises ``ConfigurationError`` for any other kind of *spec*.
    """
    if isinstance(spec, Exact | Prefix | Pattern | CatchAll):
        return spec
    if spec is None or callable(spec):
        return CatchAll()
    if isinstance(spec, re.Pattern):
        return Pattern(spec, anchored=prefix)
    if isinstance(spec, str):
        return Prefix(spec) if prefix else Exact(spec)
    msg = f"Unsupported path {spec!r}; expected a str, a compiled re.Pattern or a handler."
    raise ConfigurationError(msg)


def matches(matcher: PathMatcher, path: str) -> bool:
    """Test *matcher* against a pathname (query string already stripped)."""
    match matcher:
        case Exact(path=literal):
            return path == literal
        case Prefix(path=literal):
            return path.startswith(literal)
        case Pattern(regex=regex, anchored=True):
            return regex.match(path) is not None
        case Pattern(regex=regex, anchored=False):
            return regex.search(path) is not None
        case CatchAll():
            return True
