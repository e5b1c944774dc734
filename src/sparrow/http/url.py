"""Request URL parsing.

The one place the raw request target is split into the pathname used
for route matching and the parsed query string.
"""

from dataclasses import dataclass
from urllib.parse import quote, unquote

from sparrow._internal.asgi import Scope
from sparrow.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class ParsedURL:
    """A request target split into pathname and query."""

    pathname: str
    query: QueryParams


def parse_url(raw_url: str) -> ParsedURL:
    """Split a raw request target (``/path?query``) into its parts.

    The pathname is percent-decoded; an empty pathname becomes ``/``.
    Request targets are origin-form, so a leading ``//`` stays part of
    the path rather than being read as an authority.

    ::

        >>> parse_url("/ping?x=1").pathname
        '/ping'
    """
    target, _, _fragment = raw_url.partition("#")
    path, _, query_string = target.partition("?")
    return ParsedURL(
        pathname=unquote(path) or "/",
        query=QueryParams(query_string),
    )


def raw_url_from_scope(scope: Scope) -> str:
    """Rebuild the raw request target from an ASGI scope.

    ASGI servers hand over the path already decoded; ``raw_path`` is
    preferred when present; otherwise the decoded path is re-quoted so
    decoding happens exactly once, in ``parse_url``.
    """
    raw_path = scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1")
    else:
        path = quote(scope.get("path", "/"), safe="/:@!$&'()*+,;=-._~")
    query_string = scope.get("query_string", b"")
    if query_string:
        return f"{path}?{query_string.decode('latin-1')}"
    return path
