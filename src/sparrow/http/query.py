"""Parsed query string.

A read-only ``Mapping[str, str]`` over ``key=value`` pairs. Repeated
keys keep every value, reachable through ``get_list``.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Query parameters of one request.

    ``params["tag"]`` is the first ``tag`` value; ``get_list("tag")``
    is all of them. Blank values (``?flag=``) are kept as ``""``.
    """

    __slots__ = ("_params", "_raw")

    def __init__(self, query_string: str | bytes = "") -> None:
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        self._raw = query_string
        params: dict[str, list[str]] = {}
        for key, value in parse_qsl(query_string, keep_blank_values=True):
            params.setdefault(key, []).append(value)
        self._params = params

    def __getitem__(self, key: str) -> str:
        return self._params[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        values = self._params.get(key)
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        return list(self._params.get(key, ()))

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """First value as an ``int``; *default* when missing or not a number."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    @property
    def raw(self) -> str:
        """The undecoded query string, without the leading ``?``."""
        return self._raw
