"""Tests for sparrow.http.headers — read-only, case-insensitive Headers."""

import pytest

from sparrow.http.headers import Headers


def _h(*pairs: tuple[str, str]) -> Headers:
    """Shorthand: build Headers from string pairs."""
    raw = tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)
    return Headers(raw)


class TestHeaders:
    def test_case_insensitive_lookup(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            _h(("Accept", "*/*"))["X-Missing"]

    def test_contains(self) -> None:
        h = _h(("Accept", "*/*"))
        assert "accept" in h
        assert "x-missing" not in h
        assert 42 not in h  # type: ignore[operator]

    def test_iter_yields_unique_lowercase_keys(self) -> None:
        h = _h(("Accept", "*/*"), ("Content-Type", "text/html"), ("Accept", "text/xml"))
        assert list(h) == ["accept", "content-type"]
        assert len(h) == 2

    def test_first_value_wins(self) -> None:
        h = _h(("X-Tag", "a"), ("X-Tag", "b"))
        assert h["x-tag"] == "a"
        assert h.get_list("x-tag") == ["a", "b"]

    def test_get_with_default(self) -> None:
        h = _h(("Accept", "*/*"))
        assert h.get("accept") == "*/*"
        assert h.get("x-missing") is None
        assert h.get("x-missing", "fallback") == "fallback"

    def test_raw_is_preserved(self) -> None:
        raw = ((b"Host", b"example.com"),)
        assert Headers(raw).raw is raw
