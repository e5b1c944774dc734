"""Tests for sparrow.routing.matcher — path matcher kinds."""

import re

import pytest

from sparrow.errors import ConfigurationError
from sparrow.routing.matcher import CatchAll, Exact, Pattern, Prefix, build, matches


def _handler(request, response, next):
    next()


class TestBuild:
    def test_route_literal_is_exact(self) -> None:
        assert build("/users", prefix=False) == Exact("/users")

    def test_middleware_literal_is_prefix(self) -> None:
        assert build("/api", prefix=True) == Prefix("/api")

    def test_none_is_catch_all(self) -> None:
        assert build(None, prefix=True) == CatchAll()
        assert build(None, prefix=False) == CatchAll()

    def test_handler_is_catch_all(self) -> None:
        assert build(_handler, prefix=True) == CatchAll()

    def test_middleware_pattern_is_anchored(self) -> None:
        regex = re.compile(r"/v\d+")
        assert build(regex, prefix=True) == Pattern(regex, anchored=True)

    def test_route_pattern_is_unanchored(self) -> None:
        regex = re.compile(r"^/items/\d+$")
        assert build(regex, prefix=False) == Pattern(regex, anchored=False)

    def test_existing_matcher_passes_through(self) -> None:
        matcher = Exact("/x")
        assert build(matcher, prefix=True) is matcher

    def test_rejects_other_types(self) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported path"):
            build(42, prefix=False)


class TestExact:
    @pytest.mark.parametrize("path", ["/users"])
    def test_matches_equal_path(self, path: str) -> None:
        assert matches(Exact("/users"), path)

    @pytest.mark.parametrize("path", ["/users/1", "/users/", "/user", "/Users", ""])
    def test_rejects_other_paths(self, path: str) -> None:
        assert not matches(Exact("/users"), path)

    def test_regex_metacharacters_are_literal(self) -> None:
        matcher = build("/a.b+c(d)[e]$", prefix=False)
        assert matches(matcher, "/a.b+c(d)[e]$")
        assert not matches(matcher, "/aXb+c(d)[e]$")
        assert not matches(matcher, "/a.bbc(d)[e]$")


class TestPrefix:
    @pytest.mark.parametrize("path", ["/api", "/api/", "/api/users", "/apiextra"])
    def test_plain_string_prefix(self, path: str) -> None:
        assert matches(Prefix("/api"), path)

    @pytest.mark.parametrize("path", ["/", "/ap", "/v1/api", "/API"])
    def test_rejects_non_prefixed(self, path: str) -> None:
        assert not matches(Prefix("/api"), path)

    def test_dot_is_literal(self) -> None:
        matcher = build("/file.txt", prefix=True)
        assert matches(matcher, "/file.txt.bak")
        assert not matches(matcher, "/fileXtxt")


class TestPattern:
    def test_anchored_matches_at_start_only(self) -> None:
        matcher = Pattern(re.compile(r"/v\d+"), anchored=True)
        assert matches(matcher, "/v1")
        assert matches(matcher, "/v2/users")
        assert not matches(matcher, "/api/v1")

    def test_unanchored_searches(self) -> None:
        matcher = Pattern(re.compile(r"\.json"), anchored=False)
        assert matches(matcher, "/data/report.json")
        assert not matches(matcher, "/data/report.csv")

    def test_unanchored_respects_caller_anchors(self) -> None:
        matcher = Pattern(re.compile(r"^/items/\d+$"), anchored=False)
        assert matches(matcher, "/items/42")
        assert not matches(matcher, "/items/42/edit")


class TestCatchAll:
    @pytest.mark.parametrize("path", ["/", "/anything", "/deep/nested/path", ""])
    def test_matches_everything(self, path: str) -> None:
        assert matches(CatchAll(), path)
