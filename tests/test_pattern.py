"""Tests for httpschema.routing.pattern — path templates, matching, compilation."""

import pytest

from httpschema.errors import (
    DuplicateParamError,
    MissingParamError,
    SchemaError,
    UnsupportedPatternError,
)
from httpschema.routing.pattern import (
    DEFAULT_PATTERN,
    compile_path,
    mark_wildcards,
    parse_pattern,
)


class TestParamNames:
    def test_static(self) -> None:
        assert parse_pattern("/random-numbers").param_names == ()

    def test_root(self) -> None:
        assert parse_pattern("/").param_names == ()

    def test_named(self) -> None:
        assert parse_pattern("/file/:id").param_names == ("id",)

    def test_multiple_named(self) -> None:
        assert parse_pattern("/users/:user/posts/:post").param_names == ("user", "post")

    def test_wildcards_are_positional(self) -> None:
        assert parse_pattern("/a/*/b/*").param_names == ("0", "1")

    def test_bare_wildcard(self) -> None:
        assert parse_pattern("*").param_names == ("0",)

    def test_named_and_wildcard_mixed(self) -> None:
        assert parse_pattern("/:lang/*").param_names == ("lang", "0")

    def test_name_stops_at_delimiter(self) -> None:
        parsed = parse_pattern("/file-:id.json")
        assert parsed.param_names == ("id",)

    def test_custom_pattern(self) -> None:
        parsed = parse_pattern(r"/users/:id(\d+)")
        param = parsed.tokens[-1]
        assert param.name == "id"
        assert param.pattern == r"\d+"

    def test_default_pattern(self) -> None:
        parsed = parse_pattern("/users/:id")
        assert parsed.tokens[-1].pattern == DEFAULT_PATTERN

    def test_unnamed_group_is_positional(self) -> None:
        assert parse_pattern(r"/v(\d+)/:name").param_names == ("0", "name")

    def test_wildcard_token_keeps_star(self) -> None:
        token = parse_pattern("/a/*").tokens[-1]
        assert token.value == "*"
        assert token.positional is True

    def test_escaped_star_is_literal(self) -> None:
        parsed = parse_pattern(r"/a/\*")
        assert parsed.param_names == ()
        assert parsed.match("/a/*") == {}

    def test_parse_is_cached(self) -> None:
        assert parse_pattern("/file/:id") is parse_pattern("/file/:id")


class TestRejectedPatterns:
    def test_duplicate_named(self) -> None:
        with pytest.raises(DuplicateParamError) as exc_info:
            parse_pattern("/:a/:a")
        assert exc_info.value.name == "a"

    def test_named_zero_next_to_wildcard(self) -> None:
        with pytest.raises(DuplicateParamError):
            parse_pattern("/:0/*")

    def test_optional_param(self) -> None:
        with pytest.raises(UnsupportedPatternError, match="Optional"):
            parse_pattern("/users/:id?")

    def test_repeated_param(self) -> None:
        with pytest.raises(UnsupportedPatternError, match="Repeated"):
            parse_pattern("/files/:path+")

    def test_missing_name(self) -> None:
        with pytest.raises(UnsupportedPatternError, match="Missing parameter name"):
            parse_pattern("/users/:")

    def test_unbalanced_open(self) -> None:
        with pytest.raises(UnsupportedPatternError, match="Unbalanced"):
            parse_pattern(r"/users/:id(\d+")

    def test_unbalanced_close(self) -> None:
        with pytest.raises(UnsupportedPatternError, match="Unbalanced"):
            parse_pattern("/users)")

    def test_empty_group(self) -> None:
        with pytest.raises(UnsupportedPatternError, match="Missing pattern"):
            parse_pattern("/users/:id()")

    def test_nested_capturing_group(self) -> None:
        with pytest.raises(UnsupportedPatternError, match="Capturing groups"):
            parse_pattern("/users/:id((a|b))")

    def test_nested_named_group(self) -> None:
        with pytest.raises(UnsupportedPatternError, match="Capturing groups"):
            parse_pattern("/users/:id((?P<x>a))")

    def test_nested_non_capturing_group_allowed(self) -> None:
        parsed = parse_pattern("/users/:kind((?:admin|guest))")
        assert parsed.match("/users/admin") == {"kind": "admin"}

    def test_trailing_escape(self) -> None:
        with pytest.raises(UnsupportedPatternError, match="Trailing escape"):
            parse_pattern("/a\\")

    def test_invalid_regex(self) -> None:
        with pytest.raises(UnsupportedPatternError, match="Invalid pattern"):
            parse_pattern("/users/:id([a-)")

    def test_errors_are_schema_errors(self) -> None:
        with pytest.raises(SchemaError):
            parse_pattern("/:a/:a")


class TestMatch:
    def test_static(self) -> None:
        assert parse_pattern("/sum").match("/sum") == {}

    def test_static_miss(self) -> None:
        assert parse_pattern("/sum").match("/product") is None

    def test_trailing_slash_optional(self) -> None:
        assert parse_pattern("/sum").match("/sum/") == {}

    def test_case_sensitive(self) -> None:
        assert parse_pattern("/sum").match("/SUM") is None

    def test_named(self) -> None:
        assert parse_pattern("/file/:id").match("/file/42") == {"id": "42"}

    def test_named_single_segment(self) -> None:
        assert parse_pattern("/file/:id").match("/file/42/extra") is None

    def test_named_embedded(self) -> None:
        assert parse_pattern("/file-:id.json").match("/file-7.json") == {"id": "7"}

    def test_custom_pattern_filters(self) -> None:
        parsed = parse_pattern(r"/users/:id(\d+)")
        assert parsed.match("/users/12") == {"id": "12"}
        assert parsed.match("/users/abc") is None

    def test_wildcard_spans_segments(self) -> None:
        assert parse_pattern("*").match("/hello/world") == {"0": "/hello/world"}

    def test_multiple_wildcards(self) -> None:
        assert parse_pattern("/a/*/b/*").match("/a/x/b/y/z") == {"0": "x", "1": "y/z"}

    def test_root(self) -> None:
        assert parse_pattern("/").match("/") == {}


class TestCompile:
    def test_static(self) -> None:
        assert compile_path("/random-numbers") == "/random-numbers"

    def test_named(self) -> None:
        assert compile_path("/file/:id", {"id": "42"}) == "/file/42"

    def test_wildcards(self) -> None:
        assert compile_path("/a/*/b/*", {"0": "x", "1": "y"}) == "/a/x/b/y"

    def test_wildcard_int_keys(self) -> None:
        assert compile_path("/a/*/b/*", {0: "x", 1: "y"}) == "/a/x/b/y"

    def test_bare_wildcard(self) -> None:
        assert compile_path("*", {"0": "/hello"}) == "/hello"

    def test_values_not_escaped(self) -> None:
        assert compile_path("/search/:q", {"q": "a b/c"}) == "/search/a b/c"

    def test_non_string_values(self) -> None:
        assert compile_path("/file/:id", {"id": 42}) == "/file/42"

    def test_custom_pattern_replaced(self) -> None:
        assert compile_path(r"/users/:id(\d+)", {"id": 5}) == "/users/5"

    def test_escaped_literal(self) -> None:
        assert compile_path(r"/a/\*/:id", {"id": "1"}) == "/a/*/1"

    def test_missing_value(self) -> None:
        with pytest.raises(MissingParamError) as exc_info:
            compile_path("/file/:id", {})
        assert exc_info.value.name == "id"
        assert "'id'" in str(exc_info.value)

    def test_none_counts_as_missing(self) -> None:
        with pytest.raises(MissingParamError):
            compile_path("/file/:id", {"id": None})

    def test_missing_values_mapping(self) -> None:
        with pytest.raises(MissingParamError):
            compile_path("/a/*")

    def test_extra_values_ignored(self) -> None:
        assert compile_path("/file/:id", {"id": "1", "other": "x"}) == "/file/1"


class TestMarkWildcards:
    def test_rewrites_star(self) -> None:
        assert mark_wildcards("/a/*/b") == "/a/(.*)/b"

    def test_skips_escaped(self) -> None:
        assert mark_wildcards(r"/a/\*") == r"/a/\*"

    def test_skips_inside_group(self) -> None:
        assert mark_wildcards("/:id(a*)") == "/:id(a*)"
