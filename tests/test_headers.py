"""Tests for httpschema.http.headers and httpschema.http.query."""

import pytest

from httpschema.http.headers import Headers
from httpschema.http.query import QueryParams


def _h(*pairs: tuple[str, str]) -> Headers:
    """Shorthand: build Headers from string pairs."""
    raw = tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)
    return Headers(raw)


class TestHeaders:
    def test_getitem(self) -> None:
        h = _h(("Content-Type", "application/json"))
        assert h["Content-Type"] == "application/json"

    def test_case_insensitive(self) -> None:
        h = _h(("Content-Type", "application/json"))
        assert h["content-type"] == "application/json"
        assert h["CONTENT-TYPE"] == "application/json"

    def test_missing_key_raises(self) -> None:
        h = _h(("Accept", "*/*"))
        with pytest.raises(KeyError):
            h["X-Missing"]

    def test_get_default(self) -> None:
        assert _h().get("user-agent", "") == ""

    def test_contains(self) -> None:
        h = _h(("Accept", "*/*"))
        assert "accept" in h
        assert "Accept" in h
        assert "x-missing" not in h

    def test_contains_rejects_non_str(self) -> None:
        assert 42 not in _h(("Accept", "*/*"))  # type: ignore[operator]

    def test_multi_value(self) -> None:
        h = _h(("X-Tag", "a"), ("x-tag", "b"))
        assert h["x-tag"] == "a"
        assert h.get_list("X-Tag") == ["a", "b"]
        assert len(h) == 1

    def test_raw(self) -> None:
        raw = ((b"accept", b"*/*"),)
        assert Headers(raw).raw == raw


class TestQueryParams:
    def test_getitem(self) -> None:
        q = QueryParams(b"page=2&q=hello")
        assert q["page"] == "2"
        assert q["q"] == "hello"

    def test_multi_value(self) -> None:
        q = QueryParams(b"tag=a&tag=b")
        assert q["tag"] == "a"
        assert q.get_list("tag") == ["a", "b"]

    def test_blank_values_kept(self) -> None:
        assert QueryParams(b"flag=")["flag"] == ""

    def test_empty(self) -> None:
        q = QueryParams()
        assert len(q) == 0
        assert q.raw == b""
