"""Tests for httpschema.http.response — Response chaining and JSON bodies."""

import pytest

from httpschema.http.response import JSON_CONTENT_TYPE, Response, json_response


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.body == b""
        assert r.status == 200
        assert r.content_type == JSON_CONTENT_TYPE
        assert r.headers == ()

    def test_with_status(self) -> None:
        assert Response().with_status(201).status == 201

    def test_with_header(self) -> None:
        assert Response().with_header("X-Custom", "value").headers == (("X-Custom", "value"),)

    def test_chained_headers(self) -> None:
        r = Response().with_header("A", "1").with_header("B", "2")
        assert r.headers == (("A", "1"), ("B", "2"))

    def test_with_headers_dict(self) -> None:
        r = Response().with_headers({"A": "1", "B": "2"})
        assert r.headers == (("A", "1"), ("B", "2"))

    def test_with_content_type(self) -> None:
        assert Response("hi").with_content_type("text/plain").content_type == "text/plain"

    def test_immutable(self) -> None:
        r = Response()
        r.with_status(404)
        assert r.status == 200
        with pytest.raises(AttributeError):
            r.status = 500  # type: ignore[misc]

    def test_body_bytes_from_str(self) -> None:
        assert Response("ok").body_bytes == b"ok"

    def test_text_from_bytes(self) -> None:
        assert Response(b"ok").text == "ok"

    def test_json(self) -> None:
        assert Response(b"[1, 2]").json() == [1, 2]

    def test_json_empty(self) -> None:
        assert Response().json() is None


class TestJsonResponse:
    def test_number(self) -> None:
        r = json_response(10)
        assert r.body_bytes == b"10"
        assert r.content_type == JSON_CONTENT_TYPE

    def test_string(self) -> None:
        assert json_response("Hello, Ada!").json() == "Hello, Ada!"

    def test_dict(self) -> None:
        r = json_response({"success": False, "code": "X"})
        assert r.json() == {"success": False, "code": "X"}

    def test_none(self) -> None:
        assert json_response(None).body_bytes == b"null"

    def test_status(self) -> None:
        assert json_response([], status=201).status == 201
