"""Async test clients for httpschema routers.

Uses the same Request and Response types as production.
No wrapper translation layer.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

import httpx
from pydantic_core import to_json

from httpschema.client.http_client import HttpClient
from httpschema.config import ClientConfig
from httpschema.http.response import JSON_CONTENT_TYPE, Response
from httpschema.server.router import SchemaRouter


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for a ``SchemaRouter``.

    Returns the same ``Response`` type used in production. Sends requests
    through the ASGI interface directly, with no HTTP involved. Paths are
    concrete URLs, including the router's base path.

    Usage::

        async with TestClient(router) as client:
            response = await client.post("/api/sum", json=[1, 2, 3, 4])
            assert response.json() == 10
    """

    __slots__ = ("app",)

    def __init__(self, app: SchemaRouter) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def get(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json: Any = None,
    ) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers, json=json)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> Response:
        """Send a POST request."""
        return await self.request("POST", path, headers=headers, body=body, json=json)

    async def put(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> Response:
        """Send a PUT request."""
        return await self.request("PUT", path, headers=headers, body=body, json=json)

    async def delete(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Send a DELETE request."""
        return await self.request("DELETE", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app.

        ``json`` is serialized and sent with a JSON content type; it
        takes precedence over ``body``.
        """
        request_headers: dict[str, str] = {}
        request_body = body or b""
        if json is not None:
            request_body = to_json(json)
            request_headers["content-type"] = JSON_CONTENT_TYPE
        request_headers.update(headers or {})

        # Split path and query string
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        # Build raw ASGI headers
        raw_headers: list[tuple[bytes, bytes]] = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in request_headers.items()
        ]
        raw_headers.append((b"content-length", str(len(request_body)).encode("latin-1")))

        # Build ASGI scope
        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path_part,
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        # Capture response via send
        response_status = 200
        response_headers: list[tuple[bytes, bytes]] = []
        response_body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        content_type = JSON_CONTENT_TYPE
        extra_headers: list[tuple[str, str]] = []
        for name_b, value_b in response_headers:
            name_str = name_b.decode("latin-1")
            value_str = value_b.decode("latin-1")
            if name_str == "content-type":
                content_type = value_str
            elif name_str != "content-length":
                extra_headers.append((name_str, value_str))

        return Response(
            body=b"".join(response_body_parts),
            status=response_status,
            content_type=content_type,
            headers=tuple(extra_headers),
        )


def create_test_client(
    router: SchemaRouter,
    *,
    base_url: str = "http://testserver",
    config: ClientConfig | None = None,
) -> HttpClient:
    """An ``HttpClient`` for *router*'s schema, served in-process.

    Requests go through ``httpx.ASGITransport``, so the full server
    pipeline runs, including the router's base path. Use as an async
    context manager::

        async with create_test_client(router) as client:
            assert await client.post("/sum", body=[1, 2, 3, 4]) == 10
    """
    client_config = replace(
        config or ClientConfig(),
        base_url=f"{base_url.rstrip('/')}{router.config.base_path}",
    )
    return HttpClient(router.schema, client_config, transport=httpx.ASGITransport(app=router))
