"""Immutable HTTP request.

Frozen metadata with async body access. Middleware derives new
requests with ``with_props()`` rather than mutating the one it got.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from httpschema._internal.types import Receive, Scope
from httpschema.errors import BadRequest, PayloadTooLarge
from httpschema.http.headers import Headers
from httpschema.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is relative to ``root_path`` (the router's base path), so
    handlers and middleware see the same path the schema declares.

    ``props`` holds request-derived properties attached by middleware
    (client metadata, parsed user agents, ...). A router configured with
    ``request_props`` validates them before dispatch.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: Mapping[str, str] = field(default_factory=dict)
    root_path: str = ""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None
    props: Mapping[str, Any] = field(default_factory=dict)

    # Private: ASGI receive callable for reading the body
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: body cache, shared by every request derived from this one
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def url(self) -> str:
        """Full request path, including the root path and query string."""
        full = f"{self.root_path}{self.path}"
        if self.query.raw:
            return f"{full}?{self.query.raw.decode('latin-1')}"
        return full

    # -- Derivation --

    def with_props(self, **values: Any) -> Request:
        """Return a new Request with additional request properties."""
        return replace(self, props={**self.props, **values})

    def with_path_params(self, path_params: Mapping[str, str]) -> Request:
        """Return a new Request carrying matched path parameters."""
        return replace(self, path_params=dict(path_params))

    # -- Async body access --

    async def body(self, max_size: int | None = None) -> bytes:
        """Read the full request body.

        Result is cached; the ASGI receive is consumed once. Raises
        ``PayloadTooLarge`` if the body exceeds *max_size* bytes.
        """
        if "body" in self._cache:
            return self._cache["body"]
        if max_size is not None and (self.content_length or 0) > max_size:
            raise PayloadTooLarge(max_size)

        chunks: list[bytes] = []
        size = 0
        while self._receive is not None:
            message = await self._receive()
            chunk = message.get("body", b"")
            size += len(chunk)
            if max_size is not None and size > max_size:
                raise PayloadTooLarge(max_size)
            chunks.append(chunk)
            if not message.get("more_body", False):
                break

        result = b"".join(chunks)
        self._cache["body"] = result
        return result

    async def json(self) -> Any:
        """Parse the body as JSON. An empty body parses as ``None``.

        Raises ``BadRequest`` if the body is not valid JSON.
        """
        if "json" in self._cache:
            return self._cache["json"]
        raw = await self.body()
        if not raw:
            result = None
        else:
            try:
                result = json_module.loads(raw)
            except ValueError as exc:
                raise BadRequest(f"Request body is not valid JSON: {exc}") from exc
        self._cache["json"] = result
        return result

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            root_path=scope.get("root_path", ""),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
        )
