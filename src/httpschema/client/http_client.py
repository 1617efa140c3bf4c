"""Schema-driven HTTP client.

Every call names a route by method and path template, exactly as the
schema declares it. The client fills in path parameters, sends the
body as JSON, and turns error statuses into ``CommunicationError``.
Bodies are not validated on this side; the server is authoritative.
"""

import logging
from collections.abc import Mapping
from typing import Any, Self

import httpx
from pydantic_core import to_json

from httpschema.config import ClientConfig
from httpschema.errors import CommunicationError, MissingBodyError
from httpschema.http.response import JSON_CONTENT_TYPE
from httpschema.schema import HttpSchema

logger = logging.getLogger("httpschema.client")


class HttpClient:
    """An async client for the routes of an ``HttpSchema``.

    Usage::

        async with HttpClient(schema, ClientConfig(base_url="http://localhost:8000/api")) as client:
            total = await client.post("/sum", body=[1, 2, 3, 4])
            greeting = await client.get("*", params={"0": "/hello"}, body={"name": "Ada"})

    ``transport`` and any extra keyword arguments are handed to
    ``httpx.AsyncClient``; tests pass ``httpx.ASGITransport(app=router)``
    to reach a ``SchemaRouter`` in-process.
    """

    __slots__ = ("_client", "config", "schema")

    def __init__(
        self,
        schema: HttpSchema,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        **options: Any,
    ) -> None:
        self.schema = schema
        self.config: ClientConfig = config or ClientConfig()
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            headers=list(self.config.headers),
            timeout=self.config.timeout,
            follow_redirects=self.config.follow_redirects,
            transport=transport,
            **options,
        )

    async def __aenter__(self) -> Self:
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[object, object] | None = None,
        body: Any = None,
        query: Mapping[str, Any] | None = None,
    ) -> Any:
        """Call the route ``"<method> <path>"`` and return the decoded response body.

        *path* is the route's template (``"/file/:id"``, ``"*"``), not a
        concrete URL; *params* fills it in. Wildcards are keyed by
        ordinal, as ``"0"`` or ``0``.

        Raises ``RouteNotFoundError``, ``MissingBodyError`` or
        ``MissingParamError`` before sending anything, and
        ``CommunicationError`` when the server answers with 400 or above.
        """
        info = self.schema.route(method, path)
        if info.has_body and body is None:
            raise MissingBodyError(info.key)
        url = info.compile_path(params)

        headers: dict[str, str] = {}
        content: bytes | None = None
        if body is not None:
            content = to_json(body)
            headers["content-type"] = JSON_CONTENT_TYPE

        logger.debug("%s %s -> %s", method, path, url)
        response = await self._client.request(
            method, url, content=content, headers=headers, params=query
        )

        if response.status_code >= 400:
            raise CommunicationError(response.status_code, response.reason_phrase, decode_body(response))
        return decode_body(response)

    async def get(self, path: str, **kwargs: Any) -> Any:
        """Call a ``GET`` route."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        """Call a ``POST`` route."""
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        """Call a ``PUT`` route."""
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Any:
        """Call a ``PATCH`` route."""
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        """Call a ``DELETE`` route."""
        return await self.request("DELETE", path, **kwargs)

    async def head(self, path: str, **kwargs: Any) -> Any:
        """Call a ``HEAD`` route."""
        return await self.request("HEAD", path, **kwargs)

    async def options(self, path: str, **kwargs: Any) -> Any:
        """Call an ``OPTIONS`` route."""
        return await self.request("OPTIONS", path, **kwargs)


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body: JSON by content type, else text, ``None`` if empty."""
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.json()
    return response.text
