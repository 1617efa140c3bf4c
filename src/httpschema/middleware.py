"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. The router checks the shape, not the lineage.
Middleware runs before request validation, so it can attach request
properties that a router's ``request_props`` descriptor then checks::

    async def user_agent(request: Request, next: Next) -> Response:
        ua = request.headers.get("user-agent", "")
        return await next(request.with_props(useragent={"browser": ua}))
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from httpschema.http.request import Request
from httpschema.http.response import Response

# The next handler in the middleware chain
type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for httpschema middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")

        # Class middleware
        class RequestLog:
            async def __call__(self, request: Request, next: Next) -> Response:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...


def compose(middleware: Sequence[Middleware], endpoint: Next) -> Next:
    """Wrap *endpoint* in *middleware*, first entry outermost."""
    handler = endpoint
    for mw in reversed(middleware):

        async def call_next(request: Request, _mw: Middleware = mw, _next: Next = handler) -> Response:
            return await _mw(request, _next)

        handler = call_next
    return handler
