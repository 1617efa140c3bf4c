"""ASGI request pipeline — the only code that touches raw HTTP scopes.

Converts a scope into a ``Request``, strips the router's base path,
matches the route, reads the body, runs the route's middleware chain
and validating handler, and sends the ``Response`` back.
"""

import logging
from dataclasses import replace

from httpschema._internal.types import Receive, Scope, Send
from httpschema.config import ServerConfig
from httpschema.errors import HTTPError, NotFound
from httpschema.http.request import Request
from httpschema.routing.router import Router
from httpschema.server.errors import handle_http_error, handle_internal_error
from httpschema.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    config: ServerConfig,
    logger: logging.Logger,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        request = mount(request, config.base_path)
        match = router.match(request.method, request.path)
        logger.debug("%s %s -> %s", request.method, request.path, match.key)
        await request.body(max_size=config.max_content_length)
        response = await match.route.handler(request.with_path_params(match.path_params))
    except HTTPError as exc:
        response = handle_http_error(exc, request, logger)
    except Exception as exc:
        response = handle_internal_error(exc, request, logger, debug=config.debug)

    await send_response(response, send, head=request.method == "HEAD")


def mount(request: Request, base_path: str) -> Request:
    """Re-root *request* under *base_path*.

    ``/api/sum`` under ``/api`` becomes path ``/sum`` with root path
    ``/api``. Raises ``NotFound`` for paths outside the base path.
    """
    base = base_path.rstrip("/")
    if not base:
        return request
    if request.path == base:
        path = "/"
    elif request.path.startswith(f"{base}/"):
        path = request.path[len(base) :]
    else:
        raise NotFound(f"{request.path!r} is outside {base!r}")
    return replace(request, path=path, root_path=f"{request.root_path}{base}")
