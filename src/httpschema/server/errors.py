"""Error handling for the dispatch pipeline.

Maps HTTPError exceptions, unexpected failures, and request validation
failures to JSON Response objects.
"""

import inspect
import logging
from typing import Any

from httpschema._internal.invoke import invoke
from httpschema._internal.types import ErrorChannel
from httpschema.errors import HTTPError, RequestValidationError
from httpschema.http.request import Request
from httpschema.http.response import Response, json_response
from httpschema.server.negotiation import negotiate


def default_validation_error(error: RequestValidationError) -> Response:  # noqa: ARG001
    """Default error channel: report validation failures as a server error."""
    return json_response({"error": "Internal Server Error"}, status=500)


def debug_validation_error(error: RequestValidationError) -> Response:
    """Debug error channel: a server error carrying the diagnostic."""
    return json_response(
        {"error": "Internal Server Error", "detail": error.diagnostic, "source": error.source},
        status=500,
    )


async def call_error_channel(
    channel: ErrorChannel,
    error: RequestValidationError,
    request: Request,
) -> Response:
    """Invoke a validation error channel with introspected arguments.

    Channels may accept zero, one (error), or two (error, request) args.
    Supports both sync and async channels. The return value is
    negotiated like a handler's.
    """
    params = list(inspect.signature(channel).parameters.values())

    if len(params) >= 2:
        result = await invoke(channel, error, request)
    elif len(params) == 1:
        result = await invoke(channel, error)
    else:
        result = await invoke(channel)

    return negotiate(result)


def handle_http_error(exc: HTTPError, request: Request, log: logging.Logger) -> Response:
    """Map an HTTPError to a JSON error Response."""
    log.debug("%d %s %s: %s", exc.status, request.method, request.url, exc.detail)
    response = json_response({"error": exc.detail or f"Error {exc.status}"}, status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(
    exc: Exception,
    request: Request,
    log: logging.Logger,
    *,
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    log.exception("500 %s %s", request.method, request.url)
    body: dict[str, Any] = {"error": "Internal Server Error"}
    if debug:
        body["detail"] = f"{type(exc).__name__}: {exc}"
    return json_response(body, status=500)
