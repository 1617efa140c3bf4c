"""Schema-validating request handlers.

A ``RequestHandler`` is the unit every schema route is served by. It
validates the request against the route's declared types and then
either calls the user's handler or, on failure, the validation error
channel. ``SchemaRouter`` builds one per registration; standalone units
from ``create_request_handler()`` go through the exact same code.

Per-request flow::

    received -> validating -> dispatching -> responded
                          \\-> validation failed (error channel) -> responded
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

from httpschema._internal.invoke import invoke
from httpschema._internal.types import ErrorChannel, Handler
from httpschema.errors import RequestValidationError
from httpschema.http.request import Request
from httpschema.http.response import Response
from httpschema.schema import HttpSchema, RouteInfo
from httpschema.server.errors import call_error_channel, default_validation_error
from httpschema.server.negotiation import negotiate
from httpschema.validation import validate

logger = logging.getLogger("httpschema.server")


class RequestHandler:
    """A handler bound to one schema route, with validation in front.

    Callable as ``await unit(request)``; returns a ``Response``. The
    handler runs only if the body conforms to ``route.request_body``
    and, when ``request_props`` is set, ``request.props`` conforms to
    it. The response body is not validated.

    Handlers may be sync or async and take keyword arguments by name:

    - ``request``: the ``Request`` (also matched by annotation)
    - ``body``: the validated request body
    - ``params``: path params keyed like ``route.named_params``
    - ``props``: the validated request properties
    - ``route``: the ``RouteInfo`` (also matched by annotation)
    - any named path parameter, converted with its annotation if possible
      (``bool`` annotations receive the raw string)
    """

    __slots__ = ("_signature", "handler", "logger", "on_validation_error", "request_props", "route")

    def __init__(
        self,
        route: RouteInfo,
        handler: Handler,
        *,
        request_props: Any = None,
        on_validation_error: ErrorChannel | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.route = route
        self.handler = handler
        self.request_props = request_props
        self.on_validation_error = on_validation_error
        self.logger = logger
        self._signature = inspect.signature(handler, eval_str=True)

    @property
    def key(self) -> str:
        """The route key this unit serves."""
        return self.route.key

    def __repr__(self) -> str:
        name = getattr(self.handler, "__qualname__", repr(self.handler))
        return f"<RequestHandler {self.key!r} -> {name}>"

    def bind(
        self,
        *,
        request_props: Any = None,
        on_validation_error: ErrorChannel | None = None,
        logger: logging.Logger | None = None,
    ) -> RequestHandler:
        """Return a copy that falls back to the given settings where this unit has none.

        ``SchemaRouter`` binds every unit it registers, so a standalone unit
        picks up the router's ``request_props``, error channel and logger
        without being modified.
        """
        return RequestHandler(
            self.route,
            self.handler,
            request_props=self.request_props if self.request_props is not None else request_props,
            on_validation_error=self.on_validation_error or on_validation_error,
            logger=self.logger or logger,
        )

    async def __call__(self, request: Request) -> Response:
        body = await request.json()
        checked = validate(self.route.request_body, body)
        if not checked:
            error = RequestValidationError(
                checked.diagnostic or "", self.route.request_body, body, source="body"
            )
            return await self._reject(error, request)

        props: Any = dict(request.props)
        if self.request_props is not None:
            checked_props = validate(self.request_props, props, mode="python")
            if not checked_props:
                error = RequestValidationError(
                    checked_props.diagnostic or "", self.request_props, props, source="props"
                )
                return await self._reject(error, request)
            props = checked_props.value

        kwargs = self._build_kwargs(request, body=checked.value, props=props)
        result = await invoke(self.handler, **kwargs)
        return negotiate(result)

    async def _reject(self, error: RequestValidationError, request: Request) -> Response:
        """Hand a validation failure to the error channel. The handler never runs."""
        (self.logger or logger).info("Validation failed for %s: %s", self.key, error.diagnostic)
        channel = self.on_validation_error or default_validation_error
        return await call_error_channel(channel, error, request)

    def _build_kwargs(self, request: Request, *, body: Any, props: Any) -> dict[str, Any]:
        """Build handler kwargs from the handler's signature."""
        kwargs: dict[str, Any] = {}
        for name, param in self._signature.parameters.items():
            if name == "request" or param.annotation is Request:
                kwargs[name] = request
            elif name == "route" or param.annotation is RouteInfo:
                kwargs[name] = self.route
            elif name == "body":
                kwargs[name] = body
            elif name == "params":
                kwargs[name] = dict(request.path_params)
            elif name == "props":
                kwargs[name] = props
            elif name in request.path_params:
                kwargs[name] = _convert(request.path_params[name], param.annotation)
        return kwargs


def _convert(value: str, annotation: Any) -> Any:
    """Convert a path segment with ``annotation(value)``.

    ``bool`` is left alone since ``bool("false")`` is true. Values that do
    not convert are passed through as strings.
    """
    if annotation is inspect.Parameter.empty or annotation is bool or not callable(annotation):
        return value
    try:
        return annotation(value)
    except (ValueError, TypeError):
        return value


def create_request_handler(
    schema: HttpSchema,
    route_key: str,
    handler: Handler,
    *,
    request_props: Any = None,
    on_validation_error: ErrorChannel | None = None,
    logger: logging.Logger | None = None,
) -> RequestHandler:
    """Create a standalone handler unit for one schema route.

    The unit can be registered on any number of ``SchemaRouter``
    instances, each with its own middleware::

        handle_product = create_request_handler(
            schema, "POST /product", lambda body: math.prod(body)
        )
        router.add("POST /product", handle_product, middleware=[log])

    Raises ``RouteNotFoundError`` if *route_key* is not in *schema*.
    """
    method, _, path = route_key.partition(" ")
    return RequestHandler(
        schema.route(method, path),
        handler,
        request_props=request_props,
        on_validation_error=on_validation_error,
        logger=logger,
    )
