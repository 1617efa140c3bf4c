"""SchemaRouter — the server-side implementation of an HttpSchema.

Mutable during setup (handler registration, middleware).
Frozen at runtime when the first ASGI scope arrives.
"""

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from httpschema._internal.types import ErrorChannel, Handler, Receive, Scope, Send
from httpschema.config import ServerConfig
from httpschema.errors import ConfigurationError
from httpschema.middleware import Middleware, compose
from httpschema.routing.route import Route
from httpschema.routing.router import Router
from httpschema.schema import HttpSchema
from httpschema.server.errors import debug_validation_error
from httpschema.server.handler import RequestHandler, create_request_handler
from httpschema.server.pipeline import handle_request


@dataclass(frozen=True, slots=True)
class _PendingRoute:
    """A registration waiting to be compiled."""

    unit: RequestHandler
    middleware: tuple[Middleware, ...]


class SchemaRouter:
    """An ASGI application serving the routes of an ``HttpSchema``.

    Every registered handler is wrapped in a ``RequestHandler``, so its
    request body is validated before it runs. Validation failures go to
    ``on_validation_error`` instead of the handler.

    Usage::

        router = SchemaRouter(
            schema,
            config=ServerConfig(base_path="/api"),
            on_validation_error=lambda err: {"success": False, "code": "INVALID"},
        )

        @router.post("/sum", middleware=[log])
        def add(body: list[float]) -> float:
            return sum(body)

        router.add("POST /product", handle_product)

    ``logger`` is the observability sink for the pipeline; it defaults
    to the ``httpschema.server`` logger.

    Thread safety:
        Setup is single-threaded (decorators at import time). The
        freeze transition uses a Lock + double-check so exactly one
        thread compiles the route table.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_middleware_list",
        "_pending",
        # Compiled state (populated by _freeze)
        "_router",
        "config",
        "logger",
        "on_validation_error",
        "request_props",
        "schema",
    )

    def __init__(
        self,
        schema: HttpSchema,
        *,
        config: ServerConfig | None = None,
        request_props: Any = None,
        on_validation_error: ErrorChannel | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.schema = schema
        self.config: ServerConfig = config or ServerConfig()
        self.request_props = request_props
        self.on_validation_error = on_validation_error
        self.logger: logging.Logger = logger or logging.getLogger("httpschema.server")
        self._pending: dict[str, _PendingRoute] = {}
        self._middleware_list: list[Middleware] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._router: Router | None = None

    # -- Handler registration --

    def route(
        self,
        route_key: str,
        *,
        middleware: Sequence[Middleware] = (),
    ) -> Callable[[Handler], Handler]:
        """Register a handler for a schema route via decorator."""

        def decorator(func: Handler) -> Handler:
            self.add(route_key, func, middleware=middleware)
            return func

        return decorator

    def get(self, path: str, *, middleware: Sequence[Middleware] = ()) -> Callable[[Handler], Handler]:
        """Register a handler for ``GET <path>`` via decorator."""
        return self.route(f"GET {path}", middleware=middleware)

    def post(self, path: str, *, middleware: Sequence[Middleware] = ()) -> Callable[[Handler], Handler]:
        """Register a handler for ``POST <path>`` via decorator."""
        return self.route(f"POST {path}", middleware=middleware)

    def put(self, path: str, *, middleware: Sequence[Middleware] = ()) -> Callable[[Handler], Handler]:
        """Register a handler for ``PUT <path>`` via decorator."""
        return self.route(f"PUT {path}", middleware=middleware)

    def patch(self, path: str, *, middleware: Sequence[Middleware] = ()) -> Callable[[Handler], Handler]:
        """Register a handler for ``PATCH <path>`` via decorator."""
        return self.route(f"PATCH {path}", middleware=middleware)

    def delete(self, path: str, *, middleware: Sequence[Middleware] = ()) -> Callable[[Handler], Handler]:
        """Register a handler for ``DELETE <path>`` via decorator."""
        return self.route(f"DELETE {path}", middleware=middleware)

    def head(self, path: str, *, middleware: Sequence[Middleware] = ()) -> Callable[[Handler], Handler]:
        """Register a handler for ``HEAD <path>`` via decorator."""
        return self.route(f"HEAD {path}", middleware=middleware)

    def options(self, path: str, *, middleware: Sequence[Middleware] = ()) -> Callable[[Handler], Handler]:
        """Register a handler for ``OPTIONS <path>`` via decorator."""
        return self.route(f"OPTIONS {path}", middleware=middleware)

    def add(
        self,
        route_key: str,
        handler: Handler | RequestHandler,
        *,
        middleware: Sequence[Middleware] = (),
    ) -> RequestHandler:
        """Register a handler (or a prebuilt ``RequestHandler``) for a route.

        The registered unit falls back to this router's ``request_props``,
        error channel and logger wherever it has none of its own; a
        prebuilt ``RequestHandler`` is bound, not modified. Registering
        the same route key again replaces the earlier handler.

        Raises ``RouteNotFoundError`` if *route_key* is not in the schema,
        ``ConfigurationError`` if a ``RequestHandler`` was built for a
        different route.
        """
        self._check_not_frozen()
        if isinstance(handler, RequestHandler):
            if handler.key != route_key or self.schema.get(route_key) != handler.route:
                msg = f"Handler for {handler.key!r} cannot be registered as {route_key!r}"
                raise ConfigurationError(msg)
            unit = self._bind(handler)
        else:
            unit = self.create_handler(route_key, handler)
        self._pending[route_key] = _PendingRoute(unit, tuple(middleware))
        return unit

    def create_handler(self, route_key: str, handler: Handler) -> RequestHandler:
        """Build a ``RequestHandler`` with this router's validation settings."""
        return self._bind(create_request_handler(self.schema, route_key, handler))

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware that wraps every route, outside route middleware."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    # -- Introspection --

    @property
    def handlers(self) -> dict[str, RequestHandler]:
        """Registered handler units, keyed by route key."""
        return {key: pending.unit for key, pending in self._pending.items()}

    def unimplemented(self) -> list[str]:
        """Schema route keys that have no registered handler."""
        return [key for key in self.schema if key not in self._pending]

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            config=self.config,
            logger=self.logger,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol. Freezes the router at startup."""
        self._ensure_frozen()

        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile registrations into the runtime route table.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for key, pending in self._pending.items():
            chain = compose((*self._middleware_list, *pending.middleware), pending.unit)
            info = pending.unit.route
            router.add(Route(path=info.path, handler=chain, methods=frozenset({info.method}), key=key))
        router.compile()
        self._router = router
        self._frozen = True

        if self.config.debug:
            missing = self.unimplemented()
            if missing:
                self.logger.warning("Schema routes without handlers: %s", ", ".join(missing))

    def _bind(self, unit: RequestHandler) -> RequestHandler:
        channel = self.on_validation_error
        if channel is None and self.config.debug:
            channel = debug_validation_error
        return unit.bind(
            request_props=self.request_props,
            on_validation_error=channel,
            logger=self.logger,
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the router after it has started serving requests. "
                "Register handlers and middleware before the first request."
            )
            raise RuntimeError(msg)
