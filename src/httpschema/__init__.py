"""httpschema — one HTTP contract shared by client and server.

Declare routes once, serve them with request validation, and call them
with path parameters filled in.

Basic usage::

    from httpschema import ClientConfig, HttpClient, SchemaRouter, create_schema

    schema = create_schema({
        "POST /sum": {"request_body": list[float], "response_body": float},
    })

    router = SchemaRouter(schema)

    @router.post("/sum")
    def add(body: list[float]) -> float:
        return sum(body)

    async with HttpClient(schema, ClientConfig(base_url="http://localhost:8000")) as client:
        total = await client.post("/sum", body=[1, 2, 3, 4])
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "METHODS",
    "BodySpec",
    "ClientConfig",
    "CommunicationError",
    "HttpClient",
    "HttpSchema",
    "HttpSchemaError",
    "Middleware",
    "Next",
    "Request",
    "RequestHandler",
    "RequestValidationError",
    "Response",
    "RouteInfo",
    "RouteSpec",
    "SchemaError",
    "SchemaRouter",
    "ServerConfig",
    "Unknown",
    "compile_path",
    "create_request_handler",
    "create_schema",
    "parse_pattern",
    "route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import httpschema`` light for client-only processes.
    """
    if name in ("BodySpec", "HttpSchema", "RouteInfo", "RouteSpec", "create_schema", "route"):
        from httpschema import schema as _schema

        return getattr(_schema, name)

    if name in ("compile_path", "parse_pattern"):
        from httpschema.routing import pattern as _pattern

        return getattr(_pattern, name)

    if name == "METHODS":
        from httpschema.methods import METHODS

        return METHODS

    if name == "Unknown":
        from httpschema.validation import Unknown

        return Unknown

    if name in ("ClientConfig", "ServerConfig"):
        from httpschema import config as _config

        return getattr(_config, name)

    if name in ("SchemaRouter", "RequestHandler", "create_request_handler"):
        from httpschema import server as _server

        return getattr(_server, name)

    if name == "HttpClient":
        from httpschema.client import HttpClient

        return HttpClient

    if name == "Request":
        from httpschema.http.request import Request

        return Request

    if name == "Response":
        from httpschema.http.response import Response

        return Response

    if name in ("Middleware", "Next"):
        from httpschema import middleware as _mw

        return getattr(_mw, name)

    if name in (
        "CommunicationError",
        "HttpSchemaError",
        "RequestValidationError",
        "SchemaError",
    ):
        from httpschema import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
