"""httpschema exception hierarchy.

Shared across the schema compiler, the pattern engine, the server
pipeline, and the client so every module raises and catches the same
types.
"""

from dataclasses import dataclass
from typing import Any


class HttpSchemaError(Exception):
    """Base for all httpschema-specific errors."""


# -- Declaration errors (raised while compiling a schema) --


class SchemaError(HttpSchemaError):
    """Raised when a route declaration is malformed.

    Schema construction aborts on the first error; there is no
    partial schema.
    """


class MalformedRouteKeyError(SchemaError):
    """A route key is not of the form ``'METHOD PATH'``."""

    def __init__(self, key: str) -> None:
        super().__init__(
            f"Route {key!r} must be specified using the format '{{METHOD}} {{PATH}}'"
        )
        self.key = key


class UnsupportedMethodError(SchemaError):
    """A route key names a method outside the fixed method set."""

    def __init__(self, method: str, allowed: tuple[str, ...]) -> None:
        super().__init__(
            f"Unsupported method {method!r}. Expected one of: {', '.join(allowed)}"
        )
        self.method = method


class UnsupportedPatternError(SchemaError):
    """A path template uses a feature the pattern engine rejects.

    Optional (``:id?``) and repeated (``:id+``) parameters are recognized
    but not supported.
    """

    def __init__(self, template: str, reason: str) -> None:
        super().__init__(f"{reason} in path {template!r}")
        self.template = template
        self.reason = reason


class DuplicateParamError(SchemaError):
    """Two parameters in one path template share an identifier."""

    def __init__(self, template: str, name: str) -> None:
        super().__init__(f"Duplicate parameter {name!r} in path {template!r}")
        self.template = template
        self.name = name


class ConfigurationError(HttpSchemaError):
    """Raised when a router or client is wired up incorrectly."""


class RouteNotFoundError(HttpSchemaError, LookupError):
    """A route key is not declared in the schema."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Route {key!r} is not declared in the schema")
        self.key = key


# -- Call-time errors --


class MissingParamError(HttpSchemaError, KeyError):
    """A path parameter required by the template has no value."""

    def __init__(self, name: str, template: str) -> None:
        super().__init__(f"Expected a value for parameter {name!r} of path {template!r}")
        self.name = name
        self.template = template

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class MissingBodyError(HttpSchemaError, ValueError):
    """The route declares a request body but the call supplied none."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Route {key!r} requires a request body")
        self.key = key


class RequestValidationError(HttpSchemaError):
    """A request failed validation against its declared type.

    Handed to the router's error channel; never raised past the
    dispatch boundary.
    """

    def __init__(self, diagnostic: str, expected: Any, value: Any, source: str = "body") -> None:
        super().__init__(diagnostic)
        self.diagnostic = diagnostic
        self.expected = expected
        self.value = value
        self.source = source


class CommunicationError(HttpSchemaError):
    """The server answered a client call with a 4xx or 5xx status."""

    def __init__(self, status: int, status_text: str, body: Any = None) -> None:
        super().__init__(
            f"There was an error communicating with the server: {status} {status_text}"
        )
        self.status = status
        self.status_text = status_text
        self.body = body


# -- HTTP errors (raised inside the server pipeline) --


@dataclass(frozen=True, slots=True)
class HTTPError(HttpSchemaError):
    """An error that maps directly to an HTTP status code.

    Raised by the router and the request pipeline. The ASGI entry
    point catches these and turns them into JSON error responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818
    """400 — the request body could not be decoded."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — the path matched, but not for this HTTP method.

    Carries an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or f"Method not allowed. Allowed methods: {allow_value}",
            headers=(("Allow", allow_value),),
        )


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413 — the request body exceeds ``ServerConfig.max_content_length``."""

    def __init__(self, limit: int) -> None:
        super().__init__(status=413, detail=f"Request body exceeds {limit} bytes")
