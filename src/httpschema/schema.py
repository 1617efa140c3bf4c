"""HTTP schemas — the shared, immutable description of an API surface.

A schema is compiled once, at import time, from a static declaration
and then handed to ``HttpClient`` (client process) and/or
``SchemaRouter`` (server process). Both sides load the same
declaration; nothing is negotiated at runtime.

Two declaration forms are accepted and produce equal schemas.

Keyed by route::

    schema = create_schema({
        "GET /random-numbers": {"response_body": list[float]},
        "POST /sum": {"request_body": list[float], "response_body": float},
        "GET *": {"request_body": Greeting},
    })

A list of route specs::

    schema = create_schema([
        route("GET", "/random-numbers", response_body=list[float]),
        route("POST", "/sum", request_body=list[float], response_body=float),
        route("GET", "*", param_names=["0"], request_body=Greeting),
    ])
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, fields
from typing import Any

from httpschema.errors import (
    MalformedRouteKeyError,
    RouteNotFoundError,
    SchemaError,
    UnsupportedMethodError,
)
from httpschema.methods import METHODS, is_method
from httpschema.routing.pattern import parse_pattern
from httpschema.validation import Unknown, is_unknown

_BODY_KEYS = frozenset({"request_body", "response_body"})


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """One route in the list form of a schema declaration.

    ``param_names`` is optional; when given it must list exactly the
    parameter identifiers derived from ``path``.
    """

    method: str
    path: str
    param_names: tuple[str, ...] | None = None
    request_body: Any = Unknown
    response_body: Any = Unknown


def route(
    method: str,
    path: str,
    *,
    param_names: Iterable[str] | None = None,
    request_body: Any = Unknown,
    response_body: Any = Unknown,
) -> RouteSpec:
    """Convenience constructor for a single ``RouteSpec``."""
    return RouteSpec(
        method=method,
        path=path,
        param_names=tuple(param_names) if param_names is not None else None,
        request_body=request_body,
        response_body=response_body,
    )


@dataclass(frozen=True, slots=True)
class BodySpec:
    """Payload descriptors for one route in the mapping form of a declaration.

    Interchangeable with a plain ``{"request_body": ..., "response_body": ...}``
    dict.
    """

    request_body: Any = Unknown
    response_body: Any = Unknown


@dataclass(frozen=True, slots=True)
class RouteInfo:
    """Compiled metadata for one route. Immutable and safe to share.

    ``named_params`` lists parameter identifiers in path order: named
    parameters by name, wildcards by ordinal (``"0"``, ``"1"``, …).
    """

    method: str
    path: str
    named_params: tuple[str, ...] = ()
    request_body: Any = Unknown
    response_body: Any = Unknown

    @property
    def key(self) -> str:
        """The route key, ``"METHOD PATH"``."""
        return f"{self.method} {self.path}"

    @property
    def has_params(self) -> bool:
        """True if calls to this route must supply path params."""
        return bool(self.named_params)

    @property
    def has_body(self) -> bool:
        """True if calls to this route must supply a request body."""
        return not is_unknown(self.request_body)

    def compile_path(self, values: Mapping[object, object] | None = None) -> str:
        """Build a concrete path for this route from param *values*."""
        return parse_pattern(self.path).compile(values)


class HttpSchema(Mapping[str, RouteInfo]):
    """An immutable, insertion-ordered mapping of route key to ``RouteInfo``.

    Build one with ``create_schema()``.
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: Iterable[RouteInfo] = ()) -> None:
        self._routes: dict[str, RouteInfo] = {info.key: info for info in routes}

    def __getitem__(self, key: str) -> RouteInfo:
        return self._routes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"HttpSchema({list(self._routes)!r})"

    def route(self, method: str, path: str) -> RouteInfo:
        """Look up a route by method and path template.

        Raises ``RouteNotFoundError`` if the route is not declared.
        """
        key = f"{method} {path}"
        try:
            return self._routes[key]
        except KeyError:
            raise RouteNotFoundError(key) from None

    def paths(self, method: str) -> list[str]:
        """Path templates declared for *method*, in declaration order."""
        return [info.path for info in self._routes.values() if info.method == method]

    def methods(self) -> frozenset[str]:
        """Every method used by at least one route."""
        return frozenset(info.method for info in self._routes.values())


def split_route_key(key: str) -> tuple[str, str]:
    """Split ``"METHOD PATH"`` into its method and path.

    Raises ``MalformedRouteKeyError`` if the key is not exactly two
    space-separated parts, ``UnsupportedMethodError`` if the method is
    not one of ``METHODS``.
    """
    if not isinstance(key, str):
        raise MalformedRouteKeyError(repr(key))
    parts = key.split(" ")
    if len(parts) != 2 or not all(parts):
        raise MalformedRouteKeyError(key)
    method, path = parts
    if not is_method(method):
        raise UnsupportedMethodError(method, METHODS)
    return method, path


def create_schema(
    specs: Mapping[str, BodySpec | Mapping[str, Any] | None] | Iterable[RouteSpec | Mapping[str, Any]],
) -> HttpSchema:
    """Compile a route declaration into an ``HttpSchema``.

    Accepts a mapping keyed by ``"METHOD PATH"`` whose values hold
    ``request_body`` / ``response_body`` descriptors (or ``BodySpec``
    values), or an iterable of
    ``RouteSpec`` (or mappings with the same fields). The list form is
    converted to the mapping form first, so both go through one code
    path. Later duplicates overwrite earlier ones.

    Compilation is pure. Any malformed route raises a ``SchemaError``
    and no schema is produced.
    """
    body_specs = specs if isinstance(specs, Mapping) else _specs_to_mapping(specs)

    routes: list[RouteInfo] = []
    for key, body_spec in body_specs.items():
        method, path = split_route_key(key)
        named_params = parse_pattern(path).param_names
        request_body, response_body = _read_body_spec(key, body_spec)
        routes.append(
            RouteInfo(
                method=method,
                path=path,
                named_params=named_params,
                request_body=request_body,
                response_body=response_body,
            )
        )
    return HttpSchema(routes)


def _specs_to_mapping(
    specs: Iterable[RouteSpec | Mapping[str, Any]],
) -> dict[str, dict[str, Any]]:
    """Convert the list form to the mapping form."""
    result: dict[str, dict[str, Any]] = {}
    for item in specs:
        spec = _coerce_route_spec(item)
        key = f"{spec.method} {spec.path}"
        if spec.param_names is not None:
            derived = parse_pattern(spec.path).param_names
            if tuple(spec.param_names) != derived:
                msg = (
                    f"Route {key!r} declares param_names {list(spec.param_names)!r} "
                    f"but its path defines {list(derived)!r}"
                )
                raise SchemaError(msg)
        result[key] = {"request_body": spec.request_body, "response_body": spec.response_body}
    return result


def _coerce_route_spec(item: RouteSpec | Mapping[str, Any]) -> RouteSpec:
    if isinstance(item, RouteSpec):
        return item
    if not isinstance(item, Mapping):
        msg = f"Expected a RouteSpec or mapping, got {type(item).__name__}"
        raise SchemaError(msg)
    known = {f.name for f in fields(RouteSpec)}
    unknown = set(item) - known
    if unknown:
        msg = f"Unknown route spec fields: {', '.join(sorted(unknown))}"
        raise SchemaError(msg)
    if "method" not in item or "path" not in item:
        msg = "Route specs require both 'method' and 'path'"
        raise SchemaError(msg)
    return route(**item)


def _read_body_spec(key: str, body_spec: BodySpec | Mapping[str, Any] | None) -> tuple[Any, Any]:
    """Extract request/response descriptors, defaulting to ``Unknown``."""
    if body_spec is None:
        return Unknown, Unknown
    if isinstance(body_spec, BodySpec):
        return body_spec.request_body, body_spec.response_body
    if not isinstance(body_spec, Mapping):
        msg = f"Route {key!r} must map to a dict of body descriptors"
        raise SchemaError(msg)
    unknown = set(body_spec) - _BODY_KEYS
    if unknown:
        msg = f"Route {key!r} has unknown fields: {', '.join(sorted(unknown))}"
        raise SchemaError(msg)
    request_body = body_spec.get("request_body")
    response_body = body_spec.get("response_body")
    return (
        Unknown if request_body is None else request_body,
        Unknown if response_body is None else response_body,
    )
