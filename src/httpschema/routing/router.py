"""Method-keyed route table over parsed path patterns.

Routes are registered during setup and compiled into an immutable
lookup structure when the owning router freezes.
"""

from dataclasses import dataclass, field

from httpschema.errors import MethodNotAllowed, NotFound
from httpschema.routing.pattern import ParsedPath, parse_pattern
from httpschema.routing.route import Route, RouteMatch


@dataclass(slots=True)
class _Entry:
    """All registrations sharing one path pattern. Mutable during setup only."""

    pattern: ParsedPath
    routes_by_method: dict[str, Route] = field(default_factory=dict)


class Router:
    """Route table matching concrete paths against registered patterns.

    Patterns are tried in registration order; the first pattern that
    matches the path and has a route for the method wins. Registering
    the same method and pattern twice replaces the earlier route.

    Usage::

        router = Router()
        router.add(Route("/users/:id", handler, frozenset({"GET"})))
        router.add(Route("*", fallback, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/users/42")
        match.path_params  # {"id": "42"}
    """

    __slots__ = ("_compiled", "_entries")

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        entry = self._entries.get(route.path)
        if entry is None:
            entry = _Entry(pattern=parse_pattern(route.path))
            self._entries[route.path] = entry
        for method in route.methods:
            entry.routes_by_method[method] = route

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, in registration order."""
        seen: set[int] = set()
        result: list[Route] = []
        for entry in self._entries.values():
            for route in entry.routes_by_method.values():
                if id(route) not in seen:
                    seen.add(id(route))
                    result.append(route)
        return result

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against registered routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no pattern matches the path.
        Raises ``MethodNotAllowed`` if a pattern matches but not the method.
        """
        allowed: set[str] = set()
        for entry in self._entries.values():
            params = entry.pattern.match(path)
            if params is None:
                continue
            route = entry.routes_by_method.get(method)
            if route is not None:
                return RouteMatch(route=route, path_params=params)
            allowed.update(entry.routes_by_method)

        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"No route matches {method} {path!r}")
