"""Route table entries and match results."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Route:
    """One method + pattern registration in a ``Router``.

    ``path`` uses the pattern language of ``routing.pattern``; ``key``
    is the ``"METHOD PATH"`` schema key it was registered under, if any.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    key: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A matched route and the path parameters captured for it.

    ``path_params`` is keyed by parameter name; wildcard captures are
    keyed by their position (``"0"``, ``"1"``, ...).
    """

    route: Route
    path_params: dict[str, str]

    @property
    def key(self) -> str | None:
        return self.route.key
