"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from velix.routing.binding import ParamBinding
from velix.routing.pattern import CompiledRoute

HTTP_METHODS = ("GET", "POST", "PUT", "HEAD", "DELETE", "PATCH")


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route.

    Created during app setup and never mutated or reordered afterwards.
    """

    method: str
    template: str
    compiled: CompiledRoute
    handler: Callable[..., Any]
    bindings: tuple[ParamBinding, ...] = ()

    @property
    def path(self) -> str:
        """The template as compiled, with a single leading slash."""
        return "/" + self.compiled.source


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
