"""Insertion-ordered route table with first-match lookup.

Routes are registered during setup and the table is frozen before the
first request. Lookup scans the routes of one method in registration
order: the earliest registered match wins, with no specificity ranking.
"""

import logging
from collections.abc import Callable
from typing import Any

from velix.errors import ConfigurationError
from velix.routing.binding import build_bindings
from velix.routing.pattern import compile_template, normalize_path, split_path
from velix.routing.route import HTTP_METHODS, Route, RouteMatch

logger = logging.getLogger("velix.routing")


class Router:
    """Route table partitioned by HTTP method.

    Usage::

        router = Router()
        router.register("GET", "/users/{name}", handler)
        router.freeze()
        match = router.match("GET", "/users/ada")
    """

    __slots__ = ("_by_method", "_frozen", "_routes")

    def __init__(self) -> None:
        self._by_method: dict[str, list[Route]] = {}
        self._routes: list[Route] = []
        self._frozen = False

    def register(self, method: str, template: str, handler: Callable[..., Any]) -> Route:
        """Compile *template* and append a route for *method*.

        Registering the same template twice keeps both entries; the first
        one always wins at match time.

        Raises ``MalformedRoute`` for a bad template, ``ConfigurationError``
        for an unsupported method, and ``RuntimeError`` once frozen.
        """
        if self._frozen:
            msg = "Cannot register routes after the router has been frozen."
            raise RuntimeError(msg)

        method = method.upper()
        if method not in HTTP_METHODS:
            msg = f"Unsupported HTTP method {method!r}. Expected one of: {', '.join(HTTP_METHODS)}"
            raise ConfigurationError(msg)

        compiled = compile_template(template)
        route = Route(
            method=method,
            template=template,
            compiled=compiled,
            handler=handler,
            bindings=build_bindings(handler, compiled.param_names),
        )
        self._by_method.setdefault(method, []).append(route)
        self._routes.append(route)
        logger.debug(
            "registered %s %s -> %s",
            method,
            route.path,
            getattr(handler, "__qualname__", repr(handler)),
        )
        return route

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._routes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """End the registration phase. No more routes can be added."""
        self._frozen = True

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Find the first route registered under *method* that matches *path*.

        *path* is normalized here (percent-decoded, boundary whitespace and
        slashes trimmed), so raw and pre-normalized paths behave the same.
        Returns ``None`` when nothing matches; routes registered under
        other methods are never considered.
        """
        candidates = self._by_method.get(method.upper())
        if not candidates:
            return None

        parts = split_path(normalize_path(path))
        for route in candidates:
            params = route.compiled.match(parts)
            if params is not None:
                return RouteMatch(route=route, path_params=params)
        return None
