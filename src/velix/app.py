"""Velix application class.

Mutable during setup (route registration). Frozen at runtime when
``app.run()``, ``app.dispatch()`` or ``__call__()`` is first invoked.
"""

import inspect
import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any, overload

from velix._internal.asgi import Receive, Scope, Send
from velix._internal.types import Handler
from velix.config import AppConfig
from velix.http.headers import Headers
from velix.http.response import Response
from velix.routing.route import Route
from velix.routing.router import Router
from velix.server.handler import dispatch, handle_request
from velix.server.static import StaticFallback

logger = logging.getLogger("velix.server")


class App:
    """The velix application.

    Usage::

        app = App()

        @app.get("/api/users/{name}")
        def hello(name: str):
            return {"message": f"Hello {name}"}

        app.post("/api/users", create_user)  # direct registration

    Lifecycle:
        Routes and hooks are registered from one thread, usually at import
        time. The first ``run()``, ``dispatch()`` or ASGI call freezes the
        route table under a lock (checked again inside it), so concurrent
        first requests freeze it exactly once. From then on the table is
        read-only and shared without locking.
    """

    __slots__ = (
        "_fallback",
        "_freeze_lock",
        "_frozen",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._router: Router = Router()
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        self._fallback: StaticFallback | None = None
        if self.config.public_dir is not None:
            self._fallback = StaticFallback(self.config.public_dir, self.config.index_file)

    # -- Route registration --

    def _register(self, method: str, template: str, handler: Handler | None) -> Any:
        if handler is not None:
            self._check_not_frozen()
            self._router.register(method, template, handler)
            return handler

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self._router.register(method, template, func)
            return func

        return decorator

    @overload
    def get(self, template: str) -> Callable[[Handler], Handler]: ...
    @overload
    def get(self, template: str, handler: Handler) -> Handler: ...
    def get(self, template: str, handler: Handler | None = None) -> Any:
        """Register a GET handler, directly or as a decorator."""
        return self._register("GET", template, handler)

    @overload
    def post(self, template: str) -> Callable[[Handler], Handler]: ...
    @overload
    def post(self, template: str, handler: Handler) -> Handler: ...
    def post(self, template: str, handler: Handler | None = None) -> Any:
        """Register a POST handler, directly or as a decorator."""
        return self._register("POST", template, handler)

    @overload
    def put(self, template: str) -> Callable[[Handler], Handler]: ...
    @overload
    def put(self, template: str, handler: Handler) -> Handler: ...
    def put(self, template: str, handler: Handler | None = None) -> Any:
        """Register a PUT handler, directly or as a decorator."""
        return self._register("PUT", template, handler)

    @overload
    def head(self, template: str) -> Callable[[Handler], Handler]: ...
    @overload
    def head(self, template: str, handler: Handler) -> Handler: ...
    def head(self, template: str, handler: Handler | None = None) -> Any:
        """Register a HEAD handler, directly or as a decorator."""
        return self._register("HEAD", template, handler)

    @overload
    def delete(self, template: str) -> Callable[[Handler], Handler]: ...
    @overload
    def delete(self, template: str, handler: Handler) -> Handler: ...
    def delete(self, template: str, handler: Handler | None = None) -> Any:
        """Register a DELETE handler, directly or as a decorator."""
        return self._register("DELETE", template, handler)

    @overload
    def patch(self, template: str) -> Callable[[Handler], Handler]: ...
    @overload
    def patch(self, template: str, handler: Handler) -> Handler: ...
    def patch(self, template: str, handler: Handler | None = None) -> Any:
        """Register a PATCH handler, directly or as a decorator."""
        return self._register("PATCH", template, handler)

    def route(
        self,
        template: str,
        *,
        methods: list[str] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register one handler under several methods via decorator.

        Args:
            template: URL path template. Use ``{param}`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
        """

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self._register(method, template, func)
            return func

        return decorator

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return self._router.routes

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a function to run when the server starts (ASGI lifespan)."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a function to run when the server shuts down (ASGI lifespan)."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the route table and serve the app with pounce.

        Args:
            host: Override bind host.
            port: Override bind port.
        """
        self._ensure_frozen()

        from velix.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            workers=self.config.workers,
            reload=self.config.debug,
        )

    def dispatch(
        self,
        method: str,
        target: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        """Dispatch one request synchronously and return the finalized response.

        *target* is the request target as sent on the wire, e.g.
        ``"/api/users/Ada?verbose=1"``.
        """
        self._ensure_frozen()
        path, _, query = target.split("#", 1)[0].partition("?")
        return dispatch(
            method,
            path,
            router=self._router,
            query_string=query,
            headers=Headers.from_mapping(headers),
            body=body,
            fallback=self._fallback,
            debug=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the dispatch pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            fallback=self._fallback,
            debug=self.config.debug,
            max_content_length=self.config.max_content_length,
        )

    async def _handle_lifespan(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Answer ``lifespan.startup`` and ``lifespan.shutdown`` with the hooks.

        The route table is frozen before any hook runs. A failing hook is
        reported to the server as ``*.failed`` with the exception text.
        """
        self._ensure_frozen()
        hooks_by_event = {
            "lifespan.startup": self._startup_hooks,
            "lifespan.shutdown": self._shutdown_hooks,
        }

        while True:
            event = (await receive())["type"]
            hooks = hooks_by_event.get(event)
            if hooks is None:
                continue

            try:
                await _run_hooks(hooks)
            except Exception as exc:
                logger.exception("%s hook failed", event)
                await send({"type": f"{event}.failed", "message": str(exc)})
                return

            await send({"type": f"{event}.complete"})
            if event == "lifespan.shutdown":
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._router.freeze()
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app once it is serving: the route table is frozen. "
                "Register routes and hooks before the first request."
            )
            raise RuntimeError(msg)


async def _run_hooks(hooks: list[Callable[..., Any]]) -> None:
    for hook in hooks:
        result = hook()
        if inspect.isawaitable(result):
            await result
