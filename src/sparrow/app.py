"""Sparrow application class.

Mutable during setup (settings, middleware, routes, hooks).
Frozen at runtime when the first request or lifespan event arrives.
"""

import logging
import re
import threading
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from sparrow._internal.asgi import Receive, Scope, Send
from sparrow._internal.invoke import invoke
from sparrow._internal.types import Handler, Hook
from sparrow.config import AppConfig, FaultPolicy, is_setting, setting_field
from sparrow.http.request import Request
from sparrow.http.response import Response
from sparrow.middleware.static import static
from sparrow.routing.dispatcher import Dispatcher
from sparrow.routing.matcher import build
from sparrow.routing.route import ANY_METHOD, MethodFilter, Verb
from sparrow.routing.table import RouteTable
from sparrow.server.errors import handle_fault
from sparrow.templating.engines import TemplateRenderer

logger = logging.getLogger("sparrow.server")


class App:
    """The sparrow application.

    Middleware and routes go into one ordered table::

        app = App()
        app.set("views", "templates")

        app.use(RequestLogger())
        app.use("/public", static("."))

        @app.get("/ping")
        async def ping(request, response, next):
            await response.send("pong")

    ``use()`` entries match by path prefix and any method; ``get()``,
    ``post()`` and friends match the exact path and one method; ``all()``
    matches the exact path and any method. Each request walks the table
    in registration order.

    Thread safety:
        Setup is single-threaded (registration at import time). The
        freeze transition uses a Lock + double-check so exactly one
        worker compiles the app on first request.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_renderer",
        "_shutdown_hooks",
        "_startup_hooks",
        "_table",
        "config",
    )

    static = staticmethod(static)

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._table = RouteTable()
        self._startup_hooks: list[Hook] = []
        self._shutdown_hooks: list[Hook] = []
        self._frozen = False
        self._freeze_lock = threading.Lock()

        # Compiled state — set during _freeze()
        self._renderer: TemplateRenderer | None = None

    # -- Settings --

    def set(self, key: str, value: Any) -> None:
        """Change one setting. Last write wins.

        Keys are the conventional names (``"views"``, ``"view engine"``,
        ``"fault policy"``, ``"debug"``) or ``AppConfig`` field names.
        Unknown keys raise ``ConfigurationError``.
        """
        self._check_not_frozen()
        field = setting_field(key)
        if field == "fault_policy" and not isinstance(value, FaultPolicy):
            value = FaultPolicy(value)
        self.config = replace(self.config, **{field: value})

    def setting(self, key: str) -> Any:
        """Read one setting by its conventional or field name."""
        return getattr(self.config, setting_field(key))

    # -- Middleware --

    def use(self, path: Any = None, *handlers: Handler) -> Any:
        """Register prefix-matched middleware for every method.

        ::

            app.use(log_requests)                  # every path
            app.use("/api", authenticate, audit)   # paths starting with /api
            app.use(re.compile(r"/v\\d+"), versioned)

            @app.use("/admin")
            async def admin_only(request, response, next): ...

        A bare handler as first argument means "every path" and is
        returned, so ``@app.use`` also works as a plain decorator.
        """
        if callable(path) and not isinstance(path, re.Pattern):
            self._register(build(None, prefix=True), ANY_METHOD, (path, *handlers))
            return path
        matcher = build(path, prefix=True)
        if not handlers:
            return self._decorator(matcher, ANY_METHOD)
        self._register(matcher, ANY_METHOD, handlers)
        return None

    # -- Routes --

    def get(self, path: Any, *handlers: Handler) -> Any:
        """Register exact-path GET handlers, or read a setting.

        ``app.get("views")`` names a setting and returns its value;
        anything else registers a route (or returns a decorator when no
        handlers are given).
        """
        if not handlers and is_setting(path):
            return self.setting(path)
        return self._route(Verb("GET"), path, handlers)

    def post(self, path: Any, *handlers: Handler) -> Any:
        return self._route(Verb("POST"), path, handlers)

    def put(self, path: Any, *handlers: Handler) -> Any:
        return self._route(Verb("PUT"), path, handlers)

    def patch(self, path: Any, *handlers: Handler) -> Any:
        return self._route(Verb("PATCH"), path, handlers)

    def delete(self, path: Any, *handlers: Handler) -> Any:
        return self._route(Verb("DELETE"), path, handlers)

    def head(self, path: Any, *handlers: Handler) -> Any:
        return self._route(Verb("HEAD"), path, handlers)

    def options(self, path: Any, *handlers: Handler) -> Any:
        return self._route(Verb("OPTIONS"), path, handlers)

    def all(self, path: Any, *handlers: Handler) -> Any:
        """Register exact-path handlers for every method."""
        return self._route(ANY_METHOD, path, handlers)

    @property
    def routes(self) -> RouteTable:
        """The route table, in registration order."""
        return self._table

    # -- Lifecycle hooks --

    def on_startup(self, func: Hook) -> Hook:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly; decorates HTTP requests and
        runs them through the dispatcher. Other scope types are ignored.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        self._ensure_frozen()

        request = Request.from_asgi(scope, receive)
        response = Response(send, renderer=self._renderer)
        try:
            dispatcher = await self.dispatch(request, response)
        except Exception as exc:
            await handle_fault(
                exc,
                request,
                response,
                policy=self.config.fault_policy,
                debug=self.config.debug,
            )
            return

        if not response.finished:
            logger.debug(
                "%s %s: no response finished after %d handler(s)",
                request.method,
                request.path,
                dispatcher.invocations,
            )

    async def dispatch(self, request: Request, response: Response) -> Dispatcher:
        """Run the handler chain for an already decorated request.

        Returns the finished dispatcher so callers can inspect how far
        the chain got. Handler exceptions propagate.
        """
        self._ensure_frozen()
        dispatcher = Dispatcher(self._table, request, response)
        await dispatcher.run()
        return dispatcher

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request), then
        runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _route(self, method: MethodFilter, path: Any, handlers: tuple[Handler, ...]) -> Any:
        if callable(path) and not isinstance(path, re.Pattern):
            self._register(build(None, prefix=False), method, (path, *handlers))
            return path
        matcher = build(path, prefix=False)
        if not handlers:
            return self._decorator(matcher, method)
        self._register(matcher, method, handlers)
        return None

    def _decorator(self, matcher: Any, method: MethodFilter) -> Callable[[Handler], Handler]:
        def decorator(func: Handler) -> Handler:
            self._register(matcher, method, (func,))
            return func

        return decorator

    def _register(self, matcher: Any, method: MethodFilter, handlers: tuple[Handler, ...]) -> None:
        self._check_not_frozen()
        self._table.register(matcher, method, *handlers)

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        self._table.freeze()
        self._renderer = TemplateRenderer(self.config)
        self._frozen = True
        logger.debug("App frozen with %d route table entries", len(self._table))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register settings, middleware, and routes before the first request."
            )
            raise RuntimeError(msg)
