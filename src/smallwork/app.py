"""Smallwork application class.

Mutable during setup (route registration, bindings, middleware).
Frozen when the first request is handled.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from smallwork._internal.types import Handler
from smallwork.config import AppConfig
from smallwork.container import Container
from smallwork.errors import NotFound
from smallwork.http.request import Request
from smallwork.http.response import Response
from smallwork.middleware.pipeline import Pipeline
from smallwork.middleware.protocol import Endpoint
from smallwork.routing.route import RouteMatch
from smallwork.routing.router import Router

if TYPE_CHECKING:
    from kida import Environment

logger = logging.getLogger("smallwork.app")


class App:
    """The smallwork application.

    Owns a Router, a Container, and a Pipeline, and drives one request
    through them::

        app = App()
        app.container.instance("greeting", "hello")

        @app.route("/users/{id}")
        def show(request: Request) -> Response:
            return Response.json({"id": request.param("id")})

        response = app.handle_request(Request.create("GET", "/users/42"))

    Request lifecycle:
        match -> (no route: 404) -> bind path params -> resolve middleware
        -> build endpoint -> run pipeline -> return the response.

    The App never writes to a transport; returning the Response is the
    whole of its contract.

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread compiles the route table and
        captures the global middleware, even when several serving
        threads receive their first request at once.
    """

    __slots__ = (
        "_container",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_middleware",
        "_middleware_list",
        "_pipeline",
        "_router",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        container: Container | None = None,
        router: Router | None = None,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._container = container if container is not None else Container()
        self._router = router if router is not None else Router()
        self._pipeline = Pipeline()
        self._middleware_list: list[Any] = []
        self._middleware: tuple[Any, ...] = ()
        self._kida_env: Environment | None = kida_env
        self._frozen = False
        self._freeze_lock = threading.Lock()

        # Let controllers autowire the kernel itself
        self._container.instance(App, self)
        self._container.instance(AppConfig, self.config)
        self._container.instance(Container, self._container)
        self._container.instance(Router, self._router)

    # -- Components --

    @property
    def router(self) -> Router:
        return self._router

    @property
    def container(self) -> Container:
        return self._container

    @property
    def pipeline(self) -> Pipeline:
        return self._pipeline

    # -- Route registration --

    def route(
        self,
        path: str,
        *,
        methods: Sequence[str] | None = None,
        middleware: Sequence[Any] = (),
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL path pattern. Use ``{param}`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
            middleware: Binding names, classes, or instances to run
                around this route, after the global middleware.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            for method in methods or ["GET"]:
                self._router.add(method, path, func, middleware)
            return func

        return decorator

    # -- Middleware --

    def add_middleware(self, middleware: Any) -> None:
        """Add a global middleware; it runs outside every route's own."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    # -- Views --

    def view(self, name: str, status: int = 200, **context: Any) -> Response:
        """Render a kida template into an HTML response."""
        from smallwork.templating.integration import create_environment, view_response

        if self._kida_env is None:
            self._kida_env = create_environment(self.config)
        return view_response(self._kida_env, name, context, status=status)

    # -- Request handling --

    def handle_request(self, request: Request) -> Response:
        """Process a single request through routing and the pipeline."""
        self._ensure_frozen()

        match = self._router.match(request.method, request.path)
        if match is None:
            return self._not_found(request)

        logger.debug("Matched %s %s -> %s", request.method, request.path, match.route.path)
        routed = replace(request, path_params=match.path_params)
        middleware = [self._resolve_middleware(mw) for mw in (*self._middleware, *match.middleware)]
        endpoint = self._build_endpoint(match)
        return self._pipeline.handle(routed, middleware, endpoint)

    __call__ = handle_request

    def _not_found(self, request: Request) -> Response:
        error = NotFound(f"No route matches {request.method} {request.path!r}")
        logger.debug("%s", error)
        body: dict[str, Any] = {"error": "Not Found"}
        if self.config.debug:
            body["detail"] = error.detail
        return Response.json(body, status=error.status)

    def _resolve_middleware(self, entry: Any) -> Any:
        if isinstance(entry, str):
            return self._container.resolve(entry)
        if isinstance(entry, type):
            return self._container.make(entry)
        return entry

    def _build_endpoint(self, match: RouteMatch) -> Endpoint:
        handler = match.handler
        if callable(handler):
            return handler
        target, method_name = handler
        controller = self._container.make(target)
        return getattr(controller, method_name)

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
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        self._router.compile()
        self._middleware = tuple(self._middleware_list)
        self._frozen = True
        logger.debug(
            "App frozen with %d routes and %d global middleware",
            len(self._router),
            len(self._middleware),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and middleware before handling the first request."
            )
            raise RuntimeError(msg)
