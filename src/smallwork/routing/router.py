"""Router with ordered, first-match-wins pattern matching.

Routes are kept in registration order and scanned linearly. There is no
specificity ranking: when two patterns match the same path, the route
registered first wins.
"""

import logging
import re
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from smallwork._internal.types import Handler
from smallwork.errors import ConfigurationError
from smallwork.routing.route import Route, RouteMatch

logger = logging.getLogger("smallwork.routing")

_PLACEHOLDER = re.compile(r"\{([^{}]*)\}")
_PARAM_NAME = re.compile(r"[A-Za-z_]\w*")
_FLASK_PARAM = re.compile(r"<[^<>/]+>")

# Any run of non-slash characters
_SEGMENT = "[^/]+"


def compile_pattern(path: str) -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Compile a route path into an anchored regex.

    Each ``{name}`` placeholder becomes a named group matching one path
    segment; everything else matches literally::

        "/users/{id}" -> \\A/users/(?P<id>[^/]+)\\Z

    Raises ``ConfigurationError`` for malformed paths.
    """
    if not path.startswith("/"):
        msg = f"Route path {path!r} must start with '/'."
        raise ConfigurationError(msg)
    if _FLASK_PARAM.search(path):
        msg = (
            f"Route path {path!r} uses <param> syntax. "
            "Use {param} placeholders instead, e.g. /users/{id}."
        )
        raise ConfigurationError(msg)

    parts: list[str] = []
    names: list[str] = []
    position = 0
    for placeholder in _PLACEHOLDER.finditer(path):
        parts.append(_literal(path, path[position : placeholder.start()]))
        name = placeholder.group(1)
        if not _PARAM_NAME.fullmatch(name):
            msg = f"Invalid placeholder {{{name}}} in route path {path!r}."
            raise ConfigurationError(msg)
        if name in names:
            msg = f"Duplicate placeholder {{{name}}} in route path {path!r}."
            raise ConfigurationError(msg)
        names.append(name)
        parts.append(f"(?P<{name}>{_SEGMENT})")
        position = placeholder.end()
    parts.append(_literal(path, path[position:]))

    return re.compile(r"\A" + "".join(parts) + r"\Z"), tuple(names)


def _literal(path: str, text: str) -> str:
    if "{" in text or "}" in text:
        msg = f"Unbalanced brace in route path {path!r}."
        raise ConfigurationError(msg)
    return re.escape(text)


def _check_handler(path: str, handler: Any) -> None:
    if callable(handler):
        return
    if (
        isinstance(handler, tuple)
        and len(handler) == 2
        and isinstance(handler[0], (type, str))
        and isinstance(handler[1], str)
    ):
        target, method_name = handler
        if isinstance(target, type) and not callable(getattr(target, method_name, None)):
            msg = f"Handler for {path!r}: {target.__qualname__} has no method {method_name!r}."
            raise ConfigurationError(msg)
        return
    msg = (
        f"Handler for {path!r} must be a callable or a (class, method_name) pair, "
        f"got {handler!r}."
    )
    raise ConfigurationError(msg)


def _check_middleware(path: str, entries: Sequence[Any]) -> None:
    for entry in entries:
        if isinstance(entry, (str, type)) or hasattr(entry, "handle") or callable(entry):
            continue
        msg = (
            f"Middleware {entry!r} on {path!r} must be a binding name, a class, "
            "or an object with a handle(request, next) method."
        )
        raise ConfigurationError(msg)


class Router:
    """Ordered route table.

    Usage::

        router = Router()
        router.get("/users/{id}", show_user)

        def admin(r: Router) -> None:
            r.get("/stats", stats, middleware=["auth"])

        router.group("/admin", admin, middleware=["session"])
        router.compile()

        match = router.match("GET", "/users/42")
        match.path_params  # {"id": "42"}
    """

    __slots__ = ("_compiled", "_group_middleware", "_group_prefix", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._group_prefix = ""
        self._group_middleware: tuple[Any, ...] = ()
        self._compiled = False

    # -- Registration --

    def add(
        self,
        method: str,
        path: str,
        handler: Handler,
        middleware: Sequence[Any] = (),
    ) -> Route:
        """Register a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        full_path = self._group_prefix + path
        regex, names = compile_pattern(full_path)
        _check_handler(full_path, handler)
        _check_middleware(full_path, middleware)

        route = Route(
            method=method.upper(),
            path=full_path,
            handler=handler,
            middleware=(*self._group_middleware, *middleware),
            regex=regex,
            param_names=names,
        )
        self._routes.append(route)
        logger.debug("Registered route %s %s", route.method, route.path)
        return route

    def get(self, path: str, handler: Handler, middleware: Sequence[Any] = ()) -> Route:
        return self.add("GET", path, handler, middleware)

    def post(self, path: str, handler: Handler, middleware: Sequence[Any] = ()) -> Route:
        return self.add("POST", path, handler, middleware)

    def put(self, path: str, handler: Handler, middleware: Sequence[Any] = ()) -> Route:
        return self.add("PUT", path, handler, middleware)

    def patch(self, path: str, handler: Handler, middleware: Sequence[Any] = ()) -> Route:
        return self.add("PATCH", path, handler, middleware)

    def delete(self, path: str, handler: Handler, middleware: Sequence[Any] = ()) -> Route:
        return self.add("DELETE", path, handler, middleware)

    def options(self, path: str, handler: Handler, middleware: Sequence[Any] = ()) -> Route:
        return self.add("OPTIONS", path, handler, middleware)

    def group(
        self,
        prefix: str,
        callback: Callable[["Router"], Any],
        middleware: Sequence[Any] = (),
    ) -> None:
        """Register routes under a shared prefix and middleware.

        Groups nest: prefixes concatenate outer to inner and middleware
        accumulates outer first. The previous prefix and middleware are
        restored when *callback* returns or raises.
        """
        _check_middleware(prefix, middleware)
        with self._scope(prefix, middleware):
            callback(self)

    @contextmanager
    def _scope(self, prefix: str, middleware: Sequence[Any]) -> Iterator[None]:
        previous_prefix = self._group_prefix
        previous_middleware = self._group_middleware
        self._group_prefix = previous_prefix + prefix
        self._group_middleware = (*previous_middleware, *middleware)
        try:
            yield
        finally:
            self._group_prefix = previous_prefix
            self._group_middleware = previous_middleware

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    # -- Lookup --

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes, in registration order."""
        return tuple(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route matching *method* and *path*.

        Path parameters are returned as strings, unconverted. Returns
        ``None`` when nothing matches; callers answer that with a 404.
        """
        method = method.upper()
        for route in self._routes:
            if route.method != method:
                continue
            found = route.regex.match(path)
            if found is not None:
                return RouteMatch(route=route, path_params=found.groupdict())
        return None
