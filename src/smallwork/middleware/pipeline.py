"""Onion composition of middleware around an endpoint."""

from collections.abc import Callable, Sequence
from typing import Any

from smallwork.errors import ConfigurationError
from smallwork.http.request import Request
from smallwork.http.response import Response
from smallwork.middleware.protocol import Endpoint, Next


class Pipeline:
    """Runs a request through middleware and an endpoint.

    The first middleware in the list is the outermost layer: its code
    before ``next`` runs first and its code after ``next`` runs last.
    Exceptions raised anywhere in the chain propagate to the caller.
    """

    __slots__ = ()

    def handle(
        self,
        request: Request,
        middleware: Sequence[Any],
        handler: Endpoint,
    ) -> Response:
        if not middleware:
            return handler(request)
        return self.build(middleware, handler)(request)

    def build(self, middleware: Sequence[Any], handler: Endpoint) -> Next:
        """Fold *middleware* around *handler* into a single callable."""
        chain: Next = handler
        for mw in reversed(middleware):
            chain = _link(_entry_point(mw), chain)
        return chain


def _entry_point(mw: Any) -> Callable[[Request, Next], Response]:
    handle = getattr(mw, "handle", None)
    if callable(handle):
        return handle
    if callable(mw):
        return mw
    msg = f"Middleware {mw!r} has no handle(request, next) method."
    raise ConfigurationError(msg)


def _link(handle: Callable[[Request, Next], Response], inner: Next) -> Next:
    def step(request: Request) -> Response:
        return handle(request, inner)

    return step
