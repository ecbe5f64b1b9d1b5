"""Middleware protocol and Next type alias.

A middleware is any object with a ``handle`` method matching::

    def handle(self, request: Request, next: Next) -> Response: ...

No base class required. The pipeline checks the shape, not the lineage.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from smallwork.http.request import Request
from smallwork.http.response import Response

# The rest of the chain, as seen from inside a middleware
type Next = Callable[[Request], Response]

# The innermost step: the route handler bound to its controller if needed
type Endpoint = Callable[[Request], Response]


@runtime_checkable
class Middleware(Protocol):
    """Protocol for smallwork middleware.

    Either call ``next`` and optionally transform its response::

        class Timing:
            def handle(self, request: Request, next: Next) -> Response:
                start = time.monotonic()
                response = next(request)
                elapsed = time.monotonic() - start
                return response.with_header("X-Time", f"{elapsed:.3f}")

    or return a response of your own without calling ``next`` to stop
    the request before it reaches inner middleware and the handler.
    """

    def handle(self, request: Request, next: Next) -> Response: ...
