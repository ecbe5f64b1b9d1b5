"""Built-in middleware: CORS.

Answers preflight requests itself and adds CORS headers to every
response for an allowed origin.
"""

import logging
from dataclasses import dataclass

from smallwork.http.request import Request
from smallwork.http.response import Response
from smallwork.middleware.protocol import Next

logger = logging.getLogger("smallwork.middleware")


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS middleware configuration.

    Defaults allow any origin. Narrow what you need::

        CORSConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST"),
        )
    """

    allow_origins: tuple[str, ...] = ("*",)
    allow_methods: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
    allow_headers: tuple[str, ...] = ("Content-Type", "Authorization", "X-API-Key")
    max_age: int = 86400  # 1 day


class CORSMiddleware:
    """Cross-Origin Resource Sharing middleware.

    Handles:
    - Preflight ``OPTIONS`` requests (204, handler never runs)
    - Actual requests (handler runs, CORS headers added to its response)
    - Wildcard origins (``"*"``) or an explicit allow list

    Usually registered as global middleware so it wraps every route::

        app.add_middleware(CORSMiddleware(CORSConfig(
            allow_origins=("https://example.com",),
        )))

    Middleware only runs for matched routes, so a preflight is answered
    here only when an ``OPTIONS`` route exists for the path; otherwise the
    App returns its 404 first::

        app.router.options("/api/data", lambda request: Response.empty())
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()

    def _is_allowed_origin(self, origin: str | None) -> bool:
        if "*" in self.config.allow_origins:
            return True
        if origin is None:
            return False
        return origin in self.config.allow_origins

    def _add_cors_headers(self, response: Response, origin: str | None) -> Response:
        cfg = self.config
        if "*" in cfg.allow_origins:
            response = response.with_header("Access-Control-Allow-Origin", "*")
        else:
            response = response.with_header("Access-Control-Allow-Origin", origin or "")
            response = response.with_header("Vary", "Origin")
        return response.with_headers(
            {
                "Access-Control-Allow-Methods": ", ".join(cfg.allow_methods),
                "Access-Control-Allow-Headers": ", ".join(cfg.allow_headers),
                "Access-Control-Max-Age": str(cfg.max_age),
            }
        )

    def handle(self, request: Request, next: Next) -> Response:
        """Short-circuit preflight requests, decorate everything else."""
        origin = request.header("origin")

        if request.method == "OPTIONS":
            logger.debug("CORS preflight for %s from %s", request.path, origin)
            response = Response.empty(204)
        else:
            response = next(request)

        if not self._is_allowed_origin(origin):
            return response
        return self._add_cors_headers(response, origin)
