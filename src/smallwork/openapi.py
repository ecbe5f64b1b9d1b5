"""OpenAPI 3.0 document generated from the registered routes.

Every route becomes one operation under its path pattern. Placeholders
such as ``{id}`` become required string path parameters; nothing is
inferred about bodies or response shapes.
"""

import json
from typing import Any

from smallwork.http.request import Request
from smallwork.http.response import Response
from smallwork.routing.route import Route
from smallwork.routing.router import Router

OPENAPI_VERSION = "3.0.0"


class OpenApiGenerator:
    """Builds an OpenAPI document from a router, usable as a route handler.

    Usage::

        docs = OpenApiGenerator(app.router, title="Users API", version="2.1.0")
        app.router.get("/openapi.json", docs)

    The document is rebuilt on each call, so routes registered after the
    generator was created are included.
    """

    __slots__ = ("_router", "description", "title", "version")

    def __init__(
        self,
        router: Router,
        title: str = "API",
        version: str = "1.0.0",
        description: str = "",
    ) -> None:
        self._router = router
        self.title = title
        self.version = version
        self.description = description

    def generate(self) -> dict[str, Any]:
        return {
            "openapi": OPENAPI_VERSION,
            "info": self._info(),
            "paths": self._paths(),
        }

    def to_json(self) -> str:
        """Pretty-printed JSON with slashes left unescaped."""
        return json.dumps(self.generate(), indent=4)

    def __call__(self, request: Request) -> Response:
        return Response.json(self.generate())

    def _info(self) -> dict[str, str]:
        info = {"title": self.title, "version": self.version}
        if self.description:
            info["description"] = self.description
        return info

    def _paths(self) -> dict[str, dict[str, Any]]:
        paths: dict[str, dict[str, Any]] = {}
        for route in self._router.routes:
            # First route wins a duplicate method, matching dispatch
            paths.setdefault(route.path, {}).setdefault(
                route.method.lower(), _operation(route)
            )
        return paths


def _operation(route: Route) -> dict[str, Any]:
    return {
        "parameters": [
            {
                "name": name,
                "in": "path",
                "required": True,
                "schema": {"type": "string"},
            }
            for name in route.param_names
        ],
        "responses": {"200": {"description": "Successful response"}},
    }
