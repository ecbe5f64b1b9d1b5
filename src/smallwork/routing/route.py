"""Route and RouteMatch frozen dataclasses."""

import re
from dataclasses import dataclass
from typing import Any

from smallwork._internal.types import Handler


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``path`` is the full pattern, group prefixes included. ``middleware``
    holds group middleware first, then the route's own entries.
    """

    method: str
    path: str
    handler: Handler
    middleware: tuple[Any, ...]
    regex: re.Pattern[str]
    param_names: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]

    @property
    def handler(self) -> Handler:
        return self.route.handler

    @property
    def middleware(self) -> tuple[Any, ...]:
        return self.route.middleware
