"""Health check endpoint.

Aggregates named checks into one JSON document. Each check is a
zero-argument callable returning ``{"status": ..., "message": ...}``;
any status other than ``"ok"`` marks the whole report as degraded.
"""

import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from smallwork.http.request import Request
from smallwork.http.response import Response

type Check = Callable[[], dict[str, Any]]


class HealthCheck:
    """A collection of named checks, usable directly as a route handler.

    Usage::

        health = HealthCheck()
        health.add_check("database", lambda: {"status": "ok", "message": "connected"})
        app.router.get("/health", health)
    """

    __slots__ = ("_checks",)

    def __init__(self) -> None:
        self._checks: dict[str, Check] = {}

    def add_check(self, name: str, check: Check) -> None:
        """Register *check* under *name*, replacing any previous one."""
        self._checks[name] = check

    def run(self) -> dict[str, Any]:
        """Run every check in registration order and time each one."""
        results: dict[str, dict[str, Any]] = {}
        all_ok = True

        for name, check in self._checks.items():
            start = time.perf_counter()
            result = check()
            elapsed_ms = (time.perf_counter() - start) * 1000

            status = result.get("status")
            if status != "ok":
                all_ok = False
            results[name] = {
                "status": status,
                "message": result.get("message", ""),
                "latency_ms": elapsed_ms,
            }

        return {
            "status": "healthy" if all_ok else "degraded",
            "checks": results,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    def to_response(self) -> Response:
        """200 when healthy, 503 when any check is degraded."""
        data = self.run()
        status = 200 if data["status"] == "healthy" else 503
        return Response.json(data, status=status)

    def __call__(self, request: Request) -> Response:
        return self.to_response()
