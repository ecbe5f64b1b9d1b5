"""Smallwork: a minimal HTTP application kernel.

Turns a Request into a Response through four pieces: a first-match
router, a dependency container with constructor autowiring, an onion
middleware pipeline, and immutable-leaning request/response values.

Basic usage::

    from smallwork import App, Request, Response

    app = App()

    @app.route("/users/{id}")
    def show(request: Request) -> Response:
        return Response.json({"id": request.param("id")})

    response = app.handle_request(Request.create("GET", "/users/42"))
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "AutowireFailure",
    "CORSConfig",
    "CORSMiddleware",
    "ConfigurationError",
    "Container",
    "HTTPError",
    "HealthCheck",
    "Middleware",
    "Next",
    "NotFound",
    "OpenApiGenerator",
    "Pipeline",
    "RateLimitConfig",
    "RateLimitMiddleware",
    "Request",
    "Response",
    "Router",
    "SmallworkError",
    "UnknownBinding",
    "ValidationResult",
    "validate",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import smallwork`` fast while providing a clean top-level API.
    """
    if name == "App":
        from smallwork.app import App

        return App

    if name == "AppConfig":
        from smallwork.config import AppConfig

        return AppConfig

    if name == "Container":
        from smallwork.container import Container

        return Container

    if name == "HealthCheck":
        from smallwork.health import HealthCheck

        return HealthCheck

    if name == "OpenApiGenerator":
        from smallwork.openapi import OpenApiGenerator

        return OpenApiGenerator

    if name == "Request":
        from smallwork.http.request import Request

        return Request

    if name == "Response":
        from smallwork.http.response import Response

        return Response

    if name == "Router":
        from smallwork.routing.router import Router

        return Router

    if name in (
        "CORSConfig",
        "CORSMiddleware",
        "Middleware",
        "Next",
        "Pipeline",
        "RateLimitConfig",
        "RateLimitMiddleware",
    ):
        from smallwork import middleware as _mw

        return getattr(_mw, name)

    if name in (
        "AutowireFailure",
        "ConfigurationError",
        "HTTPError",
        "NotFound",
        "SmallworkError",
        "UnknownBinding",
    ):
        from smallwork import errors as _errors

        return getattr(_errors, name)

    if name in ("ValidationResult", "validate"):
        from smallwork import validation as _validation

        return getattr(_validation, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
