"""Smallwork exception hierarchy.

Shared across Router, Container, Pipeline, and App so every module
raises and catches the same types.
"""

from dataclasses import dataclass
from typing import Any


class SmallworkError(Exception):
    """Base for all smallwork-specific errors."""


class ConfigurationError(SmallworkError):
    """Raised when app configuration is invalid.

    Route patterns, handlers, and middleware entries are checked when
    they are registered, so these surface at boot rather than mid-request.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(SmallworkError):
    """An error that maps directly to an HTTP status code."""

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request method and path.

    The App recovers from this locally and answers with a 404 response.
    """

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class ContainerError(SmallworkError):
    """Base for dependency resolution failures."""


class UnknownBinding(ContainerError):  # noqa: N818
    """No factory and no instance are registered under *key*."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"No binding found for {_describe(key)!r}.")


class AutowireFailure(ContainerError):  # noqa: N818
    """A constructor parameter could not be resolved while autowiring."""

    def __init__(self, cls: type, parameter: str, annotation: Any = None) -> None:
        self.cls = cls
        self.parameter = parameter
        self.annotation = annotation
        if annotation is None:
            kind = "no resolvable type"
        else:
            kind = f"type {_describe(annotation)!r}"
        super().__init__(
            f"Cannot autowire parameter {parameter!r} ({kind}) of class {_describe(cls)!r}."
        )


def _describe(key: Any) -> str:
    if isinstance(key, type):
        return f"{key.__module__}.{key.__qualname__}"
    return str(key)
