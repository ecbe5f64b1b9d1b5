"""Shared type aliases used across smallwork modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: a callable taking the request, or a (class, method name) pair
Handler: TypeAlias = Callable[..., Any] | tuple[type | str, str]

# Container factory: receives the container, returns the service
Factory: TypeAlias = Callable[..., Any]
