"""Middleware: Protocol-based, no inheritance required.

A middleware is any object with a ``handle(request, next)`` method.

Built-in middleware:
    CORSMiddleware -- Cross-Origin Resource Sharing
    RateLimitMiddleware -- Fixed-window per-client request limiting
"""

from smallwork.middleware.builtin import CORSConfig, CORSMiddleware
from smallwork.middleware.pipeline import Pipeline
from smallwork.middleware.protocol import Endpoint, Middleware, Next
from smallwork.middleware.rate_limit import RateLimitConfig, RateLimitMiddleware

__all__ = [
    "CORSConfig",
    "CORSMiddleware",
    "Endpoint",
    "Middleware",
    "Next",
    "Pipeline",
    "RateLimitConfig",
    "RateLimitMiddleware",
]
