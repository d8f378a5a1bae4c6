"""Middleware infrastructure for queries.

Middleware components wrap the query handlers to provide cross-cutting
concerns like logging or context propagation. They follow the chain of
responsibility pattern.
"""

from .base import Handler, Middleware
from .context import ContextPropagationMiddleware
from .logging import LoggingMiddleware

__all__ = [
    "ContextPropagationMiddleware",
    "Handler",
    "LoggingMiddleware",
    "Middleware",
]
