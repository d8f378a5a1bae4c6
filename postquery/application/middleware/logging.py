"""Logging middleware for query tracing."""

import logging
from typing import Any

from ...context import get_context
from ...domain import PostQuery
from ...routing import intercepts
from .base import Handler, Middleware

LOGGER = logging.getLogger(__name__)


class LoggingMiddleware(Middleware):
    """Middleware that logs every query with correlation.

    Logs each query received at the specified logging level with the query
    type and correlation/causation IDs for distributed tracing. Query
    parameters (author names, ids) are NOT logged.

    Attributes:
        level: The numeric logging level (e.g., logging.INFO,
            logging.DEBUG).

    Examples:
        >>> app = (ApplicationBuilder()
        ...     .use_read_store(store)
        ...     .register_middleware(LoggingMiddleware("DEBUG"))
        ...     .build())

    Note:
        For correlation tracking to work, ContextPropagationMiddleware
        should be registered before LoggingMiddleware in the
        middleware chain.
    """

    __slots__ = ("level",)

    def __init__(self, level: str):
        """Initialize the logging middleware.

        Args:
            level: String representation of the log level (e.g.,
                "INFO", "DEBUG"). Case-insensitive.
        """
        self.level = getattr(logging, level.upper())

    @intercepts
    async def log_query(self, query: PostQuery, next: Handler) -> Any:
        """Log the query type with correlation context.

        Args:
            query: The query to log and process.
            next: The next handler in the chain.

        Returns:
            The result from the query handler.
        """
        extra = {
            "query_type": type(query).__name__,
            "query_kind": query.kind.value,
            "query_id": str(query.query_id),
        }

        ctx = get_context()
        if ctx.correlation_id is not None:
            extra["correlation_id"] = str(ctx.correlation_id)
        if ctx.causation_id is not None:
            extra["causation_id"] = str(ctx.causation_id)

        LOGGER.log(self.level, "Received Query", extra=extra)
        return await next(query)
