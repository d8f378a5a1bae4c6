"""Context propagation middleware for correlation and causation tracking."""

from typing import Any

from ...context import ExecutionContext, clear_context, set_context
from ...domain import PostQuery
from ...routing import intercepts
from .base import Handler, Middleware


class ContextPropagationMiddleware(Middleware):
    """Middleware that sets the execution context from incoming queries.

    **Context Setup**:
    - If the query has a correlation_id: use it
    - Otherwise generate a new one (the query is an entry point)
    - If the query has a causation_id: use it
    - Otherwise use the correlation_id (self-referencing entry point)
    - Always record query.query_id

    **Context Cleanup**:
    The context is cleared after the query completes, even if it fails, so
    nothing leaks between operations.

    **Middleware Order**:
    Register this middleware before LoggingMiddleware so log records carry
    the correlation IDs.
    """

    @intercepts
    async def propagate_context(self, query: PostQuery, next: Handler) -> Any:
        """Set up execution context and pass the query to the next handler.

        Args:
            query: The query to process.
            next: The next handler in the middleware chain.

        Returns:
            The result from the query handler.
        """
        ctx = ExecutionContext.create(query.correlation_id)
        if query.causation_id is not None:
            ctx = ExecutionContext(
                correlation_id=ctx.correlation_id,
                causation_id=query.causation_id,
            )
        set_context(ctx.for_query(query.query_id))

        try:
            return await next(query)
        finally:
            clear_context()
