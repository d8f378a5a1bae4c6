import contextvars
from dataclasses import dataclass, replace

from ulid import ULID


@dataclass(frozen=True)
class ExecutionContext:
    """Immutable context for tracking a read request through the system.

    The context lives in a context variable, so every concurrently running
    query (each in its own asyncio task) sees only its own context.

    Attributes:
        correlation_id: Unique ID that traces an entire logical operation
            across services. Remains constant throughout the flow.
        causation_id: ID of what directly caused this operation.
        query_id: Identifier of the query currently being served.

    Examples:
        Create a new context at system entry point:

        >>> ctx = ExecutionContext.create()
        >>> ctx.correlation_id == ctx.causation_id
        True

        Attach the query being served:

        >>> ctx = ctx.for_query(query.query_id)
    """

    correlation_id: ULID | None = None
    causation_id: ULID | None = None
    query_id: ULID | None = None

    @classmethod
    def create(cls, correlation_id: ULID | None = None) -> "ExecutionContext":
        """Create a new context, typically at a system entry point.

        Args:
            correlation_id: Optional correlation ID. If not provided, a new
                ULID is generated. At entry points, causation_id is set to
                correlation_id (self-referencing).

        Returns:
            A new ExecutionContext instance.
        """
        if correlation_id is None:
            correlation_id = ULID()

        return cls(
            correlation_id=correlation_id,
            causation_id=correlation_id,
            query_id=None,
        )

    def for_query(self, query_id: ULID) -> "ExecutionContext":
        """Create a child context for serving a query.

        Args:
            query_id: The ID of the query being served.

        Returns:
            A new ExecutionContext with query_id set.
        """
        return replace(self, query_id=query_id)


_context: contextvars.ContextVar[ExecutionContext | None] = contextvars.ContextVar(
    "execution_context", default=None
)


def get_context() -> ExecutionContext:
    """Get the current execution context.

    If no context has been set, returns an empty ExecutionContext with all
    fields None.
    """
    ctx = _context.get()
    if ctx is None:
        return ExecutionContext()
    return ctx


def set_context(context: ExecutionContext) -> None:
    """Set the current execution context."""
    _context.set(context)


def clear_context() -> None:
    """Clear the current execution context."""
    _context.set(None)
