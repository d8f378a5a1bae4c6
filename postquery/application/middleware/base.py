"""Base middleware class for queries.

Middleware components wrap the query handlers to provide cross-cutting
concerns like logging or context propagation.
"""

import inspect
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any, ClassVar

from ...domain import PostQuery

if TYPE_CHECKING:
    from ...routing import MessageRouter

Handler = Callable[[PostQuery], Coroutine[Any, Any, Any]]


class Middleware:
    """Base class for middleware with annotation-based routing.

    Middleware can intercept every query or specific variants using the
    @intercepts decorator. The dispatcher routes each query to the method
    whose annotation matches the query's type (or one of its base classes).

    If no interceptor matches the query type, the middleware forwards to the
    next handler (pass-through behavior). Middleware observes queries; it
    must hand back the result of ``next`` unchanged.

    Examples:
        Intercept all queries:

        >>> class TimingMiddleware(Middleware):
        ...     @intercepts
        ...     async def time_query(self, query: PostQuery, next: Handler) -> Any:
        ...         started = time.monotonic()
        ...         try:
        ...             return await next(query)
        ...         finally:
        ...             metrics.observe(time.monotonic() - started)

        Intercept a specific variant:

        >>> class AuthorAuditMiddleware(Middleware):
        ...     @intercepts
        ...     async def audit(self, query: FindPostsByAuthor, next: Handler) -> Any:
        ...         audit_log.append(query.author)
        ...         return await next(query)
    """

    _query_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Set up routing when a subclass is defined."""
        super().__init_subclass__(**kwargs)
        from ...routing import setup_middleware_routing

        cls._query_router = setup_middleware_routing(cls)

    async def intercept(self, query: PostQuery, next: Handler) -> Any:
        """Route the query to an interceptor method or forward to next.

        Args:
            query: The query to intercept.
            next: The next handler in the middleware chain.

        Returns:
            The result from the interceptor or next handler.
        """
        result = self._query_router.route(self, query, next)

        if result is None:
            return await next(query)
        elif inspect.isawaitable(result):
            return await result
        else:
            return result
