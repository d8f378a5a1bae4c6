"""Query dispatch table and dispatcher."""

import asyncio
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, cast

from ...domain import (
    QUERY_TYPES,
    DuplicateHandlerError,
    PostQuery,
    PostReadEntity,
    QueryCancelledError,
    QueryKind,
    UnregisteredQueryError,
)
from ...routing import extract_handler_type
from ..middleware import Handler, Middleware
from .handlers import QueryHandler


def _as_kind(variant: type[PostQuery] | QueryKind) -> QueryKind:
    if isinstance(variant, QueryKind):
        return variant
    kind = getattr(variant, "KIND", None)
    if not isinstance(kind, QueryKind) or QUERY_TYPES.get(kind) is not variant:
        raise TypeError(f"{variant!r} is not a registered query variant")
    return kind


class QueryDispatchTableBuilder:
    """Collects handler registrations and builds an immutable dispatch table.

    Registration fails fast: a second handler for a variant that already has
    one raises immediately instead of overwriting it.

    Examples:
        >>> table = (
        ...     QueryDispatchTableBuilder()
        ...     .register(FindAllPosts, FindAllPostsHandler(store))
        ...     .register_handler(FindPostByIdHandler(store))
        ...     ...
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._handlers: dict[QueryKind, QueryHandler[Any]] = {}

    @staticmethod
    def from_handlers(
        handlers: Mapping[type[PostQuery] | QueryKind, QueryHandler[Any]],
    ) -> "QueryDispatchTableBuilder":
        builder = QueryDispatchTableBuilder()
        for variant, handler in handlers.items():
            builder.register(variant, handler)
        return builder

    def register(
        self,
        variant: type[PostQuery] | QueryKind,
        handler: QueryHandler[Any],
    ) -> "QueryDispatchTableBuilder":
        """Associate a query variant with its handler.

        Args:
            variant: The query class or its kind tag.
            handler: The handler serving that variant.

        Returns:
            The builder.

        Raises:
            DuplicateHandlerError: If the variant already has a handler.
            TypeError: If ``variant`` is not one of the declared variants.
        """
        kind = _as_kind(variant)
        if kind in self._handlers:
            raise DuplicateHandlerError(
                f"{QUERY_TYPES[kind].__name__} is already handled by "
                f"{type(self._handlers[kind]).__name__}; refusing "
                f"{type(handler).__name__}"
            )
        self._handlers[kind] = handler
        return self

    def register_handler(self, handler: QueryHandler[Any]) -> "QueryDispatchTableBuilder":
        """Register a handler for the variant its ``handle`` method is annotated with."""
        variant = extract_handler_type(type(handler).handle, param_index=1)
        return self.register(cast("type[PostQuery]", variant), handler)

    def registrations(self) -> dict[QueryKind, QueryHandler[Any]]:
        return dict(self._handlers)

    def missing(self) -> list[QueryKind]:
        return [kind for kind in QueryKind if kind not in self._handlers]

    def build(self, require_complete: bool = True) -> "QueryDispatchTable":
        """Build the immutable dispatch table.

        Args:
            require_complete: If True, every declared query variant must have
                a handler.

        Returns:
            The dispatch table.

        Raises:
            UnregisteredQueryError: If a variant has no handler.
        """
        missing = self.missing()
        if require_complete and missing:
            names = ", ".join(QUERY_TYPES[kind].__name__ for kind in missing)
            raise UnregisteredQueryError(f"No handler registered for: {names}")
        return QueryDispatchTable(self._handlers)


class QueryDispatchTable(Mapping[QueryKind, QueryHandler[Any]]):
    """Read-only mapping from query kind to handler.

    The table copies its input and exposes no mutators, so it can be shared
    between concurrent queries without locking.
    """

    __slots__ = ("_handlers",)

    def __init__(self, handlers: Mapping[QueryKind, QueryHandler[Any]]):
        self._handlers = MappingProxyType(dict(handlers))

    def __getitem__(self, kind: QueryKind) -> QueryHandler[Any]:
        return self._handlers[kind]

    def __iter__(self) -> Iterator[QueryKind]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def resolve(self, query: PostQuery) -> QueryHandler[Any]:
        """Get the handler for a query.

        Raises:
            UnregisteredQueryError: If no handler serves the query's kind.
        """
        try:
            return self._handlers[query.kind]
        except KeyError:
            raise UnregisteredQueryError(
                f"No handler registered for {type(query).__name__} ({query.kind.value})"
            ) from None


class QueryDispatcher:
    """Routes queries through middleware to their handler.

    The dispatcher returns the handler's result unchanged and lets handler
    failures propagate as they are: no retries, no fallback result.

    Args:
        table: The dispatch table.
        middleware: Middleware to apply, outermost first.
    """

    def __init__(
        self,
        table: QueryDispatchTable,
        middleware: list[Middleware] | None = None,
    ):
        self.table = table
        self.middleware = list(middleware or [])

        chain: Handler = self._handle
        for mw in reversed(self.middleware):

            def make_chain(m: Middleware, n: Handler) -> Handler:
                return lambda query: m.intercept(query, n)

            chain = make_chain(mw, chain)
        self.chain = chain

    async def _handle(self, query: PostQuery) -> list[PostReadEntity]:
        handler = self.table.resolve(query)
        return await handler.handle(query)

    async def send(
        self,
        query: PostQuery,
        timeout: float | None = None,
    ) -> list[PostReadEntity]:
        """Dispatch a query and return its result.

        Args:
            query: The query to dispatch.
            timeout: Optional deadline in seconds. When it expires the
                in-flight read is cancelled.

        Returns:
            The entities returned by the handler, possibly empty.

        Raises:
            UnregisteredQueryError: If no handler serves the query's kind.
            QueryCancelledError: If the deadline expired.
            PostQueryError: Any failure raised by the handler.
        """
        # Resolve up front so a missing handler is never mistaken for a timeout
        self.table.resolve(query)
        if timeout is None:
            return cast("list[PostReadEntity]", await self.chain(query))
        # Only the wait timing out counts as a deadline; a TimeoutError raised
        # by the handler itself propagates unchanged.
        task = asyncio.ensure_future(self.chain(query))
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise
        if task not in done:
            task.cancel()
            await asyncio.wait({task})
            if not task.cancelled():
                task.exception()  # retrieved, superseded by the deadline
            raise QueryCancelledError(f"{type(query).__name__} exceeded its {timeout}s deadline")
        return cast("list[PostReadEntity]", task.result())
