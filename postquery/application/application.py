from types import TracebackType
from typing import Any, Protocol, runtime_checkable

from ..config import PostQuerySettings
from ..domain import PostQuery, PostReadEntity, QueryKind
from .middleware import ContextPropagationMiddleware, LoggingMiddleware, Middleware
from .queries import (
    QueryDispatcher,
    QueryDispatchTable,
    QueryDispatchTableBuilder,
    QueryHandler,
    default_handlers,
)
from .stores import PostReadStore


@runtime_checkable
class HasLifecycle(Protocol):
    async def on_startup(self) -> None:
        """Called when the application is started."""
        ...

    async def on_shutdown(self) -> None:
        """Called when the application is shutdown."""
        ...


class Application:
    """A wired query side: read store, dispatch table and dispatcher.

    Instances are created by :class:`ApplicationBuilder` and passed
    explicitly to whatever needs to serve queries; there is no global
    dispatcher.
    """

    def __init__(
        self,
        store: PostReadStore,
        dispatcher: QueryDispatcher,
        settings: PostQuerySettings,
        lifecycle: list[Any] | None = None,
    ):
        from ..lookup import PostLookupService

        self.store = store
        self.dispatcher = dispatcher
        self.settings = settings
        self.lookup = PostLookupService(dispatcher, timeout=settings.query_timeout_seconds)
        self._lifecycle = [d for d in (lifecycle or [store]) if isinstance(d, HasLifecycle)]

    @property
    def table(self) -> QueryDispatchTable:
        return self.dispatcher.table

    async def send(self, query: PostQuery, timeout: float | None = None) -> list[PostReadEntity]:
        """Send a query to the application.

        Args:
            query: The query to send.
            timeout: Optional deadline in seconds.

        Returns:
            The matching entities, possibly empty.
        """
        return await self.dispatcher.send(query, timeout=timeout)

    async def startup(self) -> None:
        """Call on_startup on every dependency implementing HasLifecycle.

        Dependencies are started in the order of their registration.
        """
        for dependency in self._lifecycle:
            await dependency.on_startup()

    async def shutdown(self) -> None:
        """Call on_shutdown on every dependency implementing HasLifecycle.

        Dependencies are shutdown in the reverse order of their registration.
        """
        for dependency in reversed(self._lifecycle):
            await dependency.on_shutdown()

    async def __aenter__(self) -> "Application":
        await self.startup()
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_value: BaseException | None,
        _traceback: TracebackType | None,
    ) -> None:
        await self.shutdown()


# The builder is the single place where the dispatch table is assembled.
# Handlers registered explicitly replace the default handler of their variant;
# registering the same variant twice is rejected by the table builder.
# Middleware registered explicitly runs inside the default context and
# logging middleware, in registration order.


class ApplicationBuilder:
    """Builder for creating Application instances.

    Examples:
        >>> app = (
        ...     ApplicationBuilder()
        ...     .use_read_store(PostReadStore.in_memory())
        ...     .use_settings(PostQuerySettings(log_level="DEBUG"))
        ...     .build()
        ... )
        >>> async with app:
        ...     posts = await app.send(FindPostsByAuthor(author="alice"))
    """

    def __init__(self) -> None:
        self.store: PostReadStore | None = None
        self.settings: PostQuerySettings | None = None
        self.handlers = QueryDispatchTableBuilder()
        self.middleware: list[Middleware] = []
        self.lifecycle: list[Any] = []

    def use_read_store(self, store: PostReadStore) -> "ApplicationBuilder":
        """Set the read store shared by the default handlers."""
        self.store = store
        return self

    def use_settings(self, settings: PostQuerySettings) -> "ApplicationBuilder":
        """Set the settings; defaults are read from the environment otherwise."""
        self.settings = settings
        return self

    def register_handler(
        self,
        variant: type[PostQuery] | QueryKind,
        handler: QueryHandler[Any],
    ) -> "ApplicationBuilder":
        """Register a handler for a query variant instead of the default one.

        Raises:
            DuplicateHandlerError: If the variant already has a handler.
        """
        self.handlers.register(variant, handler)
        return self

    def register_middleware(self, middleware: Middleware) -> "ApplicationBuilder":
        self.middleware.append(middleware)
        return self

    def register_lifecycle(self, dependency: HasLifecycle) -> "ApplicationBuilder":
        """Register a dependency to start and stop with the application."""
        self.lifecycle.append(dependency)
        return self

    def build(self) -> Application:
        """Build the application.

        Returns:
            The configured Application instance.

        Raises:
            ValueError: If no read store was configured.
            UnregisteredQueryError: If a query variant has no handler.
        """
        if self.store is None:
            raise ValueError("A read store must be configured with use_read_store()")
        settings = self.settings or PostQuerySettings()

        table_builder = QueryDispatchTableBuilder.from_handlers(self.handlers.registrations())
        missing = set(table_builder.missing())
        for variant, handler in default_handlers(self.store).items():
            if variant.KIND in missing:
                table_builder.register(variant, handler)
        table = table_builder.build()

        middleware: list[Middleware] = []
        if settings.correlation_tracking:
            middleware.append(ContextPropagationMiddleware())
        if settings.logging_enabled:
            middleware.append(LoggingMiddleware(settings.log_level))
        middleware.extend(self.middleware)

        return Application(
            store=self.store,
            dispatcher=QueryDispatcher(table, middleware),
            settings=settings,
            lifecycle=[self.store, *self.lifecycle],
        )
