"""Application wiring for the post query side.

This package contains the dispatch infrastructure, the query handlers, the
read store interface, the middleware and the application builder that ties
them together.
"""

from .application import Application, ApplicationBuilder, HasLifecycle
from .middleware import (
    ContextPropagationMiddleware,
    Handler,
    LoggingMiddleware,
    Middleware,
)
from .queries import (
    FindAllPostsHandler,
    FindPostByIdHandler,
    FindPostsByAuthorHandler,
    FindPostsWithCommentsHandler,
    FindPostsWithLikesHandler,
    PostStoreQueryHandler,
    QueryDispatcher,
    QueryDispatchTable,
    QueryDispatchTableBuilder,
    QueryHandler,
    default_handlers,
)
from .stores import InMemoryPostReadStore, PostReadStore

__all__ = [
    # Application
    "Application",
    "ApplicationBuilder",
    "HasLifecycle",
    # Middleware
    "ContextPropagationMiddleware",
    "Handler",
    "LoggingMiddleware",
    "Middleware",
    # Queries
    "FindAllPostsHandler",
    "FindPostByIdHandler",
    "FindPostsByAuthorHandler",
    "FindPostsWithCommentsHandler",
    "FindPostsWithLikesHandler",
    "PostStoreQueryHandler",
    "QueryDispatcher",
    "QueryDispatchTable",
    "QueryDispatchTableBuilder",
    "QueryHandler",
    "default_handlers",
    # Stores
    "InMemoryPostReadStore",
    "PostReadStore",
]
