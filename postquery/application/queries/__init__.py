"""Query dispatch and handling for the post read model.

This package provides:
- QueryHandler: Base class for handlers serving one query variant
- QueryDispatchTableBuilder: Collects registrations, rejects duplicates
  and checks that every variant is handled
- QueryDispatchTable: Immutable mapping from query kind to handler
- QueryDispatcher: Routes queries through middleware to their handler
"""

from .bus import QueryDispatcher, QueryDispatchTable, QueryDispatchTableBuilder
from .handlers import (
    FindAllPostsHandler,
    FindPostByIdHandler,
    FindPostsByAuthorHandler,
    FindPostsWithCommentsHandler,
    FindPostsWithLikesHandler,
    PostStoreQueryHandler,
    QueryHandler,
    default_handlers,
)

__all__ = [
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
]
