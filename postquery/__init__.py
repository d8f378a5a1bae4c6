"""postquery - query side of a CQRS read model for posts.

This module provides the public API for serving typed read requests against
a denormalized post read model.
"""

from .application import (
    Application,
    ApplicationBuilder,
    InMemoryPostReadStore,
    PostReadStore,
    QueryDispatcher,
    QueryHandler,
)
from .config import PostQuerySettings
from .domain import (
    CommentReadEntity,
    FindAllPosts,
    FindPostById,
    FindPostsByAuthor,
    FindPostsWithComments,
    FindPostsWithLikes,
    PostQuery,
    PostReadEntity,
    QueryKind,
)
from .lookup import LookupResult, PostLookupService
from .routing import intercepts

__all__ = [
    # Application
    "Application",
    "ApplicationBuilder",
    "PostQuerySettings",
    "QueryDispatcher",
    "QueryHandler",
    # Stores
    "InMemoryPostReadStore",
    "PostReadStore",
    # Domain
    "CommentReadEntity",
    "FindAllPosts",
    "FindPostById",
    "FindPostsByAuthor",
    "FindPostsWithComments",
    "FindPostsWithLikes",
    "PostQuery",
    "PostReadEntity",
    "QueryKind",
    # Boundary
    "LookupResult",
    "PostLookupService",
    # Decorators
    "intercepts",
]
