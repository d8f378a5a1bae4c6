"""Domain primitives for the post read model.

This module contains the building blocks shared by the whole query side:

- PostQuery and its variants: the closed set of read requests
- PostReadEntity / CommentReadEntity: denormalized read entities
- PostQueryError and subclasses: the failure taxonomy
"""

from .exceptions import (
    DuplicateHandlerError,
    ErrorKind,
    InvalidQueryError,
    PostQueryError,
    QueryCancelledError,
    StorageUnavailableError,
    UnregisteredQueryError,
)
from .post import CommentReadEntity, PostReadEntity
from .query import (
    QUERY_TYPES,
    FindAllPosts,
    FindPostById,
    FindPostsByAuthor,
    FindPostsWithComments,
    FindPostsWithLikes,
    PostQuery,
    PostQueryUnion,
    QueryKind,
)

__all__ = [
    # Queries
    "PostQuery",
    "PostQueryUnion",
    "QueryKind",
    "QUERY_TYPES",
    "FindAllPosts",
    "FindPostById",
    "FindPostsByAuthor",
    "FindPostsWithComments",
    "FindPostsWithLikes",
    # Entities
    "CommentReadEntity",
    "PostReadEntity",
    # Errors
    "DuplicateHandlerError",
    "ErrorKind",
    "InvalidQueryError",
    "PostQueryError",
    "QueryCancelledError",
    "StorageUnavailableError",
    "UnregisteredQueryError",
]
