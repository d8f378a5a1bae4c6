"""Query handlers serving the post read model.

Each handler serves exactly one query variant and translates the query's
parameters into read store lookups. Handlers hold no per-call state and never
cache results, so a single instance is shared by every concurrent query.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from ...domain import (
    FindAllPosts,
    FindPostById,
    FindPostsByAuthor,
    FindPostsWithComments,
    FindPostsWithLikes,
    InvalidQueryError,
    PostQuery,
    PostReadEntity,
)
from ..stores import PostReadStore

TQuery = TypeVar("TQuery", bound=PostQuery)


class QueryHandler(ABC, Generic[TQuery]):
    """Abstract base class for query handlers.

    The variant a handler serves is taken from the annotation of the
    ``query`` parameter of :meth:`handle`, which is how the dispatch table
    builder maps handlers to variants when no variant is given explicitly.

    Examples:
        >>> class FindDraftsHandler(QueryHandler[FindDrafts]):
        ...     async def handle(self, query: FindDrafts) -> list[PostReadEntity]:
        ...         return await self.store.list_drafts()
    """

    @abstractmethod
    async def handle(self, query: TQuery) -> list[PostReadEntity]:
        """Serve the query.

        Args:
            query: The query to serve.

        Returns:
            The matching entities; empty when nothing matches.

        Raises:
            InvalidQueryError: If a required parameter is absent.
            StorageUnavailableError: If the read store fails.
        """
        ...

    @staticmethod
    def require(query: PostQuery, *fields: str) -> None:
        """Ensure the named parameters are present on ``query``.

        Queries are validated on construction, but ``model_construct`` and
        hand-built payloads can bypass that.

        Raises:
            InvalidQueryError: If any field is missing or None.
        """
        missing = [field for field in fields if getattr(query, field, None) is None]
        if missing:
            raise InvalidQueryError(
                f"{type(query).__name__} is missing required parameter(s): {', '.join(missing)}"
            )


class PostStoreQueryHandler(QueryHandler[TQuery]):
    """Query handler reading from the shared post read store."""

    __slots__ = ("store",)

    def __init__(self, store: PostReadStore):
        self.store = store


class FindAllPostsHandler(PostStoreQueryHandler[FindAllPosts]):
    async def handle(self, query: FindAllPosts) -> list[PostReadEntity]:
        return list(await self.store.get_all())


class FindPostByIdHandler(PostStoreQueryHandler[FindPostById]):
    async def handle(self, query: FindPostById) -> list[PostReadEntity]:
        self.require(query, "post_id")
        post = await self.store.get_by_id(query.post_id)
        return [post] if post is not None else []


class FindPostsByAuthorHandler(PostStoreQueryHandler[FindPostsByAuthor]):
    """Matches the author exactly; "Alice" and "alice" are different authors."""

    async def handle(self, query: FindPostsByAuthor) -> list[PostReadEntity]:
        self.require(query, "author")
        return list(await self.store.list_by_author(query.author))


class FindPostsWithCommentsHandler(PostStoreQueryHandler[FindPostsWithComments]):
    async def handle(self, query: FindPostsWithComments) -> list[PostReadEntity]:
        return list(await self.store.list_with_comments())


class FindPostsWithLikesHandler(PostStoreQueryHandler[FindPostsWithLikes]):
    """Returns posts with ``likes >= threshold``."""

    async def handle(self, query: FindPostsWithLikes) -> list[PostReadEntity]:
        self.require(query, "threshold")
        return list(await self.store.list_with_likes(query.threshold))


def default_handlers(store: PostReadStore) -> dict[type[PostQuery], QueryHandler[Any]]:
    """Create the standard handler for every query variant.

    Args:
        store: The read store shared by all handlers.

    Returns:
        A mapping from query variant to its handler.
    """
    return {
        FindAllPosts: FindAllPostsHandler(store),
        FindPostById: FindPostByIdHandler(store),
        FindPostsByAuthor: FindPostsByAuthorHandler(store),
        FindPostsWithComments: FindPostsWithCommentsHandler(store),
        FindPostsWithLikes: FindPostsWithLikesHandler(store),
    }
