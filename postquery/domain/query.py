"""Query messages for the post read model.

Queries represent requests for data and are dispatched to query handlers.
Unlike commands, queries do not mutate state - they return data.

The set of queries is closed: every variant carries a ``kind`` tag from
:class:`QueryKind` and the dispatch table is validated against that enum.
"""

from enum import Enum
from typing import Annotated, ClassVar, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID


class QueryKind(str, Enum):
    """Tag identifying each query variant."""

    ALL_POSTS = "all_posts"
    BY_POST_ID = "by_post_id"
    BY_AUTHOR = "by_author"
    WITH_COMMENTS = "with_comments"
    WITH_LIKES = "with_likes"


class PostQuery(BaseModel):
    """Base class for all post queries.

    Queries are immutable values. Each subclass pins ``kind`` to a single
    :class:`QueryKind` member, which is what the dispatcher routes on.

    Attributes:
        kind: The variant tag.
        query_id: Unique identifier for this query instance.
        correlation_id: Optional correlation ID for distributed tracing.
        causation_id: Optional ID of what caused this query.

    Examples:
        >>> query = FindPostsByAuthor(author="alice")
        >>> query.kind
        <QueryKind.BY_AUTHOR: 'by_author'>
    """

    model_config = ConfigDict(frozen=True)

    KIND: ClassVar[QueryKind]

    kind: QueryKind
    query_id: ULID = Field(default_factory=ULID)
    correlation_id: ULID | None = None
    causation_id: ULID | None = None


class FindAllPosts(PostQuery):
    """Return every post in the read model."""

    KIND: ClassVar[QueryKind] = QueryKind.ALL_POSTS
    kind: Literal[QueryKind.ALL_POSTS] = QueryKind.ALL_POSTS


class FindPostById(PostQuery):
    """Return the post with the given identifier, if any."""

    KIND: ClassVar[QueryKind] = QueryKind.BY_POST_ID
    kind: Literal[QueryKind.BY_POST_ID] = QueryKind.BY_POST_ID
    post_id: UUID


class FindPostsByAuthor(PostQuery):
    """Return posts written by ``author`` (exact, case-sensitive match)."""

    KIND: ClassVar[QueryKind] = QueryKind.BY_AUTHOR
    kind: Literal[QueryKind.BY_AUTHOR] = QueryKind.BY_AUTHOR
    author: str


class FindPostsWithComments(PostQuery):
    """Return posts that have at least one comment."""

    KIND: ClassVar[QueryKind] = QueryKind.WITH_COMMENTS
    kind: Literal[QueryKind.WITH_COMMENTS] = QueryKind.WITH_COMMENTS


class FindPostsWithLikes(PostQuery):
    """Return posts whose like count is at least ``threshold``."""

    KIND: ClassVar[QueryKind] = QueryKind.WITH_LIKES
    kind: Literal[QueryKind.WITH_LIKES] = QueryKind.WITH_LIKES
    threshold: int


QUERY_TYPES: dict[QueryKind, type[PostQuery]] = {
    QueryKind.ALL_POSTS: FindAllPosts,
    QueryKind.BY_POST_ID: FindPostById,
    QueryKind.BY_AUTHOR: FindPostsByAuthor,
    QueryKind.WITH_COMMENTS: FindPostsWithComments,
    QueryKind.WITH_LIKES: FindPostsWithLikes,
}

# Discriminated union for parsing raw payloads at a transport boundary
PostQueryUnion = Annotated[
    FindAllPosts
    | FindPostById
    | FindPostsByAuthor
    | FindPostsWithComments
    | FindPostsWithLikes,
    Field(discriminator="kind"),
]
