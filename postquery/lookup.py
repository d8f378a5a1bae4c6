"""Post lookup boundary.

A transport-agnostic facade over the dispatcher exposing one operation per
lookup endpoint. Each operation builds a query, sends it and maps the outcome
to a status plus response body:

- matches found: 200 with the posts and a count-aware message
- nothing found: 204 with no body
- any failure: 500 with a fixed message that never leaks failure detail

Failures are logged in full here and nowhere else.
"""

import logging
from collections.abc import Callable
from http import HTTPStatus
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ValidationError

from .application.queries import QueryDispatcher
from .domain import (
    FindAllPosts,
    FindPostById,
    FindPostsByAuthor,
    FindPostsWithComments,
    FindPostsWithLikes,
    InvalidQueryError,
    PostQuery,
    PostReadEntity,
)

LOGGER = logging.getLogger(__name__)

ALL_POSTS_ERROR = "Error while processing request to retrieve all posts!"
BY_ID_ERROR = "Error while processing request to retrieve a post by id!"
BY_AUTHOR_ERROR = "Error while processing request to retrieve a post by author!"
WITH_COMMENTS_ERROR = "Error while processing request to retrieve posts with comments!"
WITH_LIKES_ERROR = "Error while processing request to retrieve posts with likes!"


class BaseResponse(BaseModel):
    message: str


class PostLookupResponse(BaseResponse):
    posts: list[PostReadEntity]


class LookupResult(BaseModel):
    """Outcome of a lookup operation.

    Attributes:
        status: The status to present (200, 204 or 500).
        body: The response body; None for 204.
    """

    status: HTTPStatus
    body: PostLookupResponse | BaseResponse | None = None


def count_message(count: int) -> str:
    return f"Successfully returned {count} post{'s' if count > 1 else ''}!"


def build_query(query_type: type[PostQuery], **params: Any) -> PostQuery:
    """Build a query from raw request parameters.

    Raises:
        InvalidQueryError: If the parameters fail validation.
    """
    try:
        return query_type(**params)
    except ValidationError as err:
        raise InvalidQueryError(f"Invalid {query_type.__name__}: {err}") from err


class PostLookupService:
    """Lookup operations over the post read model.

    Examples:
        >>> lookup = PostLookupService(app.dispatcher)
        >>> result = await lookup.get_posts_by_author("alice")
        >>> result.status
        <HTTPStatus.OK: 200>
        >>> result.body.message
        'Successfully returned 1 post!'
    """

    def __init__(self, dispatcher: QueryDispatcher, timeout: float | None = None):
        self.dispatcher = dispatcher
        self.timeout = timeout

    async def get_all_posts(self) -> LookupResult:
        return await self._lookup(lambda: FindAllPosts(), ALL_POSTS_ERROR, count_message)

    async def get_by_post_id(self, post_id: UUID | str) -> LookupResult:
        return await self._lookup(
            lambda: build_query(FindPostById, post_id=post_id),
            BY_ID_ERROR,
            lambda _: "Successfully returned post!",
        )

    async def get_posts_by_author(self, author: str) -> LookupResult:
        return await self._lookup(
            lambda: build_query(FindPostsByAuthor, author=author),
            BY_AUTHOR_ERROR,
            count_message,
        )

    async def get_posts_with_comments(self) -> LookupResult:
        return await self._lookup(
            lambda: FindPostsWithComments(), WITH_COMMENTS_ERROR, count_message
        )

    async def get_posts_with_likes(self, number_of_likes: int | str) -> LookupResult:
        return await self._lookup(
            lambda: build_query(FindPostsWithLikes, threshold=number_of_likes),
            WITH_LIKES_ERROR,
            count_message,
        )

    async def _lookup(
        self,
        make_query: Callable[[], PostQuery],
        safe_error_message: str,
        success_message: Callable[[int], str],
    ) -> LookupResult:
        try:
            posts = await self.dispatcher.send(make_query(), timeout=self.timeout)
        except Exception as e:
            LOGGER.exception(
                safe_error_message,
                extra={"error_kind": getattr(getattr(e, "kind", None), "value", "unexpected")},
            )
            return LookupResult(
                status=HTTPStatus.INTERNAL_SERVER_ERROR,
                body=BaseResponse(message=safe_error_message),
            )

        if not posts:
            return LookupResult(status=HTTPStatus.NO_CONTENT)

        return LookupResult(
            status=HTTPStatus.OK,
            body=PostLookupResponse(posts=posts, message=success_message(len(posts))),
        )
