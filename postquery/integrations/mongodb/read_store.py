"""MongoDB implementation of the post read store.

Document structure:
    {
        "_id": UUID("..."),
        "author": "alice",
        "message": "...",
        "date_posted": ISODate(...),
        "date_modified": ISODate(...) | null,
        "likes": 5,
        "comments": [{"comment_id": UUID(...), "username": ..., ...}]
    }
"""

from typing import Any
from uuid import UUID

from pydantic import ValidationError
from pymongo.errors import PyMongoError

from ...application.stores import PostReadStore
from ...domain import PostReadEntity, StorageUnavailableError
from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration

POST_ORDER = [("date_posted", IndexDirection.ASC), ("_id", IndexDirection.ASC)]


def to_document(post: PostReadEntity) -> dict[str, Any]:
    doc = post.model_dump(exclude={"post_id"})
    doc["_id"] = post.post_id
    doc["comments"] = list(doc["comments"])
    return doc


def from_document(doc: dict[str, Any]) -> PostReadEntity:
    data = dict(doc)
    data["post_id"] = data.pop("_id")
    return PostReadEntity.model_validate(data)


class MongoPostReadStore(PostReadStore):
    """Read store backed by a MongoDB collection.

    Every driver failure (unreachable server, timeouts, authentication,
    malformed responses) and every stored document that is not a valid post
    is raised as StorageUnavailableError with the cause chained for logging.
    Listings are ordered by ``date_posted``.

    Implements the HasLifecycle protocol: indexes are created on startup and
    the client is closed on shutdown. Reads never create indexes; without
    startup they run unindexed.

    Examples:
        >>> store = MongoPostReadStore(MongoConfiguration(database="blog"))
        >>> app = ApplicationBuilder().use_read_store(store).build()
        >>> async with app:
        ...     await app.send(FindPostsWithLikes(threshold=10))
    """

    def __init__(self, config: MongoConfiguration):
        self.config = config
        self._posts: IndexedCollection | None = None

    @property
    def posts(self) -> IndexedCollection:
        if self._posts is None:
            self._posts = IndexedCollection(
                self.config.posts,
                indexes=[
                    IndexSpec(keys=[("author", IndexDirection.ASC)]),
                    IndexSpec(keys=[("likes", IndexDirection.DESC)]),
                    IndexSpec(keys=POST_ORDER),
                ],
            )
        return self._posts

    async def _find(self, filter: dict[str, Any]) -> list[PostReadEntity]:
        try:
            return [from_document(doc) for doc in await self.posts.find(filter, sort=POST_ORDER)]
        except (PyMongoError, ValidationError) as err:
            raise StorageUnavailableError(f"Failed to read posts matching {filter}") from err

    async def get_all(self) -> list[PostReadEntity]:
        return await self._find({})

    async def get_by_id(self, post_id: UUID) -> PostReadEntity | None:
        try:
            doc = await self.posts.find_one({"_id": post_id})
            return from_document(doc) if doc is not None else None
        except (PyMongoError, ValidationError) as err:
            raise StorageUnavailableError(f"Failed to read post {post_id}") from err

    async def list_by_author(self, author: str) -> list[PostReadEntity]:
        return await self._find({"author": author})

    async def list_with_comments(self) -> list[PostReadEntity]:
        return await self._find({"comments.0": {"$exists": True}})

    async def list_with_likes(self, threshold: int) -> list[PostReadEntity]:
        return await self._find({"likes": {"$gte": threshold}})

    async def upsert(self, post: PostReadEntity) -> None:
        """Write a post, replacing any previous version.

        Used by the projector that keeps the read model current.
        """
        try:
            await self.posts.replace_one({"_id": post.post_id}, to_document(post), upsert=True)
        except PyMongoError as err:
            raise StorageUnavailableError(f"Failed to write post {post.post_id}") from err

    # HasLifecycle protocol implementation

    async def on_startup(self) -> None:
        try:
            await self.posts.ensure_indexes()
        except PyMongoError as err:
            raise StorageUnavailableError("Failed to create post indexes") from err

    async def on_shutdown(self) -> None:
        await self.config.close()
        self._posts = None
