import asyncio
from uuid import UUID

from ...domain import PostReadEntity, StorageUnavailableError
from .base import PostReadStore


class InMemoryPostReadStore(PostReadStore):
    """In-memory implementation of the post read store.

    Posts are kept in insertion order, which is the order every listing
    returns. Suitable for single-process applications and testing.

    Note:
        Populating the read model is the projector's job. ``add`` exists so
        tests and demos can seed the store without one.

    Args:
        latency: Seconds to wait on every read, simulating I/O.
    """

    def __init__(self, latency: float = 0.0):
        self.posts: dict[UUID, PostReadEntity] = {}
        self.latency = latency
        self._failure: Exception | None = None

    def add(self, *posts: PostReadEntity) -> "InMemoryPostReadStore":
        for post in posts:
            self.posts[post.post_id] = post
        return self

    def fail_with(self, error: Exception | None) -> None:
        """Make every subsequent read fail with ``error`` (None to recover)."""
        self._failure = error

    async def _read(self) -> list[PostReadEntity]:
        if self.latency:
            await asyncio.sleep(self.latency)
        if self._failure is not None:
            raise StorageUnavailableError("In-memory read store is unavailable") from self._failure
        return list(self.posts.values())

    async def get_all(self) -> list[PostReadEntity]:
        return await self._read()

    async def get_by_id(self, post_id: UUID) -> PostReadEntity | None:
        await self._read()
        return self.posts.get(post_id)

    async def list_by_author(self, author: str) -> list[PostReadEntity]:
        return [post for post in await self._read() if post.author == author]

    async def list_with_comments(self) -> list[PostReadEntity]:
        return [post for post in await self._read() if post.has_comments]

    async def list_with_likes(self, threshold: int) -> list[PostReadEntity]:
        return [post for post in await self._read() if post.likes >= threshold]
