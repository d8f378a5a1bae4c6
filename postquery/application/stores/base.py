"""Read store interface consumed by the query handlers."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
from uuid import UUID

from ...domain import PostReadEntity

if TYPE_CHECKING:
    from .memory import InMemoryPostReadStore


class PostReadStore(ABC):
    """Abstract read-only access to post read entities.

    The store is shared by every handler and must be safe to call from many
    concurrent queries. Implementations raise
    :class:`~postquery.domain.StorageUnavailableError` when the backend
    cannot be reached or fails; "found nothing" is an empty result.

    Examples:
        >>> store = PostReadStore.in_memory()
        >>> store.add(post)
        >>> await store.list_by_author("alice")
        [PostReadEntity(...)]
    """

    @staticmethod
    def in_memory() -> "InMemoryPostReadStore":
        from .memory import InMemoryPostReadStore

        return InMemoryPostReadStore()

    @abstractmethod
    async def get_all(self) -> list[PostReadEntity]:
        """Return every post in store order."""
        ...

    @abstractmethod
    async def get_by_id(self, post_id: UUID) -> PostReadEntity | None:
        """Return the post with the given identifier, or None."""
        ...

    @abstractmethod
    async def list_by_author(self, author: str) -> list[PostReadEntity]:
        """Return posts whose author equals ``author`` exactly (case-sensitive)."""
        ...

    @abstractmethod
    async def list_with_comments(self) -> list[PostReadEntity]:
        """Return posts having at least one comment."""
        ...

    @abstractmethod
    async def list_with_likes(self, threshold: int) -> list[PostReadEntity]:
        """Return posts whose like count is greater than or equal to ``threshold``."""
        ...
