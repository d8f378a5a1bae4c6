"""Read-oriented wrapper around a MongoDB collection.

Indexes are declared up front and created once, by an explicit
:meth:`IndexedCollection.ensure_indexes` call or before the first write. Reads
never change the collection.
"""

import asyncio
from enum import IntEnum
from typing import Any

from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING, IndexModel
from pymongo.asynchronous.collection import AsyncCollection


class IndexDirection(IntEnum):
    """Sort direction for MongoDB index fields."""

    ASC = ASCENDING
    DESC = DESCENDING


class IndexSpec(BaseModel):
    """Declaration of a MongoDB index.

    Example:
        >>> IndexSpec(keys=[("author", IndexDirection.ASC)])
        >>> IndexSpec(keys=[("slug", IndexDirection.ASC)], unique=True, name="slug_unique")
    """

    keys: list[tuple[str, IndexDirection]]
    unique: bool = False
    name: str | None = None

    def to_model(self) -> IndexModel:
        kwargs: dict[str, Any] = {}
        if self.unique:
            kwargs["unique"] = True
        if self.name is not None:
            kwargs["name"] = self.name
        return IndexModel(self.keys, **kwargs)


class IndexedCollection:
    """A MongoDB collection wrapper that owns its indexes.

    Example:
        >>> collection = IndexedCollection(
        ...     config.posts,
        ...     indexes=[IndexSpec(keys=[("author", IndexDirection.ASC)])],
        ... )
        >>> docs = await collection.find({"author": "alice"})
    """

    def __init__(
        self,
        collection: AsyncCollection[dict[str, Any]],
        indexes: list[IndexSpec] | None = None,
    ) -> None:
        self._collection = collection
        self._indexes = indexes or []
        self._indexes_created = False
        self._lock = asyncio.Lock()

    async def ensure_indexes(self) -> None:
        """Create all declared indexes in one round trip, at most once."""
        if self._indexes_created:
            return

        async with self._lock:
            if self._indexes_created:
                return
            if self._indexes:
                await self._collection.create_indexes([spec.to_model() for spec in self._indexes])
            self._indexes_created = True

    async def find_one(self, filter: dict[str, Any]) -> dict[str, Any] | None:
        result: dict[str, Any] | None = await self._collection.find_one(filter)
        return result

    async def find(
        self,
        filter: dict[str, Any],
        sort: list[tuple[str, int]] | None = None,
    ) -> list[dict[str, Any]]:
        """Read every document matching the filter.

        Args:
            filter: MongoDB query filter.
            sort: Optional list of (field, direction) tuples.

        Returns:
            The matching documents, in ``sort`` order when given.
        """
        cursor = self._collection.find(filter)
        if sort:
            cursor = cursor.sort(sort)
        docs: list[dict[str, Any]] = await cursor.to_list()
        return docs

    async def replace_one(
        self,
        filter: dict[str, Any],
        replacement: dict[str, Any],
        upsert: bool = False,
    ) -> None:
        await self.ensure_indexes()
        await self._collection.replace_one(filter, replacement, upsert=upsert)
