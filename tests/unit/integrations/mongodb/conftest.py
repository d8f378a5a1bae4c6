"""Fakes for the pymongo async collection API."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]], error: Exception | None = None):
        self.docs = docs
        self.error = error
        self.sort_spec: list[tuple[str, int]] | None = None

    def sort(self, spec: list[tuple[str, int]]) -> "FakeCursor":
        self.sort_spec = spec
        return self

    async def to_list(self) -> list[dict[str, Any]]:
        if self.error is not None:
            raise self.error
        return list(self.docs)


@pytest.fixture
def cursor() -> FakeCursor:
    return FakeCursor([])


@pytest.fixture
def collection(cursor: FakeCursor) -> MagicMock:
    collection = MagicMock()
    collection.find.return_value = cursor
    collection.find_one = AsyncMock(return_value=None)
    collection.create_indexes = AsyncMock()
    collection.replace_one = AsyncMock()
    return collection
