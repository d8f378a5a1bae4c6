"""Fixtures for MongoDB integration tests.

These tests need a MongoDB server; set POSTQUERY_MONGO_URI to point at one.
They are skipped when no server answers within a second.
"""

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from pymongo.errors import PyMongoError

from postquery.integrations.mongodb import MongoConfiguration, MongoPostReadStore

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def mongo_config() -> AsyncIterator[MongoConfiguration]:
    config = MongoConfiguration(
        uri=os.environ.get("POSTQUERY_MONGO_URI", "mongodb://localhost:27017"),
        database="postquery_test",
        server_selection_timeout_ms=1000,
    )
    try:
        await config.client.admin.command("ping")
    except PyMongoError:
        await config.close()
        pytest.skip("MongoDB is not reachable")

    await config.db.drop_collection(config.posts_collection)
    yield config
    await config.db.drop_collection(config.posts_collection)
    await config.close()


@pytest_asyncio.fixture
async def mongo_store(mongo_config: MongoConfiguration) -> AsyncIterator[MongoPostReadStore]:
    store = MongoPostReadStore(mongo_config)
    await store.on_startup()
    yield store
