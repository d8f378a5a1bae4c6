"""MongoDB configuration using pydantic-settings."""

from functools import cached_property
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.asynchronous.mongo_client import AsyncMongoClient


class MongoConfiguration(BaseSettings):
    """Configuration and factory for MongoDB resources.

    All settings can be configured via environment variables with the
    POSTQUERY_MONGO_ prefix. For example:
    - POSTQUERY_MONGO_URI=mongodb://localhost:27017
    - POSTQUERY_MONGO_DATABASE=blog
    - POSTQUERY_MONGO_POSTS_COLLECTION=post_read_model

    The configuration also acts as a factory, providing lazy-initialized
    properties for the MongoDB client, database, and posts collection.

    Attributes:
        uri: MongoDB connection URI.
        database: Database name to use.
        posts_collection: Collection holding post read entities.
        max_pool_size: Maximum number of pooled connections.
        server_selection_timeout_ms: How long to wait for a reachable server
            before a read fails.
        connect_timeout_ms: Connection timeout in milliseconds.
        socket_timeout_ms: Socket timeout in milliseconds (None for no
            timeout).

    Example:
        >>> config = MongoConfiguration(database="blog")
        >>> posts = config.posts
        >>> store = MongoPostReadStore(config)
    """

    uri: str = "mongodb://localhost:27017"
    database: str = "postquery"
    posts_collection: str = "posts"

    max_pool_size: int = Field(default=100, ge=1)
    server_selection_timeout_ms: int = Field(default=30000, ge=0)
    connect_timeout_ms: int = Field(default=20000, ge=0)
    socket_timeout_ms: int | None = Field(default=None, ge=0)

    model_config = {"env_prefix": "POSTQUERY_MONGO_"}

    @cached_property
    def client(self) -> AsyncMongoClient[dict[str, Any]]:
        """Get the MongoDB async client.

        The client is lazily created and cached for reuse. UUIDs are stored
        with the standard binary representation.
        """
        kwargs: dict[str, Any] = {
            "maxPoolSize": self.max_pool_size,
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
            "connectTimeoutMS": self.connect_timeout_ms,
            "uuidRepresentation": "standard",
            "tz_aware": True,
        }
        if self.socket_timeout_ms is not None:
            kwargs["socketTimeoutMS"] = self.socket_timeout_ms
        return AsyncMongoClient(self.uri, **kwargs)

    @cached_property
    def db(self) -> AsyncDatabase[dict[str, Any]]:
        """Get the MongoDB async database."""
        return self.client[self.database]

    @cached_property
    def posts(self) -> AsyncCollection[dict[str, Any]]:
        """Get the posts collection."""
        return self.db[self.posts_collection]

    async def close(self) -> None:
        """Close the MongoDB client if it was created."""
        if "client" in self.__dict__:
            await self.client.close()
            for name in ("client", "db", "posts"):
                self.__dict__.pop(name, None)
