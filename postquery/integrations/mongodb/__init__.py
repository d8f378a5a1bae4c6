"""MongoDB integration for the post read model.

Installation:
    pip install postquery[mongodb]

Usage:
    >>> from postquery.integrations.mongodb import (
    ...     MongoConfiguration,
    ...     MongoPostReadStore,
    ... )
    >>>
    >>> config = MongoConfiguration(
    ...     uri="mongodb://localhost:27017",
    ...     database="blog"
    ... )
    >>> store = MongoPostReadStore(config)
    >>> app = ApplicationBuilder().use_read_store(store).build()
"""

from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration
from .read_store import MongoPostReadStore

__all__ = [
    "IndexDirection",
    "IndexedCollection",
    "IndexSpec",
    "MongoConfiguration",
    "MongoPostReadStore",
]
