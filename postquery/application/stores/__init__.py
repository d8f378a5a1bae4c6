"""Read stores holding post read entities."""

from .base import PostReadStore
from .memory import InMemoryPostReadStore

__all__ = [
    "InMemoryPostReadStore",
    "PostReadStore",
]
