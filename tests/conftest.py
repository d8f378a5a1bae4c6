"""Central test fixtures."""

from uuid import UUID

import pytest

from postquery.application import Application, ApplicationBuilder, InMemoryPostReadStore
from postquery.config import PostQuerySettings
from postquery.domain import PostReadEntity
from tests.fixtures.posts import make_post

POST_A_ID = UUID(int=1)
POST_B_ID = UUID(int=2)
POST_C_ID = UUID(int=3)


@pytest.fixture
def post_a() -> PostReadEntity:
    """alice's post: no comments, 5 likes."""
    return make_post(post_id=POST_A_ID, author="alice", likes=5, comments=0)


@pytest.fixture
def post_b() -> PostReadEntity:
    """bob's post: 2 comments, no likes."""
    return make_post(post_id=POST_B_ID, author="bob", likes=0, comments=2, posted_offset_days=1)


@pytest.fixture
def store() -> InMemoryPostReadStore:
    """Create an empty in-memory read store."""
    return InMemoryPostReadStore()


@pytest.fixture
def seeded_store(
    store: InMemoryPostReadStore, post_a: PostReadEntity, post_b: PostReadEntity
) -> InMemoryPostReadStore:
    """Create a read store holding posts A and B."""
    return store.add(post_a, post_b)


@pytest.fixture
def settings() -> PostQuerySettings:
    """Settings independent of the environment."""
    return PostQuerySettings(
        log_level="INFO",
        query_timeout_seconds=None,
        correlation_tracking=True,
        logging_enabled=True,
    )


@pytest.fixture
def app(seeded_store: InMemoryPostReadStore, settings: PostQuerySettings) -> Application:
    """Create an application over the seeded store."""
    return ApplicationBuilder().use_read_store(seeded_store).use_settings(settings).build()


@pytest.fixture(autouse=True)
def clear_execution_context():
    """Automatically clear execution context after each test."""
    yield
    from postquery.context import clear_context

    clear_context()
