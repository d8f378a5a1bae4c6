"""Tests for the dispatch table and the query dispatcher."""

import asyncio
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from postquery.application import InMemoryPostReadStore
from postquery.application.middleware import Handler, Middleware
from postquery.application.queries import (
    FindAllPostsHandler,
    FindPostByIdHandler,
    QueryDispatcher,
    QueryDispatchTable,
    QueryDispatchTableBuilder,
    QueryHandler,
    default_handlers,
)
from postquery.domain import (
    DuplicateHandlerError,
    FindAllPosts,
    FindPostById,
    FindPostsByAuthor,
    FindPostsWithComments,
    FindPostsWithLikes,
    PostQuery,
    PostReadEntity,
    QueryCancelledError,
    QueryKind,
    StorageUnavailableError,
    UnregisteredQueryError,
)
from postquery.routing import intercepts


class RecordingHandler(QueryHandler[PostQuery]):
    """Handler that records the queries it receives."""

    def __init__(self, result: list[PostReadEntity] | None = None):
        self.received: list[PostQuery] = []
        self.result = result if result is not None else []

    async def handle(self, query: PostQuery) -> list[PostReadEntity]:
        self.received.append(query)
        return self.result


def recording_table() -> tuple[QueryDispatchTable, dict[QueryKind, RecordingHandler]]:
    handlers = {kind: RecordingHandler() for kind in QueryKind}
    return QueryDispatchTableBuilder.from_handlers(handlers).build(), handlers


class TestQueryDispatchTableBuilder:
    def test_builds_complete_table(self, store):
        table = QueryDispatchTableBuilder.from_handlers(default_handlers(store)).build()

        assert set(table) == set(QueryKind)
        assert isinstance(table[QueryKind.BY_AUTHOR], QueryHandler)

    def test_rejects_second_handler_for_variant(self, store):
        builder = QueryDispatchTableBuilder().register(FindAllPosts, FindAllPostsHandler(store))

        with pytest.raises(DuplicateHandlerError, match="FindAllPosts"):
            builder.register(FindAllPosts, FindAllPostsHandler(store))

    def test_duplicate_detected_across_class_and_kind(self, store):
        builder = QueryDispatchTableBuilder().register(FindAllPosts, FindAllPostsHandler(store))

        with pytest.raises(DuplicateHandlerError):
            builder.register(QueryKind.ALL_POSTS, RecordingHandler())

    def test_duplicate_does_not_overwrite_first_handler(self, store):
        first = FindAllPostsHandler(store)
        builder = QueryDispatchTableBuilder().register(FindAllPosts, first)

        with pytest.raises(DuplicateHandlerError):
            builder.register(FindAllPosts, RecordingHandler())

        assert builder.registrations()[QueryKind.ALL_POSTS] is first

    def test_build_rejects_missing_variants(self, store):
        builder = QueryDispatchTableBuilder().register(FindAllPosts, FindAllPostsHandler(store))

        with pytest.raises(UnregisteredQueryError) as exc_info:
            builder.build()

        message = str(exc_info.value)
        for name in ("FindPostById", "FindPostsByAuthor", "FindPostsWithComments"):
            assert name in message
        assert "FindAllPosts," not in message

    def test_partial_table_when_completeness_not_required(self, store):
        table = (
            QueryDispatchTableBuilder()
            .register(FindAllPosts, FindAllPostsHandler(store))
            .build(require_complete=False)
        )

        assert list(table) == [QueryKind.ALL_POSTS]

    def test_register_handler_infers_variant_from_annotation(self, store):
        handler = FindPostByIdHandler(store)
        builder = QueryDispatchTableBuilder().register_handler(handler)

        assert builder.registrations() == {QueryKind.BY_POST_ID: handler}

    def test_rejects_classes_that_are_not_declared_variants(self):
        class FindDrafts(PostQuery):
            kind: QueryKind = QueryKind.ALL_POSTS

        with pytest.raises(TypeError):
            QueryDispatchTableBuilder().register(FindDrafts, RecordingHandler())

    def test_missing_lists_unhandled_kinds(self, store):
        builder = QueryDispatchTableBuilder().register(FindAllPosts, FindAllPostsHandler(store))

        assert QueryKind.ALL_POSTS not in builder.missing()
        assert len(builder.missing()) == len(QueryKind) - 1


class TestQueryDispatchTable:
    def test_table_is_read_only(self, store):
        table = QueryDispatchTableBuilder.from_handlers(default_handlers(store)).build()

        with pytest.raises(TypeError):
            table[QueryKind.ALL_POSTS] = RecordingHandler()  # type: ignore[index]

    def test_table_is_isolated_from_builder(self, store):
        builder = QueryDispatchTableBuilder().register(FindAllPosts, FindAllPostsHandler(store))
        table = builder.build(require_complete=False)

        builder.register(FindPostById, FindPostByIdHandler(store))

        assert QueryKind.BY_POST_ID not in table

    def test_resolve_unregistered_variant_raises(self, store):
        table = (
            QueryDispatchTableBuilder()
            .register(FindAllPosts, FindAllPostsHandler(store))
            .build(require_complete=False)
        )

        with pytest.raises(UnregisteredQueryError, match="FindPostsWithComments"):
            table.resolve(FindPostsWithComments())


class TestQueryDispatcher:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "query",
        [
            FindAllPosts(),
            FindPostById(post_id=UUID(int=1)),
            FindPostsByAuthor(author="alice"),
            FindPostsWithComments(),
            FindPostsWithLikes(threshold=1),
        ],
        ids=lambda q: type(q).__name__,
    )
    async def test_invokes_exactly_the_registered_handler(self, query):
        table, handlers = recording_table()
        dispatcher = QueryDispatcher(table)

        await dispatcher.send(query)

        for kind, handler in handlers.items():
            expected = [query] if kind is query.kind else []
            assert handler.received == expected

    @pytest.mark.asyncio
    async def test_returns_handler_result_unchanged(self, post_a):
        result = [post_a]
        handler = RecordingHandler(result)
        handlers = {kind: RecordingHandler() for kind in QueryKind}
        handlers[QueryKind.ALL_POSTS] = handler
        dispatcher = QueryDispatcher(QueryDispatchTableBuilder.from_handlers(handlers).build())

        assert await dispatcher.send(FindAllPosts()) is result

    @pytest.mark.asyncio
    async def test_unregistered_variant_is_not_an_empty_result(self, store):
        table = (
            QueryDispatchTableBuilder()
            .register(FindAllPosts, FindAllPostsHandler(store))
            .build(require_complete=False)
        )

        with pytest.raises(UnregisteredQueryError):
            await QueryDispatcher(table).send(FindPostsWithLikes(threshold=1))

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, seeded_store):
        seeded_store.fail_with(ConnectionError("connection refused"))
        table = QueryDispatchTableBuilder.from_handlers(default_handlers(seeded_store)).build()

        with pytest.raises(StorageUnavailableError):
            await QueryDispatcher(table).send(FindAllPosts())

    @pytest.mark.asyncio
    async def test_failure_is_not_retried(self):
        failing = AsyncMock(side_effect=StorageUnavailableError("down"))
        handler = RecordingHandler()
        handler.handle = failing  # type: ignore[method-assign]
        handlers = {kind: RecordingHandler() for kind in QueryKind}
        handlers[QueryKind.WITH_COMMENTS] = handler
        dispatcher = QueryDispatcher(QueryDispatchTableBuilder.from_handlers(handlers).build())

        with pytest.raises(StorageUnavailableError):
            await dispatcher.send(FindPostsWithComments())

        assert failing.await_count == 1

    @pytest.mark.asyncio
    async def test_deadline_cancels_slow_read(self, post_a):
        store = InMemoryPostReadStore(latency=1.0).add(post_a)
        table = QueryDispatchTableBuilder.from_handlers(default_handlers(store)).build()

        with pytest.raises(QueryCancelledError) as exc_info:
            await QueryDispatcher(table).send(FindAllPosts(), timeout=0.01)

        assert "deadline" in str(exc_info.value)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("timeout", [None, 5])
    async def test_handler_timeout_error_is_not_a_deadline(self, timeout):
        class SocketTimeoutHandler(QueryHandler[FindAllPosts]):
            async def handle(self, query: FindAllPosts) -> list[PostReadEntity]:
                raise TimeoutError("socket read timed out")

        handlers = {kind: RecordingHandler() for kind in QueryKind}
        handlers[QueryKind.ALL_POSTS] = SocketTimeoutHandler()
        dispatcher = QueryDispatcher(QueryDispatchTableBuilder.from_handlers(handlers).build())

        with pytest.raises(TimeoutError, match="socket read timed out") as exc_info:
            await dispatcher.send(FindAllPosts(), timeout=timeout)

        assert not isinstance(exc_info.value, QueryCancelledError)

    @pytest.mark.asyncio
    async def test_external_cancellation_with_deadline_cancels_read(self, post_a):
        store = InMemoryPostReadStore(latency=1.0).add(post_a)
        table = QueryDispatchTableBuilder.from_handlers(default_handlers(store)).build()
        task = asyncio.create_task(QueryDispatcher(table).send(FindAllPosts(), timeout=5))
        await asyncio.sleep(0.01)

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_deadline_not_hit_returns_result(self, post_a):
        store = InMemoryPostReadStore(latency=0.001).add(post_a)
        table = QueryDispatchTableBuilder.from_handlers(default_handlers(store)).build()

        assert await QueryDispatcher(table).send(FindAllPosts(), timeout=5) == [post_a]

    @pytest.mark.asyncio
    async def test_external_cancellation_propagates(self, post_a):
        store = InMemoryPostReadStore(latency=1.0).add(post_a)
        table = QueryDispatchTableBuilder.from_handlers(default_handlers(store)).build()
        task = asyncio.create_task(QueryDispatcher(table).send(FindAllPosts()))
        await asyncio.sleep(0.01)

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_concurrent_queries_are_independent(self, seeded_store, post_a, post_b):
        seeded_store.latency = 0.01
        table = QueryDispatchTableBuilder.from_handlers(default_handlers(seeded_store)).build()
        dispatcher = QueryDispatcher(table)

        queries: list[PostQuery] = [
            FindPostsByAuthor(author="alice"),
            FindPostsWithComments(),
            FindPostsWithLikes(threshold=1),
            FindPostById(post_id=UUID(int=3)),
        ] * 5

        results = await asyncio.gather(*(dispatcher.send(query) for query in queries))

        assert results == [[post_a], [post_b], [post_a], []] * 5


class TestDispatcherMiddleware:
    @pytest.mark.asyncio
    async def test_middleware_chain_order(self, store):
        calls: list[str] = []

        class FirstMiddleware(Middleware):
            @intercepts
            async def first(self, query: PostQuery, next: Handler):
                calls.append("first-before")
                result = await next(query)
                calls.append("first-after")
                return result

        class SecondMiddleware(Middleware):
            @intercepts
            async def second(self, query: PostQuery, next: Handler):
                calls.append("second-before")
                result = await next(query)
                calls.append("second-after")
                return result

        table = QueryDispatchTableBuilder.from_handlers(default_handlers(store)).build()
        dispatcher = QueryDispatcher(table, [FirstMiddleware(), SecondMiddleware()])

        await dispatcher.send(FindAllPosts())

        assert calls == ["first-before", "second-before", "second-after", "first-after"]

    @pytest.mark.asyncio
    async def test_variant_specific_interceptor_only_sees_its_variant(self, store):
        seen: list[str] = []

        class AuthorAuditMiddleware(Middleware):
            @intercepts
            async def audit(self, query: FindPostsByAuthor, next: Handler):
                seen.append(query.author)
                return await next(query)

        table = QueryDispatchTableBuilder.from_handlers(default_handlers(store)).build()
        dispatcher = QueryDispatcher(table, [AuthorAuditMiddleware()])

        await dispatcher.send(FindAllPosts())
        await dispatcher.send(FindPostsByAuthor(author="bob"))

        assert seen == ["bob"]
