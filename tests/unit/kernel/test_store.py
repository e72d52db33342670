"""Unit tests for the record store port – queries, cursor and transactions."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from mp_queue.kernel.errors import StoreError
from mp_queue.kernel.messaging import (
    MessageQuery,
    MessageStatus,
    Priority,
    QueueMessage,
    RecordCursor,
    Retention,
    current_transaction,
)
from mp_queue.testing import InMemoryRecordStore

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def _message(message_id: str, **overrides: object) -> QueueMessage:
    values: dict[str, object] = dict(
        id=message_id,
        queue_name="q",
        payload="{}",
        status=MessageStatus.PENDING,
        priority=Priority.NORMAL,
        remaining_delivery_attempts=3,
        error_count=0,
        visibility_time=NOW,
        retention=Retention.ONFAILURE,
        retain_till=NOW + timedelta(days=7),
        shard=0,
        creation_time=NOW,
    )
    values.update(overrides)
    return QueueMessage(**values)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# MessageQuery
# ---------------------------------------------------------------------------


class TestMessageQuery:
    def test_eligible_matches_visible_pending_on_shard(self) -> None:
        query = MessageQuery.eligible(0, NOW)
        assert query.matches(_message("a"))
        assert query.matches(_message("b", status=MessageStatus.RETRY))

    def test_eligible_includes_visibility_boundary(self) -> None:
        assert MessageQuery.eligible(0, NOW).matches(_message("a", visibility_time=NOW))

    def test_eligible_excludes_future_visibility(self) -> None:
        future = _message("a", visibility_time=NOW + timedelta(seconds=1))
        assert not MessageQuery.eligible(0, NOW).matches(future)

    def test_eligible_excludes_other_shard_and_terminal(self) -> None:
        query = MessageQuery.eligible(0, NOW)
        assert not query.matches(_message("a", shard=1))
        assert not query.matches(_message("b", status=MessageStatus.COMPLETE))
        assert not query.matches(_message("c", status=MessageStatus.FAILED))

    def test_expired_requires_terminal_and_past_deadline(self) -> None:
        query = MessageQuery.expired(NOW)
        past = NOW - timedelta(seconds=1)
        assert query.matches(_message("a", status=MessageStatus.COMPLETE, retain_till=past))
        assert query.matches(_message("b", status=MessageStatus.FAILED, retain_till=past))
        assert not query.matches(_message("c", status=MessageStatus.FAILED, retain_till=NOW))
        assert not query.matches(_message("d", status=MessageStatus.RETRY, retain_till=past))
        assert not query.matches(_message("e", status=MessageStatus.PENDING, retain_till=past))

    def test_expired_ignores_shard(self) -> None:
        past = NOW - timedelta(days=1)
        assert MessageQuery.expired(NOW).matches(_message("a", status=MessageStatus.COMPLETE, retain_till=past, shard=3))

    def test_sort_key_priority_then_creation(self) -> None:
        low_old = _message("low", priority=Priority.LOW, creation_time=NOW - timedelta(hours=1))
        high_new = _message("high", priority=Priority.HIGH, creation_time=NOW)
        normal_old = _message("n1", creation_time=NOW - timedelta(minutes=5))
        normal_new = _message("n2", creation_time=NOW)
        ordered = sorted([normal_new, low_old, normal_old, high_new], key=MessageQuery.sort_key)
        assert [m.id for m in ordered] == ["high", "n1", "n2", "low"]


# ---------------------------------------------------------------------------
# RecordCursor
# ---------------------------------------------------------------------------


class TestRecordCursor:
    def test_next_until_exhausted(self) -> None:
        cursor = RecordCursor([_message("a"), _message("b")], 2)

        async def run() -> list[str | None]:
            first = await cursor.next()
            second = await cursor.next()
            third = await cursor.next()
            return [m.id if m else None for m in (first, second, third)]

        assert cursor.count == 2
        assert asyncio.run(run()) == ["a", "b", None]

    def test_async_iteration(self) -> None:
        cursor = RecordCursor((m for m in [_message("a"), _message("b")]), 2)

        async def run() -> list[str]:
            return [m.id async for m in cursor]

        assert asyncio.run(run()) == ["a", "b"]

    def test_forward_only(self) -> None:
        cursor = RecordCursor([_message("a")], 1)

        async def run() -> tuple[list[str], QueueMessage | None]:
            ids = [m.id async for m in cursor]
            return ids, await cursor.next()

        ids, after = asyncio.run(run())
        assert ids == ["a"]
        assert after is None


# ---------------------------------------------------------------------------
# Transaction contract
# ---------------------------------------------------------------------------


class TestTransaction:
    def test_clean_exit_commits(self) -> None:
        store = InMemoryRecordStore()

        async def run() -> QueueMessage | None:
            async with store.transaction() as tx:
                await tx.create(_message("a"))
            return await store.get("a")

        assert asyncio.run(run()) is not None
        assert store.commits == 1

    def test_exception_rolls_back(self) -> None:
        store = InMemoryRecordStore()

        async def run() -> None:
            async with store.transaction() as tx:
                await tx.create(_message("a"))
                raise RuntimeError("abort")

        with pytest.raises(RuntimeError):
            asyncio.run(run())
        assert len(store) == 0
        assert store.rollbacks == 1

    def test_explicit_commit_is_idempotent(self) -> None:
        store = InMemoryRecordStore()

        async def run() -> bool:
            async with store.transaction() as tx:
                await tx.create(_message("a"))
                await tx.commit()
                finished = tx.is_finished
            return finished

        assert asyncio.run(run()) is True
        assert store.commits == 1
        assert len(store) == 1

    def test_explicit_rollback_discards(self) -> None:
        store = InMemoryRecordStore()

        async def run() -> None:
            async with store.transaction() as tx:
                await tx.create(_message("a"))
                await tx.rollback()

        asyncio.run(run())
        assert len(store) == 0

    def test_current_transaction_is_scoped(self) -> None:
        store = InMemoryRecordStore()

        async def run() -> tuple[object, object, object]:
            before = current_transaction()
            async with store.transaction() as tx:
                inside = current_transaction()
                assert inside is tx
            after = current_transaction()
            return before, inside, after

        before, inside, after = asyncio.run(run())
        assert before is None
        assert inside is not None
        assert after is None

    def test_nested_transactions_restore_outer(self) -> None:
        store = InMemoryRecordStore()

        async def run() -> bool:
            async with store.transaction() as outer:
                async with store.transaction():
                    pass
                return current_transaction() is outer

        assert asyncio.run(run()) is True

    def test_duplicate_create_fails_commit(self) -> None:
        store = InMemoryRecordStore()

        async def run() -> None:
            async with store.transaction() as tx:
                await tx.create(_message("a"))
            async with store.transaction() as tx:
                await tx.create(_message("a"))

        with pytest.raises(StoreError):
            asyncio.run(run())
        assert len(store) == 1

    def test_commit_is_all_or_nothing(self) -> None:
        store = InMemoryRecordStore()

        async def run() -> None:
            async with store.transaction() as tx:
                await tx.create(_message("a"))
                await tx.update(_message("missing"))

        with pytest.raises(StoreError):
            asyncio.run(run())
        assert len(store) == 0
