"""
Tests for quote persistence against the in-memory store.
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from rollup_quotes.exceptions import (
    IdempotencyConflictError, PersistenceFailureError, QuoteNotFoundError,
)
from rollup_quotes.models.quotes import QuoteStatus
from rollup_quotes.services.quoting import ClientData, InMemoryQuoteStore, QuoteFields
from rollup_quotes.services.quoting.persistence import QuotePersistence
from rollup_quotes.services.quoting.store import InMemoryQuoteWriter


@pytest.fixture
def fields():
    return QuoteFields(
        width=Decimal("2"),
        height=Decimal("2"),
        roll=Decimal("0.4"),
        quantity=3,
        profile_id="p1",
        motor_id="m1",
        axle_id="a1",
        total_price=Decimal("8640.00"),
    )


@pytest.fixture
def client():
    return ClientData(name="Ana Souza", email="ana@example.com", phone="11 99999-0000")


class FailingLinkWriter(InMemoryQuoteWriter):
    async def insert_optional_links(self, quote_id, optional_ids):
        raise RuntimeError("link table unavailable")


class VanishingQuoteStore(InMemoryQuoteStore):
    """Loses the quote to a concurrent delete right before the status update."""

    async def update_quote_status(self, quote_id, status):
        await self.delete_quote(quote_id)
        return await super().update_quote_status(quote_id, status)


class TestSave:
    async def test_creates_pending_quote_with_client(self, persistence, quote_store, client, fields):
        quote_id = await persistence.save(client, fields, ["o1", "o2"])

        record = await quote_store.get_quote(quote_id)
        assert record.status == QuoteStatus.PENDING
        assert record.client.name == "Ana Souza"
        assert record.client.email == "ana@example.com"
        assert record.fields.total_price == Decimal("8640.00")
        assert record.optional_ids == ("o1", "o2")
        assert record.created_at == record.client.created_at

    async def test_duplicate_optional_ids_collapsed(self, persistence, quote_store, client, fields):
        quote_id = await persistence.save(client, fields, ["o1", "o1", "o2"])
        assert quote_store.link_count(quote_id) == 2

    async def test_no_optionals(self, persistence, quote_store, client, fields):
        quote_id = await persistence.save(client, fields, [])
        assert quote_store.link_count(quote_id) == 0

    async def test_each_save_creates_new_client(self, persistence, quote_store, client, fields):
        await persistence.save(client, fields, [])
        await persistence.save(client, fields, [])
        assert len(quote_store.state.clients) == 2

    async def test_failure_leaves_nothing_behind(self, clock, client, fields):
        store = InMemoryQuoteStore()
        store.writer_class = FailingLinkWriter
        persistence = QuotePersistence(store, clock=clock)

        with pytest.raises(PersistenceFailureError):
            await persistence.save(client, fields, ["o1"])

        assert store.state.clients == {}
        assert store.state.quotes == {}
        assert store.state.links == []

    async def test_failure_keeps_earlier_quotes(self, clock, client, fields):
        store = InMemoryQuoteStore()
        persistence = QuotePersistence(store, clock=clock)
        first = await persistence.save(client, fields, ["o1"])

        store.writer_class = FailingLinkWriter
        with pytest.raises(PersistenceFailureError):
            await persistence.save(client, fields, ["o2"])

        assert list(store.state.quotes) == [first]
        assert store.link_count(first) == 1

    async def test_same_key_returns_existing_quote(self, persistence, quote_store, client, fields):
        first = await persistence.save(client, fields, ["o1"], idempotency_key="abc")
        second = await persistence.save(client, fields, ["o1"], idempotency_key="abc")

        assert first == second
        assert len(quote_store.state.quotes) == 1
        assert len(quote_store.state.clients) == 1

    async def test_same_key_with_different_quote_conflicts(self, persistence, quote_store, client, fields):
        first = await persistence.save(client, fields, ["o1"], idempotency_key="abc")

        with pytest.raises(IdempotencyConflictError) as exc_info:
            await persistence.save(
                client, replace(fields, quantity=4), ["o1"], idempotency_key="abc",
            )
        with pytest.raises(IdempotencyConflictError):
            await persistence.save(client, fields, ["o2"], idempotency_key="abc")

        assert exc_info.value.quote_id == first
        assert list(quote_store.state.quotes) == [first]

    async def test_different_keys_create_separate_quotes(self, persistence, quote_store, client, fields):
        await persistence.save(client, fields, [], idempotency_key="a")
        await persistence.save(client, fields, [], idempotency_key="b")
        assert len(quote_store.state.quotes) == 2


class TestLifecycle:
    async def test_approve(self, persistence, client, fields):
        quote_id = await persistence.save(client, fields, [])

        record = await persistence.approve(quote_id, actor="admin")

        assert record.status == QuoteStatus.APPROVED
        assert record.fields == fields

    async def test_approve_twice_is_noop(self, persistence, client, fields):
        quote_id = await persistence.save(client, fields, [])
        await persistence.approve(quote_id)
        record = await persistence.approve(quote_id)
        assert record.status == QuoteStatus.APPROVED

    async def test_approve_unknown(self, persistence):
        with pytest.raises(QuoteNotFoundError):
            await persistence.approve("missing")

    async def test_approve_after_concurrent_delete(self, clock, client, fields):
        store = VanishingQuoteStore()
        persistence = QuotePersistence(store, clock=clock)
        quote_id = await persistence.save(client, fields, [])

        with pytest.raises(QuoteNotFoundError):
            await persistence.approve(quote_id)
        assert await store.get_quote(quote_id) is None

    async def test_delete_removes_links_and_keeps_client(self, persistence, quote_store, client, fields):
        quote_id = await persistence.save(client, fields, ["o1", "o2"])

        await persistence.delete(quote_id)

        assert await quote_store.get_quote(quote_id) is None
        assert quote_store.link_count(quote_id) == 0
        assert len(quote_store.state.clients) == 1
        assert quote_id not in [r.id for r in await persistence.list()]

    async def test_delete_unknown(self, persistence):
        with pytest.raises(QuoteNotFoundError):
            await persistence.delete("missing")

    async def test_list_newest_first(self, persistence, fields):
        ids = [
            await persistence.save(ClientData(name=name), fields, [])
            for name in ("first", "second", "third")
        ]

        records = await persistence.list()

        assert [r.id for r in records] == list(reversed(ids))
        assert [r.client.name for r in records] == ["third", "second", "first"]

    async def test_list_empty(self, persistence):
        assert await persistence.list() == []
