"""
Tests for the SQLAlchemy catalog repository and quote store on SQLite.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import rollup_quotes.models  # noqa: F401
from rollup_quotes.database.base import Base
from rollup_quotes.exceptions import PersistenceFailureError
from rollup_quotes.models.catalog import OptionalUnitType
from rollup_quotes.models.quotes import Client, Quote, QuoteOptional, QuoteStatus
from rollup_quotes.services.catalog_service import CatalogService
from rollup_quotes.services.quoting import (
    CatalogKind,
    ClientData,
    QuoteFields,
    QuoteInput,
    QuotingService,
    SQLCatalogRepository,
    SQLQuoteStore,
)
from rollup_quotes.services.quoting.persistence import QuotePersistence
from rollup_quotes.services.quoting.store import SQLQuoteWriter


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'quotes.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fields():
    return QuoteFields(
        width=Decimal("2"),
        height=Decimal("2"),
        roll=Decimal("0.4"),
        quantity=1,
        profile_id="p1",
        motor_id="m1",
        axle_id="a1",
        total_price=Decimal("2800.00"),
    )


async def count(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class FailingLinkWriter(SQLQuoteWriter):
    """Writes the link rows, then fails before the unit of work commits."""

    async def insert_optional_links(self, quote_id, optional_ids):
        await super().insert_optional_links(quote_id, optional_ids)
        raise RuntimeError("constraint violated")


class TestSQLCatalogRepository:
    async def test_add_list_remove(self, session):
        service = CatalogService(SQLCatalogRepository(session))

        profile = await service.add_profile("Meia Cana", "250", "10")
        await service.add_motor("Motor AC 200kg", 200, 1200)
        await service.add_axle("Eixo 4m", 4, 400)
        paint = await service.add_optional("Pintura", 50, OptionalUnitType.PER_M2)
        await session.commit()

        snapshot = await SQLCatalogRepository(session).snapshot()
        assert [p.id for p in snapshot.profiles] == [profile.id]
        assert snapshot.profiles[0].price_per_m2 == Decimal("250")
        assert snapshot.motors[0].max_weight == Decimal("200")
        assert snapshot.axles[0].price == Decimal("400")
        assert snapshot.optionals[0].unit_type == OptionalUnitType.PER_M2

        assert await service.remove(CatalogKind.OPTIONALS, paint.id)
        assert not await service.remove(CatalogKind.OPTIONALS, paint.id)
        assert await service.list_entries(CatalogKind.OPTIONALS) == []


class TestSQLQuoteStore:
    async def test_save_and_read_back(self, session, fields):
        persistence = QuotePersistence(SQLQuoteStore(session))

        quote_id = await persistence.save(
            ClientData(name="Ana", email="ana@example.com"), fields, ["o1", "o2"],
        )

        record = await SQLQuoteStore(session).get_quote(quote_id)
        assert record.client.name == "Ana"
        assert record.status == QuoteStatus.PENDING
        assert record.fields.total_price == Decimal("2800.00")
        assert sorted(record.optional_ids) == ["o1", "o2"]

    async def test_rollback_on_failure(self, session_factory, fields):
        async with session_factory() as session:
            store = SQLQuoteStore(session)
            store.writer_class = FailingLinkWriter
            persistence = QuotePersistence(store)

            with pytest.raises(PersistenceFailureError):
                await persistence.save(ClientData(name="Bia"), fields, ["o1"])

        async with session_factory() as session:
            assert await count(session, Client) == 0
            assert await count(session, Quote) == 0
            assert await count(session, QuoteOptional) == 0

    async def test_idempotency_key(self, session, fields):
        persistence = QuotePersistence(SQLQuoteStore(session))

        first = await persistence.save(ClientData(name="Caio"), fields, [], idempotency_key="k1")
        second = await persistence.save(ClientData(name="Caio"), fields, [], idempotency_key="k1")

        assert first == second
        assert await count(session, Quote) == 1

    async def test_approve_delete_and_list(self, session, fields):
        base = datetime(2024, 3, 1, 9, 0)
        ticks = iter(base + timedelta(minutes=i) for i in range(10))
        persistence = QuotePersistence(SQLQuoteStore(session), clock=lambda: next(ticks))

        older = await persistence.save(ClientData(name="Old"), fields, ["o1"])
        newer = await persistence.save(ClientData(name="New"), fields, [])

        approved = await persistence.approve(older)
        assert approved.status == QuoteStatus.APPROVED

        listed = await persistence.list()
        assert [r.id for r in listed] == [newer, older]

        await persistence.delete(older)
        await session.commit()
        assert [r.id for r in await persistence.list()] == [newer]
        assert await count(session, QuoteOptional) == 0
        assert await count(session, Client) == 2

    async def test_end_to_end_with_sql_catalog(self, session):
        catalog = CatalogService(SQLCatalogRepository(session))
        profile = await catalog.add_profile("Meia Cana", 250, 10)
        await catalog.add_motor("Motor AC 200kg", 200, 1200)
        await catalog.add_axle("Eixo 4m", 4, 400)
        await session.commit()

        service = QuotingService(SQLCatalogRepository(session), SQLQuoteStore(session))
        result = await service.compute_quote(
            QuoteInput(width=2, height=2, roll="0.4", quantity=3, profile_id=profile.id)
        )
        quote_id = await service.confirm_and_save(ClientData(name="Duda"), result)

        record = await SQLQuoteStore(session).get_quote(quote_id)
        assert record.fields.total_price == Decimal("8400.00")
        assert record.fields.quantity == 3

