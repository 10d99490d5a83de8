"""
Quote storage.

QuoteStore is the durable boundary for clients, quotes and quote-optional
associations. Multi-record writes go through ``unit_of_work()``: everything
written inside the block is committed together or not at all.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import AsyncIterator, Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rollup_quotes.database.base import new_id
from rollup_quotes.models.quotes import Client, Quote, QuoteOptional, QuoteStatus
from rollup_quotes.services.quoting.catalog import to_decimal
from rollup_quotes.services.quoting.pricing import CalculationResult
from rollup_quotes.services.quoting.selection import SelectionMode


@dataclass(frozen=True)
class ClientData:
    """Client contact as entered by the operator."""
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""


@dataclass(frozen=True)
class ClientRecord:
    id: str
    name: str
    email: str
    phone: str
    address: str
    created_at: datetime


@dataclass(frozen=True)
class QuoteFields:
    """Quote columns captured at save time, total included as a snapshot."""
    width: Decimal
    height: Decimal
    roll: Decimal
    quantity: int
    profile_id: str
    motor_id: str | None
    axle_id: str | None
    total_price: Decimal
    auto_motor: bool = True
    auto_axle: bool = True

    @classmethod
    def from_result(cls, result: CalculationResult, places: int = 2) -> "QuoteFields":
        exponent = Decimal(1).scaleb(-places)
        data = result.input
        return cls(
            width=data.width,
            height=data.height,
            roll=data.roll,
            quantity=int(data.quantity),
            profile_id=result.profile.id,
            motor_id=result.motor.id if result.motor else None,
            axle_id=result.axle.id if result.axle else None,
            total_price=result.total_price.quantize(exponent, rounding=ROUND_HALF_UP),
            auto_motor=data.motor_mode == SelectionMode.AUTOMATIC,
            auto_axle=data.axle_mode == SelectionMode.AUTOMATIC,
        )


@dataclass(frozen=True)
class QuoteRecord:
    """Stored quote joined with its client and optional ids."""
    id: str
    client: ClientRecord
    fields: QuoteFields
    status: QuoteStatus
    created_at: datetime
    optional_ids: tuple[str, ...] = ()
    idempotency_key: str | None = None


class QuoteWriter(ABC):
    """Write operations available inside a unit of work."""

    @abstractmethod
    async def insert_client(self, client: ClientData, created_at: datetime) -> ClientRecord:
        pass

    @abstractmethod
    async def insert_quote(
        self,
        client_id: str,
        fields: QuoteFields,
        status: QuoteStatus,
        created_at: datetime,
        idempotency_key: str | None = None,
    ) -> str:
        pass

    @abstractmethod
    async def insert_optional_links(self, quote_id: str, optional_ids: Iterable[str]) -> None:
        pass


class QuoteStore(ABC):
    """Durable storage for clients, quotes and their optional associations."""

    @abstractmethod
    def unit_of_work(self):
        """Async context manager yielding a QuoteWriter; rolls back on error."""

    @abstractmethod
    async def find_quote_id_by_key(self, idempotency_key: str) -> str | None:
        pass

    @abstractmethod
    async def get_quote(self, quote_id: str) -> QuoteRecord | None:
        pass

    @abstractmethod
    async def update_quote_status(self, quote_id: str, status: QuoteStatus) -> bool:
        pass

    @abstractmethod
    async def delete_quote(self, quote_id: str) -> bool:
        """Delete a quote and its optional links. The client is kept."""

    @abstractmethod
    async def list_quotes(self) -> list[QuoteRecord]:
        """All quotes, newest first, joined with their clients."""


# In-memory implementation

@dataclass
class _MemoryQuote:
    id: str
    client_id: str
    fields: QuoteFields
    status: QuoteStatus
    created_at: datetime
    idempotency_key: str | None


@dataclass
class InMemoryQuoteState:
    clients: dict[str, ClientRecord] = field(default_factory=dict)
    quotes: dict[str, _MemoryQuote] = field(default_factory=dict)
    links: list[tuple[str, str]] = field(default_factory=list)

    def copy(self) -> "InMemoryQuoteState":
        return InMemoryQuoteState(
            clients=dict(self.clients),
            quotes=dict(self.quotes),
            links=list(self.links),
        )


class InMemoryQuoteWriter(QuoteWriter):
    def __init__(self, state: InMemoryQuoteState):
        self.state = state

    async def insert_client(self, client: ClientData, created_at: datetime) -> ClientRecord:
        record = ClientRecord(
            id=new_id(),
            name=client.name,
            email=client.email,
            phone=client.phone,
            address=client.address,
            created_at=created_at,
        )
        self.state.clients[record.id] = record
        return record

    async def insert_quote(
        self,
        client_id: str,
        fields: QuoteFields,
        status: QuoteStatus,
        created_at: datetime,
        idempotency_key: str | None = None,
    ) -> str:
        if client_id not in self.state.clients:
            raise KeyError(f"Unknown client: {client_id}")
        if idempotency_key and any(
            q.idempotency_key == idempotency_key for q in self.state.quotes.values()
        ):
            raise ValueError(f"Duplicate idempotency key: {idempotency_key}")
        quote = _MemoryQuote(
            id=new_id(),
            client_id=client_id,
            fields=fields,
            status=status,
            created_at=created_at,
            idempotency_key=idempotency_key,
        )
        self.state.quotes[quote.id] = quote
        return quote.id

    async def insert_optional_links(self, quote_id: str, optional_ids: Iterable[str]) -> None:
        if quote_id not in self.state.quotes:
            raise KeyError(f"Unknown quote: {quote_id}")
        for optional_id in optional_ids:
            link = (quote_id, optional_id)
            if link in self.state.links:
                raise ValueError(f"Duplicate optional link: {link}")
            self.state.links.append(link)


class InMemoryQuoteStore(QuoteStore):
    """
    Quote store kept in process memory.

    A unit of work writes to a working copy of the state which replaces the
    live state only when the block exits cleanly.
    """

    writer_class = InMemoryQuoteWriter

    def __init__(self):
        self.state = InMemoryQuoteState()

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[QuoteWriter]:
        working = self.state.copy()
        yield self.writer_class(working)
        self.state = working

    async def find_quote_id_by_key(self, idempotency_key: str) -> str | None:
        for quote in self.state.quotes.values():
            if quote.idempotency_key == idempotency_key:
                return quote.id
        return None

    def _record(self, quote: _MemoryQuote) -> QuoteRecord:
        return QuoteRecord(
            id=quote.id,
            client=self.state.clients[quote.client_id],
            fields=quote.fields,
            status=quote.status,
            created_at=quote.created_at,
            optional_ids=tuple(oid for qid, oid in self.state.links if qid == quote.id),
            idempotency_key=quote.idempotency_key,
        )

    async def get_quote(self, quote_id: str) -> QuoteRecord | None:
        quote = self.state.quotes.get(quote_id)
        return self._record(quote) if quote else None

    async def update_quote_status(self, quote_id: str, status: QuoteStatus) -> bool:
        quote = self.state.quotes.get(quote_id)
        if quote is None:
            return False
        self.state.quotes[quote_id] = replace(quote, status=status)
        return True

    async def delete_quote(self, quote_id: str) -> bool:
        if self.state.quotes.pop(quote_id, None) is None:
            return False
        self.state.links = [link for link in self.state.links if link[0] != quote_id]
        return True

    async def list_quotes(self) -> list[QuoteRecord]:
        quotes = sorted(self.state.quotes.values(), key=lambda q: q.created_at, reverse=True)
        return [self._record(q) for q in quotes]

    def link_count(self, quote_id: str) -> int:
        return sum(1 for qid, _ in self.state.links if qid == quote_id)


# SQLAlchemy implementation

class SQLQuoteWriter(QuoteWriter):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert_client(self, client: ClientData, created_at: datetime) -> ClientRecord:
        row = Client(
            id=new_id(),
            name=client.name,
            email=client.email,
            phone=client.phone,
            address=client.address,
            created_at=created_at,
        )
        self.session.add(row)
        await self.session.flush()
        return ClientRecord(
            id=row.id,
            name=row.name,
            email=row.email,
            phone=row.phone,
            address=row.address,
            created_at=created_at,
        )

    async def insert_quote(
        self,
        client_id: str,
        fields: QuoteFields,
        status: QuoteStatus,
        created_at: datetime,
        idempotency_key: str | None = None,
    ) -> str:
        row = Quote(
            id=new_id(),
            client_id=client_id,
            width=fields.width,
            height=fields.height,
            roll=fields.roll,
            quantity=fields.quantity,
            profile_id=fields.profile_id,
            motor_id=fields.motor_id,
            axle_id=fields.axle_id,
            auto_motor=fields.auto_motor,
            auto_axle=fields.auto_axle,
            total_price=fields.total_price,
            status=status,
            idempotency_key=idempotency_key,
            created_at=created_at,
        )
        self.session.add(row)
        await self.session.flush()
        return row.id

    async def insert_optional_links(self, quote_id: str, optional_ids: Iterable[str]) -> None:
        self.session.add_all(
            QuoteOptional(id=new_id(), quote_id=quote_id, optional_id=optional_id)
            for optional_id in optional_ids
        )
        await self.session.flush()


class SQLQuoteStore(QuoteStore):
    """
    Quote store backed by the SQLAlchemy session.

    The unit of work is the session transaction: commit on success,
    rollback on any error.
    """

    writer_class = SQLQuoteWriter

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[QuoteWriter]:
        try:
            yield self.writer_class(self.session)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def find_quote_id_by_key(self, idempotency_key: str) -> str | None:
        result = await self.session.execute(
            select(Quote.id).where(Quote.idempotency_key == idempotency_key)
        )
        return result.scalar_one_or_none()

    def _query(self):
        return select(Quote).options(
            selectinload(Quote.client),
            selectinload(Quote.optional_links),
        )

    @staticmethod
    def _record(row: Quote) -> QuoteRecord:
        client = row.client
        return QuoteRecord(
            id=row.id,
            client=ClientRecord(
                id=client.id,
                name=client.name,
                email=client.email,
                phone=client.phone,
                address=client.address,
                created_at=client.created_at,
            ),
            fields=QuoteFields(
                width=to_decimal(row.width),
                height=to_decimal(row.height),
                roll=to_decimal(row.roll),
                quantity=row.quantity,
                profile_id=row.profile_id,
                motor_id=row.motor_id,
                axle_id=row.axle_id,
                total_price=to_decimal(row.total_price),
                auto_motor=row.auto_motor,
                auto_axle=row.auto_axle,
            ),
            status=row.status,
            created_at=row.created_at,
            optional_ids=tuple(link.optional_id for link in row.optional_links),
            idempotency_key=row.idempotency_key,
        )

    async def get_quote(self, quote_id: str) -> QuoteRecord | None:
        result = await self.session.execute(self._query().where(Quote.id == quote_id))
        row = result.scalar_one_or_none()
        return self._record(row) if row else None

    async def update_quote_status(self, quote_id: str, status: QuoteStatus) -> bool:
        result = await self.session.execute(select(Quote).where(Quote.id == quote_id))
        row = result.scalar_one_or_none()
        if row is None:
            return False
        row.status = status
        await self.session.flush()
        return True

    async def delete_quote(self, quote_id: str) -> bool:
        await self.session.execute(
            delete(QuoteOptional).where(QuoteOptional.quote_id == quote_id)
        )
        result = await self.session.execute(delete(Quote).where(Quote.id == quote_id))
        await self.session.flush()
        return result.rowcount > 0

    async def list_quotes(self) -> list[QuoteRecord]:
        result = await self.session.execute(
            self._query().order_by(Quote.created_at.desc())
        )
        return [self._record(row) for row in result.scalars().all()]
