"""
Shared fixtures for the quoting tests.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from rollup_quotes.services.quoting import (
    Axle,
    FixedPrice,
    InMemoryCatalogRepository,
    InMemoryQuoteStore,
    Motor,
    OptionalItem,
    PerAreaPrice,
    Profile,
    QuotePersistence,
    QuotingService,
)


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def profile():
    return Profile("p1", "Meia Cana", Decimal("250"), Decimal("10"))


@pytest.fixture
def motors():
    return [
        Motor("m1", "Motor AC 200kg", Decimal("200"), Decimal("1200")),
        Motor("m2", "Motor AC 400kg", Decimal("400"), Decimal("1800")),
    ]


@pytest.fixture
def axles():
    return [
        Axle("a1", "Eixo 4m", Decimal("4"), Decimal("400")),
        Axle("a2", "Eixo 8m", Decimal("8"), Decimal("800")),
    ]


@pytest.fixture
def optionals():
    return [
        OptionalItem("o1", "Pintura", PerAreaPrice(Decimal("50"))),
        OptionalItem("o2", "Controle Remoto", FixedPrice(Decimal("80"))),
    ]


@pytest.fixture
def catalog_repo(profile, motors, axles, optionals):
    return InMemoryCatalogRepository(
        profiles=[profile],
        motors=list(motors),
        axles=list(axles),
        optionals=list(optionals),
    )


@pytest.fixture
def quote_store():
    return InMemoryQuoteStore()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def persistence(quote_store, clock):
    return QuotePersistence(quote_store, clock=clock)


@pytest.fixture
def quoting_service(catalog_repo, quote_store, persistence):
    return QuotingService(catalog_repo, quote_store, persistence=persistence)
