"""
Roll-up gate quoting core.

Provides functionality for:
- Automatic and manual motor/axle selection
- Area, weight and price breakdown calculation
- Transactional quote saving with idempotency keys
- Quote approval, deletion and listing
"""

from rollup_quotes.services.quoting.catalog import (
    Axle,
    CatalogKind,
    CatalogRepository,
    CatalogSnapshot,
    FixedPrice,
    InMemoryCatalogRepository,
    Motor,
    OptionalItem,
    PerAreaPrice,
    Profile,
    SQLCatalogRepository,
)
from rollup_quotes.services.quoting.selection import SelectionMode, select_axle, select_motor
from rollup_quotes.services.quoting.pricing import CalculationResult, PricingEngine, QuoteInput
from rollup_quotes.services.quoting.store import (
    ClientData,
    InMemoryQuoteStore,
    QuoteFields,
    QuoteRecord,
    QuoteStore,
    SQLQuoteStore,
)
from rollup_quotes.services.quoting.persistence import QuotePersistence
from rollup_quotes.services.quoting.quote_service import QuotingService

__all__ = [
    "Axle",
    "CatalogKind",
    "CatalogRepository",
    "CatalogSnapshot",
    "FixedPrice",
    "InMemoryCatalogRepository",
    "Motor",
    "OptionalItem",
    "PerAreaPrice",
    "Profile",
    "SQLCatalogRepository",
    "SelectionMode",
    "select_axle",
    "select_motor",
    "CalculationResult",
    "PricingEngine",
    "QuoteInput",
    "ClientData",
    "InMemoryQuoteStore",
    "QuoteFields",
    "QuoteRecord",
    "QuoteStore",
    "SQLQuoteStore",
    "QuotePersistence",
    "QuotingService",
]
