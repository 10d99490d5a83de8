"""
Data models for the Roll-up Gate Quoting System.

This module provides SQLAlchemy ORM models for:
- The hardware and accessory catalog
- Clients, quotes and their optional-accessory associations
"""

from rollup_quotes.models.catalog import (
    CatalogProfile,
    CatalogMotor,
    CatalogAxle,
    CatalogOptional,
    OptionalUnitType,
)

from rollup_quotes.models.quotes import (
    Client,
    Quote,
    QuoteOptional,
    QuoteStatus,
)

__all__ = [
    # Catalog
    "CatalogProfile",
    "CatalogMotor",
    "CatalogAxle",
    "CatalogOptional",
    "OptionalUnitType",
    # Quotes
    "Client",
    "Quote",
    "QuoteOptional",
    "QuoteStatus",
]
