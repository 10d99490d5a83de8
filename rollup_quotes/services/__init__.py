"""
Services module for the Roll-up Gate Quoting System.

Contains the business logic:
- Quoting core (selection, pricing, persistence)
- Catalog maintenance
"""

from rollup_quotes.services.catalog_service import CatalogService
from rollup_quotes.services.quoting import QuotingService

__all__ = ["CatalogService", "QuotingService"]
