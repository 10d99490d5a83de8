"""API Routes for the Roll-up Gate Quoting System."""

from rollup_quotes.api.routes import catalog, quotes

__all__ = ["catalog", "quotes"]
