"""API module for the Roll-up Gate Quoting System."""

from rollup_quotes.api.dependencies import (
    get_db,
    get_auth_gate,
    get_current_subject,
    get_quoting_service,
    get_catalog_service,
)

__all__ = [
    "get_db",
    "get_auth_gate",
    "get_current_subject",
    "get_quoting_service",
    "get_catalog_service",
]
