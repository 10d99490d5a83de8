"""
Database module for the Roll-up Gate Quoting System.

Provides async database connections, session management,
and the declarative base class.
"""

from rollup_quotes.database.base import (
    Base,
    get_engine,
    get_session_factory,
    get_db_session,
    get_session,
    init_db,
    close_db,
)

__all__ = [
    "Base",
    "get_engine",
    "get_session_factory",
    "get_db_session",
    "get_session",
    "init_db",
    "close_db",
]
