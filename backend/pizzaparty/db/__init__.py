"""Database package with engine and session management."""

from pizzaparty.db.session import (
    async_session_maker,
    create_db_and_tables,
    dispose_engine,
    engine,
)

__all__ = [
    "async_session_maker",
    "create_db_and_tables",
    "dispose_engine",
    "engine",
]
