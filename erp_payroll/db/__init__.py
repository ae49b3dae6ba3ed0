"""Database helpers and SQLAlchemy session factories."""

from .engine import create_sync_engine, get_engine
from .session import create_tables, get_sessionmaker, session_scope

__all__ = [
    "create_sync_engine",
    "create_tables",
    "get_engine",
    "get_sessionmaker",
    "session_scope",
]
