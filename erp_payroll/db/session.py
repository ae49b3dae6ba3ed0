"""Opinionated SQLAlchemy session helpers."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from erp_payroll.models import Base

from .engine import create_sync_engine, get_engine


def get_sessionmaker(url: str | None = None, **kwargs) -> sessionmaker:
    """Return a ``sessionmaker`` bound to the shared engine, or to ``url``."""

    engine = create_sync_engine(url, **kwargs) if url else get_engine()
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_tables(engine: Engine | None = None) -> None:
    """Create every payroll table that does not exist yet."""

    Base.metadata.create_all(engine or get_engine())


@contextmanager
def session_scope(url: str | None = None, **kwargs) -> Iterator[Session]:
    """Provide a session for imperative scripts.

    Services commit their own units of work; anything left pending when the
    block exits cleanly is committed, and everything is rolled back on error.
    """

    Session = get_sessionmaker(url, **kwargs)
    session = Session()
    try:
        yield session
        session.commit()
    except Exception:  # pragma: no cover - re-raise for callers
        session.rollback()
        raise
    finally:
        session.close()
