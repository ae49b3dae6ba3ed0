"""Shared helpers for payroll repositories."""
from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from erp_payroll.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Base repository bound to one session and one mapped class."""

    model: type[ModelT]

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, entity_id: int) -> ModelT | None:
        return self._session.get(self.model, entity_id)

    def add(self, entity: ModelT) -> ModelT:
        self._session.add(entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        self._session.delete(entity)

    def _first_where(self, *criteria: Any) -> ModelT | None:
        return self._session.execute(select(self.model).where(*criteria)).scalars().first()

    def _exists_where(self, *criteria: Any) -> bool:
        statement = select(self.model.id).where(*criteria).limit(1)  # type: ignore[attr-defined]
        return self._session.execute(statement).first() is not None
