"""Persistence for deduction rules."""
from __future__ import annotations

from sqlalchemy import select

from erp_payroll.models import Deduction

from .base import BaseRepository


class DeductionRepository(BaseRepository[Deduction]):
    model = Deduction

    def list_all(self) -> list[Deduction]:
        return list(self._session.execute(select(Deduction).order_by(Deduction.id.asc())).scalars())

    def get_by_code(self, code: str) -> Deduction | None:
        return self._first_where(Deduction.code == code)

    def get_by_name(self, name: str) -> Deduction | None:
        return self._first_where(Deduction.name == name)

    def exists_by_code(self, code: str) -> bool:
        return self._exists_where(Deduction.code == code)

    def exists_by_name(self, name: str) -> bool:
        return self._exists_where(Deduction.name == name)
