from __future__ import annotations

from typing import Protocol, Sequence

from .model import SalaryRecord


class SalaryRepository(Protocol):
    def add(self, record: SalaryRecord) -> int:
        raise NotImplementedError

    def list_for_month(self, employee_id: str, month: int, year: int) -> Sequence[SalaryRecord]:
        raise NotImplementedError
