"""Installment ledger shared by bills and payments.

Paid, due and status are stored alongside the installments but are never set
directly: every mutation goes through ``refresh()``, which re-sums the
installment list with :func:`recalculate`.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel


class LedgerStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class Installment(BaseModel):
    id: int | None = None
    uuid: str = ""
    amount: int  # halalas
    paid_date: date
    notes: str = ""
    sort_order: int = 0
    created_at: datetime | None = None


def derive_status(paid: int, total: int) -> LedgerStatus:
    if paid <= 0:
        return LedgerStatus.UNPAID
    if paid < total:
        return LedgerStatus.PARTIAL
    return LedgerStatus.PAID


def recalculate(total: int, installments: list[Installment]) -> tuple[int, int, LedgerStatus]:
    """Return ``(paid, due, status)`` for a ledger with the given total."""
    paid = sum(i.amount for i in installments)
    return paid, total - paid, derive_status(paid, total)


class LedgerEntry(BaseModel):
    """Common shape of anything that is paid off in installments."""

    total_amount: int = 0  # halalas
    status: LedgerStatus = LedgerStatus.UNPAID
    installments: list[Installment] = []

    @property
    def paid(self) -> int:
        raise NotImplementedError

    @property
    def due(self) -> int:
        return self.total_amount - self.paid

    @property
    def is_fully_paid(self) -> bool:
        return self.paid >= self.total_amount

    def find_installment(self, installment_uuid: str) -> Installment | None:
        for installment in self.installments:
            if installment.uuid == installment_uuid:
                return installment
        return None

    def refresh(self) -> None:
        raise NotImplementedError
