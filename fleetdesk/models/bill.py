from __future__ import annotations

import datetime as dt
from enum import Enum

from fleetdesk.models.ledger import LedgerEntry, recalculate


class BillType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Bill(LedgerEntry):
    id: int | None = None
    uuid: str = ""
    type: BillType
    name: str
    paid_amount: int = 0  # halalas
    date: dt.date
    customer_id: int | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    deleted_at: dt.datetime | None = None

    @property
    def paid(self) -> int:
        return self.paid_amount

    @property
    def due_amount(self) -> int:
        return self.total_amount - self.paid_amount

    def refresh(self) -> None:
        self.paid_amount, _, self.status = recalculate(self.total_amount, self.installments)
