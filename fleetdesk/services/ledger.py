"""Installment operations shared by bills and payments.

Every function validates first and mutates the entry only once all checks
pass, so a rejected call leaves the entry exactly as it was. Callers persist
the entry afterwards.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from ulid import ULID

from fleetdesk.constants import LOCAL_TZ
from fleetdesk.errors import BusinessRuleError, NotFoundError, ValidationError
from fleetdesk.models import format_sar
from fleetdesk.models.ledger import Installment, LedgerEntry

logger = logging.getLogger(__name__)


def parse_paid_date(value: date | str | None) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError("Paid date is required", ["paid_date: field required"])
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValidationError("Invalid paid date", [f"paid_date: invalid date {value!r}"]) from None


def validate_amount(value: int | None) -> int:
    if value is None:
        raise ValidationError("Amount is required", ["amount: field required"])
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Amount must be a whole number of halalas", ["amount: invalid number"])
    if value <= 0:
        raise ValidationError("Amount must be greater than zero", ["amount: must be greater than zero"])
    return value


def add_installment(
    entry: LedgerEntry,
    amount: int | None,
    paid_date: date | str | None,
    notes: str = "",
) -> Installment:
    amount = validate_amount(amount)
    when = parse_paid_date(paid_date)
    if entry.is_fully_paid:
        raise BusinessRuleError("This entry is already fully paid")
    remaining = entry.total_amount - entry.paid
    if amount > remaining:
        raise BusinessRuleError(f"Installment exceeds the remaining balance of {format_sar(remaining)}")

    installment = Installment(
        uuid=str(ULID()),
        amount=amount,
        paid_date=when,
        notes=notes,
        sort_order=len(entry.installments),
        created_at=datetime.now(LOCAL_TZ),
    )
    entry.installments.append(installment)
    entry.refresh()
    logger.debug("Installment %s added: amount=%d, status=%s", installment.uuid, amount, entry.status.value)
    return installment


def update_installment(
    entry: LedgerEntry,
    installment_uuid: str,
    amount: int | None,
    paid_date: date | str | None,
    notes: str = "",
) -> Installment:
    installment = entry.find_installment(installment_uuid)
    if installment is None:
        raise NotFoundError("Installment", installment_uuid)
    amount = validate_amount(amount)
    when = parse_paid_date(paid_date)
    others = sum(i.amount for i in entry.installments if i.uuid != installment_uuid)
    if others + amount > entry.total_amount:
        remaining = entry.total_amount - others
        raise BusinessRuleError(f"Installment exceeds the remaining balance of {format_sar(remaining)}")

    installment.amount = amount
    installment.paid_date = when
    installment.notes = notes
    entry.refresh()
    logger.debug("Installment %s updated: amount=%d, status=%s", installment_uuid, amount, entry.status.value)
    return installment


def delete_installment(entry: LedgerEntry, installment_uuid: str) -> None:
    if entry.find_installment(installment_uuid) is None:
        raise NotFoundError("Installment", installment_uuid)
    entry.installments = [i for i in entry.installments if i.uuid != installment_uuid]
    entry.refresh()
    logger.debug("Installment %s removed, status=%s", installment_uuid, entry.status.value)


def change_total(entry: LedgerEntry, new_total: int) -> None:
    if isinstance(new_total, bool) or not isinstance(new_total, int) or new_total < 0:
        raise ValidationError("Total amount must be zero or more", ["total_amount: invalid amount"])
    if new_total < entry.paid:
        raise BusinessRuleError(
            f"Total amount cannot be less than the amount already paid ({format_sar(entry.paid)})"
        )
    entry.total_amount = new_total
    entry.refresh()
