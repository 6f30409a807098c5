from __future__ import annotations

import logging
from datetime import date

from fleetdesk.errors import NotFoundError, ValidationError
from fleetdesk.models.bill import Bill, BillType
from fleetdesk.models.ledger import Installment
from fleetdesk.repositories.base import BillRepository
from fleetdesk.services import ledger

logger = logging.getLogger(__name__)


class BillService:
    def __init__(self, repo: BillRepository) -> None:
        self.repo = repo

    def create_bill(
        self,
        bill_type: BillType,
        name: str,
        total_amount: int,
        bill_date: date,
        customer_id: int | None = None,
    ) -> Bill:
        if not name or not name.strip():
            raise ValidationError("Bill name is required", ["name: field required"])
        if total_amount < 0:
            raise ValidationError("Total amount must be zero or more", ["total_amount: invalid amount"])
        bill = Bill(
            type=bill_type,
            name=name.strip(),
            total_amount=total_amount,
            date=bill_date,
            customer_id=customer_id,
        )
        bill.refresh()
        result = self.repo.create(bill)
        logger.info("Bill created: uuid=%s, type=%s, total=%d", result.uuid, result.type.value, result.total_amount)
        return result

    def list_bills(self, bill_type: str | None = None, status: str | None = None) -> list[Bill]:
        result = self.repo.list_all(bill_type=bill_type, status=status)
        logger.debug("Listed %d bills (type=%s, status=%s)", len(result), bill_type, status)
        return result

    def get_bill(self, uuid: str) -> Bill:
        bill = self.repo.get_by_uuid(uuid)
        logger.debug("get_bill uuid=%s found=%s", uuid, bill is not None)
        if bill is None:
            raise NotFoundError("Bill", uuid)
        return bill

    def update_bill(
        self,
        uuid: str,
        name: str | None = None,
        total_amount: int | None = None,
        bill_date: date | None = None,
        bill_type: BillType | None = None,
        customer_id: int | None = None,
    ) -> Bill:
        bill = self.get_bill(uuid)
        if name is not None:
            if not name.strip():
                raise ValidationError("Bill name is required", ["name: field required"])
            bill.name = name.strip()
        if total_amount is not None:
            ledger.change_total(bill, total_amount)
        if bill_date is not None:
            bill.date = bill_date
        if bill_type is not None:
            bill.type = bill_type
        if customer_id is not None:
            bill.customer_id = customer_id
        result = self.repo.update(bill)
        logger.info("Bill updated: uuid=%s, total=%d, status=%s", uuid, result.total_amount, result.status.value)
        return result

    def delete_bill(self, uuid: str) -> None:
        bill = self.get_bill(uuid)
        self.repo.delete(bill.id)
        logger.info("Bill %s soft-deleted", uuid)

    def add_installment(self, uuid: str, amount: int | None, paid_date: date | str | None, notes: str = "") -> Bill:
        bill = self.get_bill(uuid)
        installment = ledger.add_installment(bill, amount, paid_date, notes)
        result = self.repo.update(bill)
        logger.info(
            "Bill installment added: bill=%s, installment=%s, amount=%d, status=%s",
            uuid,
            installment.uuid,
            installment.amount,
            result.status.value,
        )
        return result

    def update_installment(
        self,
        uuid: str,
        installment_uuid: str,
        amount: int | None,
        paid_date: date | str | None,
        notes: str = "",
    ) -> Bill:
        bill = self.get_bill(uuid)
        ledger.update_installment(bill, installment_uuid, amount, paid_date, notes)
        result = self.repo.update(bill)
        logger.info("Bill installment updated: bill=%s, installment=%s", uuid, installment_uuid)
        return result

    def delete_installment(self, uuid: str, installment_uuid: str) -> Bill:
        bill = self.get_bill(uuid)
        ledger.delete_installment(bill, installment_uuid)
        result = self.repo.update(bill)
        logger.info("Bill installment deleted: bill=%s, installment=%s", uuid, installment_uuid)
        return result

    def get_installment(self, uuid: str, installment_uuid: str) -> tuple[Bill, Installment]:
        bill = self.get_bill(uuid)
        installment = bill.find_installment(installment_uuid)
        if installment is None:
            raise NotFoundError("Installment", installment_uuid)
        return bill, installment
