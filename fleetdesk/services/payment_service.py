from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fleetdesk.errors import NotFoundError, ValidationError
from fleetdesk.models.ledger import Installment
from fleetdesk.models.payment import Payment
from fleetdesk.repositories.base import PaymentRepository
from fleetdesk.services import ledger
from fleetdesk.services.code_service import CodeGenerator

logger = logging.getLogger(__name__)

# Scalar fields a client may patch directly. Totals go through ledger.change_total;
# paid/due/status are always derived.
EDITABLE_FIELDS = {
    "payer",
    "payer_type",
    "payer_id",
    "payee",
    "payee_type",
    "payee_id",
    "description",
    "vehicle_type",
    "plate_no",
    "from_location",
    "to_location",
    "acquisition_date",
    "rental_date",
    "transaction_date",
    "vehicle_id",
    "driver_id",
    "company_id",
}


class PaymentService:
    def __init__(self, repo: PaymentRepository, codes: CodeGenerator) -> None:
        self.repo = repo
        self.codes = codes

    def create_payment(self, payment: Payment) -> Payment:
        if not payment.payer or not payment.payer.strip():
            raise ValidationError("Payer is required", ["payer: field required"])
        if payment.total_amount < 0:
            raise ValidationError("Total amount must be zero or more", ["total_amount: invalid amount"])
        if not payment.receipt_code:
            payment.receipt_code = self.codes.receipt_code()
        payment.installments = []
        payment.refresh()
        result = self.repo.create(payment)
        logger.info(
            "Payment created: uuid=%s, receipt=%s, type=%s, total=%d",
            result.uuid,
            result.receipt_code,
            result.payment_type.value,
            result.total_amount,
        )
        return result

    def list_payments(self, payment_type: str | None = None, status: str | None = None) -> list[Payment]:
        result = self.repo.list_all(payment_type=payment_type, status=status)
        logger.debug("Listed %d payments (type=%s, status=%s)", len(result), payment_type, status)
        return result

    def get_payment(self, uuid: str) -> Payment:
        payment = self.repo.get_by_uuid(uuid)
        logger.debug("get_payment uuid=%s found=%s", uuid, payment is not None)
        if payment is None:
            raise NotFoundError("Payment", uuid)
        return payment

    def update_payment(self, uuid: str, changes: dict[str, Any]) -> Payment:
        payment = self.get_payment(uuid)
        apply_changes(payment, changes)
        result = self.repo.update(payment)
        logger.info("Payment updated: uuid=%s, total=%d, status=%s", uuid, result.total_amount, result.status.value)
        return result

    def delete_payment(self, uuid: str) -> None:
        payment = self.get_payment(uuid)
        self.repo.delete(payment.id)
        logger.info("Payment %s soft-deleted", uuid)

    def add_installment(self, uuid: str, amount: int | None, paid_date: date | str | None, notes: str = "") -> Payment:
        payment = self.get_payment(uuid)
        installment = ledger.add_installment(payment, amount, paid_date, notes)
        result = self.repo.update(payment)
        logger.info(
            "Payment installment added: payment=%s, installment=%s, amount=%d, status=%s",
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
    ) -> Payment:
        payment = self.get_payment(uuid)
        ledger.update_installment(payment, installment_uuid, amount, paid_date, notes)
        result = self.repo.update(payment)
        logger.info("Payment installment updated: payment=%s, installment=%s", uuid, installment_uuid)
        return result

    def delete_installment(self, uuid: str, installment_uuid: str) -> Payment:
        payment = self.get_payment(uuid)
        ledger.delete_installment(payment, installment_uuid)
        result = self.repo.update(payment)
        logger.info("Payment installment deleted: payment=%s, installment=%s", uuid, installment_uuid)
        return result

    def get_installment(self, uuid: str, installment_uuid: str) -> tuple[Payment, Installment]:
        payment = self.get_payment(uuid)
        installment = payment.find_installment(installment_uuid)
        if installment is None:
            raise NotFoundError("Installment", installment_uuid)
        return payment, installment


def apply_changes(payment: Payment, changes: dict[str, Any]) -> None:
    """Patch editable scalars and the total on ``payment``, recomputing due/status.

    The total is checked first so a rejected change leaves the payment untouched.
    """
    total = changes.get("total_amount")
    if total is not None:
        ledger.change_total(payment, total)
    for field, value in changes.items():
        if field in EDITABLE_FIELDS:
            setattr(payment, field, value)
