from __future__ import annotations

import logging

from fleetdesk.errors import BusinessRuleError, NotFoundError
from fleetdesk.models.payment import Payment, PaymentType
from fleetdesk.pdf.receipt import ReceiptPDF
from fleetdesk.repositories.base import CompanyRepository, DriverRepository, PaymentRepository

logger = logging.getLogger(__name__)

RECEIPT_KINDS = {
    "company": PaymentType.VEHICLE_ACQUISITION,
    "driver": PaymentType.DRIVER_RENTAL,
}


class ReceiptService:
    def __init__(
        self,
        payment_repo: PaymentRepository,
        company_repo: CompanyRepository,
        driver_repo: DriverRepository,
    ) -> None:
        self.payment_repo = payment_repo
        self.company_repo = company_repo
        self.driver_repo = driver_repo
        self.pdf_generator = ReceiptPDF()

    def _parties(self, kind: str, payment: Payment) -> list[tuple[str, str]]:
        company = self.company_repo.get_by_id(payment.company_id) if payment.company_id else None
        # the company pays on acquisitions and is paid on rentals
        fallback = payment.payer if kind == "company" else payment.payee
        lines = [("Company", company.name if company else fallback)]
        if company is not None:
            lines.append(("Company code", company.company_code))
            if company.phone:
                lines.append(("Company phone", company.phone))
        if kind == "company":
            lines.append(("Paid to", payment.payee or "-"))
            return lines

        driver = self.driver_repo.get_by_id(payment.driver_id) if payment.driver_id else None
        lines.append(("Driver", driver.name if driver else payment.payer))
        if driver is not None:
            lines.append(("Driver code", driver.driver_code))
            lines.append(("Iqama ID", driver.iqama_id or "-"))
            if driver.phone_number:
                lines.append(("Driver phone", f"{driver.phone_country_code}{driver.phone_number}"))
        return lines

    def render(self, kind: str, payment_uuid: str, installment_uuid: str | None = None) -> tuple[str, bytes]:
        """Return ``(filename, pdf_bytes)`` for a payment receipt or installment voucher."""
        expected = RECEIPT_KINDS.get(kind)
        if expected is None:
            raise NotFoundError("Receipt type", kind)
        payment = self.payment_repo.get_by_uuid(payment_uuid)
        if payment is None:
            raise NotFoundError("Payment", payment_uuid)
        if payment.payment_type != expected:
            raise BusinessRuleError(f"A {kind} receipt requires a {expected.value} payment")

        installment = None
        if installment_uuid is not None:
            installment = payment.find_installment(installment_uuid)
            if installment is None:
                raise NotFoundError("Installment", installment_uuid)

        pdf = self.pdf_generator.generate(payment, self._parties(kind, payment), installment)
        suffix = f"-{installment_uuid}" if installment_uuid else ""
        filename = f"{kind}-receipt-{payment.receipt_code}{suffix}.pdf"
        logger.info("Receipt rendered: %s", filename)
        return filename, pdf
