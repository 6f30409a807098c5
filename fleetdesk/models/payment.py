from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from fleetdesk.models.ledger import LedgerEntry, recalculate


class PaymentType(str, Enum):
    VEHICLE_ACQUISITION = "vehicle-acquisition"  # company pays supplier for the vehicle
    DRIVER_RENTAL = "driver-rental"  # driver pays company for the job


class PartyType(str, Enum):
    COMPANY = "company"
    DRIVER = "driver"
    SUPPLIER = "supplier"


class Payment(LedgerEntry):
    id: int | None = None
    uuid: str = ""
    receipt_code: str = ""
    payment_type: PaymentType
    payer: str
    payer_type: PartyType | None = None
    payer_id: int | None = None
    payee: str = ""
    payee_type: PartyType | None = None
    payee_id: int | None = None
    total_paid: int = 0  # halalas
    total_due: int = 0  # halalas
    description: str = ""
    vehicle_type: str = ""
    plate_no: str = ""
    from_location: str = ""
    to_location: str = ""
    acquisition_date: date | None = None
    rental_date: date | None = None
    transaction_date: date | None = None
    vehicle_id: int | None = None
    load_id: int | None = None
    driver_id: int | None = None
    company_id: int | None = None
    related_payment_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def paid(self) -> int:
        return self.total_paid

    def refresh(self) -> None:
        self.total_paid, self.total_due, self.status = recalculate(self.total_amount, self.installments)
