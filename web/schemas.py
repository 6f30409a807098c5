"""Request bodies accepted by the JSON API.

Amounts are integer halalas. Entities are referenced by their public ``uuid``.
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, Field

from fleetdesk.models.bill import BillType
from fleetdesk.models.driver import DriverStatus
from fleetdesk.models.load import RentalType
from fleetdesk.models.payment import PartyType, PaymentType
from fleetdesk.models.vehicle import AcquisitionType, VehicleStatus


class InstallmentIn(BaseModel):
    amount: int | None = None
    paid_date: str | None = None
    notes: str = ""


class BillCreate(BaseModel):
    type: BillType
    name: str
    total_amount: int = Field(ge=0)
    date: dt.date
    customer_id: int | None = None


class BillUpdate(BaseModel):
    type: BillType | None = None
    name: str | None = None
    total_amount: int | None = None
    date: dt.date | None = None
    customer_id: int | None = None


class PaymentCreate(BaseModel):
    payment_type: PaymentType
    payer: str
    payer_type: PartyType | None = None
    payer_id: int | None = None
    payee: str = ""
    payee_type: PartyType | None = None
    payee_id: int | None = None
    total_amount: int = Field(ge=0)
    description: str = ""
    vehicle_type: str = ""
    plate_no: str = ""
    from_location: str = ""
    to_location: str = ""
    acquisition_date: dt.date | None = None
    rental_date: dt.date | None = None
    transaction_date: dt.date | None = None


class PaymentUpdate(BaseModel):
    payer: str | None = None
    payer_type: PartyType | None = None
    payer_id: int | None = None
    payee: str | None = None
    payee_type: PartyType | None = None
    payee_id: int | None = None
    total_amount: int | None = None
    description: str | None = None
    vehicle_type: str | None = None
    plate_no: str | None = None
    from_location: str | None = None
    to_location: str | None = None
    acquisition_date: dt.date | None = None
    rental_date: dt.date | None = None
    transaction_date: dt.date | None = None


class CompanyIn(BaseModel):
    name: str
    contact: str = ""
    address: str = ""
    email: str = ""
    phone_country_code: str = "+91"
    phone_number: str = ""


class CompanyUpdate(BaseModel):
    name: str | None = None
    contact: str | None = None
    address: str | None = None
    email: str | None = None
    phone_country_code: str | None = None
    phone_number: str | None = None


class DriverIn(BaseModel):
    name: str
    contact: str = ""
    license_no: str | None = None
    iqama_id: str | None = None
    status: DriverStatus = DriverStatus.ACTIVE
    email: str = ""
    phone_country_code: str = "+966"
    phone_number: str = ""
    address: str = ""


class DriverUpdate(BaseModel):
    name: str | None = None
    contact: str | None = None
    license_no: str | None = None
    iqama_id: str | None = None
    status: DriverStatus | None = None
    email: str | None = None
    phone_country_code: str | None = None
    phone_number: str | None = None
    address: str | None = None


class VehicleIn(BaseModel):
    company_id: str
    vehicle_type: str
    plate_no: str
    status: VehicleStatus = VehicleStatus.AVAILABLE
    manufacturer: str = ""
    year: int | None = None
    capacity: int | None = None
    acquisition_cost: int = Field(default=0, ge=0)
    acquisition_type: AcquisitionType = AcquisitionType.BOUGHT
    acquisition_date: dt.date | None = None


class VehicleUpdate(BaseModel):
    vehicle_type: str | None = None
    plate_no: str | None = None
    status: VehicleStatus | None = None
    manufacturer: str | None = None
    year: int | None = None
    capacity: int | None = None
    acquisition_cost: int | None = None
    acquisition_type: AcquisitionType | None = None
    acquisition_date: dt.date | None = None


class LoadCreate(BaseModel):
    vehicle_id: str | None = None
    company_id: str | None = None
    vehicle_type: str = ""
    plate_no: str = ""
    from_location: str = ""
    to_location: str = ""
    description: str = ""
    rental_type: RentalType = RentalType.PER_DAY
    rental_price_per_day: int = Field(default=0, ge=0)
    distance_km: float | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    rental_amount: int = Field(default=0, ge=0)
    rental_date: dt.date | None = None


class LoadUpdate(BaseModel):
    vehicle_type: str | None = None
    plate_no: str | None = None
    from_location: str | None = None
    to_location: str | None = None
    description: str | None = None
    rental_type: RentalType | None = None
    rental_price_per_day: int | None = Field(default=None, gt=0)
    distance_km: float | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    rental_amount: int | None = Field(default=None, gt=0)
    rental_date: dt.date | None = None


class AssignDriver(BaseModel):
    driver_id: str


class BulkTransactions(BaseModel):
    transactions: list[dict[str, Any]]
