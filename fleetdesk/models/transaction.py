"""Input and output shapes of the rental transaction workflow.

A transaction names its company and driver either by reference to an existing
row (``kind: "existing"``) or by the details of a new one (``kind: "new"``).
Older clients send a flat body (``company_id``, ``company_name``,
``driver_iqama_id``...); it is folded into the same shape before validation.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, model_validator

from fleetdesk.models.company import Company
from fleetdesk.models.driver import Driver
from fleetdesk.models.load import Load, RentalType
from fleetdesk.models.payment import Payment


class ExistingRef(BaseModel):
    kind: Literal["existing"] = "existing"
    id: str


class NewCompany(BaseModel):
    kind: Literal["new"] = "new"
    name: str = ""
    contact: str = ""
    address: str = ""
    email: str = ""
    phone_country_code: str = "+91"
    phone_number: str = ""


class NewDriver(BaseModel):
    kind: Literal["new"] = "new"
    name: str = ""
    iqama_id: str = ""
    license_no: str | None = None
    contact: str = ""
    phone_country_code: str = "+966"
    phone_number: str = ""


CompanyInput = Annotated[ExistingRef | NewCompany, Field(discriminator="kind")]
DriverInput = Annotated[ExistingRef | NewDriver, Field(discriminator="kind")]

_LEGACY_COMPANY_FIELDS = {
    "company_name": "name",
    "company_contact": "contact",
    "company_address": "address",
    "company_email": "email",
    "company_phone_country_code": "phone_country_code",
    "company_phone_number": "phone_number",
}

_LEGACY_DRIVER_FIELDS = {
    "driver_name": "name",
    "driver_iqama_id": "iqama_id",
    "driver_license_no": "license_no",
    "driver_contact": "contact",
    "driver_phone_country_code": "phone_country_code",
    "driver_phone_number": "phone_number",
}


def _fold_party(data: dict[str, Any], key: str, id_field: str, fields: dict[str, str]) -> None:
    legacy = {target: data.pop(source) for source, target in fields.items() if source in data}
    legacy_id = data.pop(id_field, None)
    if key in data:
        return
    if legacy_id:
        data[key] = {"kind": "existing", "id": str(legacy_id)}
    elif legacy.get("name"):
        data[key] = {"kind": "new", **{k: v for k, v in legacy.items() if v is not None}}


class RentalTransactionInput(BaseModel):
    company: CompanyInput | None = None
    driver: DriverInput | None = None
    vehicle_type: str = ""
    plate_no: str = ""
    acquisition_cost: int = 0  # halalas
    acquisition_date: date | None = None
    from_location: str = ""
    to_location: str = ""
    description: str = ""
    rental_type: RentalType = RentalType.PER_DAY
    rental_price_per_day: int = 0  # halalas
    distance_km: float | None = None
    start_date: date | None = None
    end_date: date | None = None
    rental_amount: int = 0  # halalas
    rental_date: date | None = None

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_body(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        _fold_party(data, "company", "company_id", _LEGACY_COMPANY_FIELDS)
        _fold_party(data, "driver", "driver_id", _LEGACY_DRIVER_FIELDS)
        if "load_description" in data and "description" not in data:
            data["description"] = data.pop("load_description")
        return data


class RentalTransactionUpdate(BaseModel):
    vehicle_type: str | None = None
    plate_no: str | None = None
    from_location: str | None = None
    to_location: str | None = None
    description: str | None = None
    rental_amount: int | None = Field(default=None, gt=0)
    rental_date: date | None = None
    acquisition_cost: int | None = Field(default=None, gt=0)
    acquisition_date: date | None = None


class CompanySummary(BaseModel):
    id: int
    uuid: str
    name: str
    company_code: str
    created: bool


class DriverSummary(BaseModel):
    id: int
    uuid: str
    name: str
    driver_code: str
    created: bool


class LoadSummary(BaseModel):
    id: int
    uuid: str
    rental_code: str
    from_location: str
    to_location: str


class PaymentsSummary(BaseModel):
    acquisition_payment_id: str
    acquisition_receipt_code: str
    acquisition_amount: int
    rental_payment_id: str
    rental_receipt_code: str
    rental_amount: int


class RentalTransactionSummary(BaseModel):
    company: CompanySummary
    driver: DriverSummary
    load: LoadSummary
    payments: PaymentsSummary


class RentalTransactionDetail(BaseModel):
    load: Load
    company: Company | None = None
    driver: Driver | None = None
    acquisition_payment: Payment | None = None
    rental_payment: Payment | None = None


class BulkRowError(BaseModel):
    index: int
    message: str
    errors: list[str] = []


class BulkResult(BaseModel):
    created: list[RentalTransactionSummary] = []
    errors: list[BulkRowError] = []
