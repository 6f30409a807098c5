from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class DriverStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class Driver(BaseModel):
    id: int | None = None
    uuid: str = ""
    driver_code: str = ""
    name: str
    contact: str = ""
    license_no: str | None = None
    iqama_id: str | None = None
    status: DriverStatus = DriverStatus.ACTIVE
    email: str = ""
    phone_country_code: str = "+966"
    phone_number: str = ""
    address: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
