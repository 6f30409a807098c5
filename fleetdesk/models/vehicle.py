from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel


class VehicleStatus(str, Enum):
    AVAILABLE = "available"
    RENTED = "rented"
    MAINTENANCE = "maintenance"


class AcquisitionType(str, Enum):
    BOUGHT = "bought"
    RENTED = "rented"


class Vehicle(BaseModel):
    id: int | None = None
    uuid: str = ""
    vehicle_code: str = ""
    company_id: int
    vehicle_type: str
    plate_no: str
    status: VehicleStatus = VehicleStatus.AVAILABLE
    manufacturer: str = ""
    year: int | None = None
    capacity: int | None = None
    acquisition_cost: int = 0  # halalas
    acquisition_type: AcquisitionType = AcquisitionType.BOUGHT
    acquisition_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
