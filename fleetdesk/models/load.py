from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel


class RentalType(str, Enum):
    PER_DAY = "per_day"
    PER_JOB = "per_job"
    PER_KM = "per_km"


class LoadStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_TRANSIT = "in-transit"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ALLOWED_TRANSITIONS: dict[LoadStatus, set[LoadStatus]] = {
    LoadStatus.PENDING: {LoadStatus.ASSIGNED, LoadStatus.CANCELLED},
    LoadStatus.ASSIGNED: {LoadStatus.IN_TRANSIT, LoadStatus.COMPLETED, LoadStatus.CANCELLED},
    LoadStatus.IN_TRANSIT: {LoadStatus.COMPLETED},
    LoadStatus.COMPLETED: set(),
    LoadStatus.CANCELLED: set(),
}


def days_between(start: date | None, end: date | None) -> int:
    """Whole days rented; a same-day rental counts as one day."""
    if start is None or end is None:
        return 0
    seconds = (end - start).total_seconds()
    return max(1, math.ceil(seconds / 86400))


def compute_rental_amount(
    rental_type: RentalType,
    price: int,
    days: int = 0,
    distance_km: float | None = None,
) -> int:
    if rental_type == RentalType.PER_DAY:
        return price * days
    if rental_type == RentalType.PER_KM:
        return round(price * (distance_km or 0))
    return price


class Load(BaseModel):
    id: int | None = None
    uuid: str = ""
    rental_code: str = ""
    vehicle_id: int | None = None
    vehicle_type: str
    plate_no: str = ""
    company_id: int | None = None
    driver_id: int | None = None
    from_location: str
    to_location: str
    description: str = ""
    rental_type: RentalType = RentalType.PER_DAY
    rental_price_per_day: int = 0  # halalas per unit of rental_type
    distance_km: float | None = None
    start_date: date | None = None
    end_date: date | None = None
    days_rented: int = 0
    rental_amount: int = 0  # halalas
    rental_date: date | None = None
    status: LoadStatus = LoadStatus.PENDING
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def has_pricing(self) -> bool:
        if self.rental_price_per_day <= 0:
            return False
        if self.rental_type == RentalType.PER_DAY:
            return self.start_date is not None and self.end_date is not None
        if self.rental_type == RentalType.PER_KM:
            return bool(self.distance_km)
        return True

    def reprice(self) -> None:
        """Derive days_rented and, when pricing is complete, rental_amount."""
        self.days_rented = days_between(self.start_date, self.end_date)
        if self.has_pricing:
            self.rental_amount = compute_rental_amount(
                self.rental_type,
                self.rental_price_per_day,
                days=self.days_rented,
                distance_km=self.distance_km,
            )

    def can_transition(self, target: LoadStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]
