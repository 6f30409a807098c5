from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Company(BaseModel):
    id: int | None = None
    uuid: str = ""
    company_code: str = ""
    name: str
    contact: str = ""
    address: str = ""
    email: str = ""
    phone_country_code: str = "+91"
    phone_number: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def phone(self) -> str:
        return f"{self.phone_country_code}{self.phone_number}" if self.phone_number else ""
