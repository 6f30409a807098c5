"""Sequential human-readable codes (COMP-001, DRV-001, RNT-2026-001, ESSA1001).

Numbers come from the ``code_counters`` table, one row per family, advanced
atomically by the repository. A family without a counter row is seeded from
the newest code already stored in its table so existing data keeps numbering
where it left off.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from fleetdesk.constants import LOCAL_TZ
from fleetdesk.repositories.base import CodeCounterRepository

logger = logging.getLogger(__name__)


class CodeFamily(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    source: str
    prefix: str
    width: int
    start: int = 1
    yearly: bool = False

    def prefix_for(self, year: int | None = None) -> str:
        if self.yearly:
            return f"{self.prefix}{year}-"
        return self.prefix

    def counter_key(self, year: int | None = None) -> str:
        return f"{self.name}-{year}" if self.yearly else self.name


FAMILIES: dict[str, CodeFamily] = {
    "company": CodeFamily(name="company", source="company", prefix="COMP-", width=3),
    "driver": CodeFamily(name="driver", source="driver", prefix="DRV-", width=3),
    "vehicle": CodeFamily(name="vehicle", source="vehicle", prefix="VEH-", width=3),
    "rental": CodeFamily(name="rental", source="rental", prefix="RNT-", width=3, yearly=True),
    "receipt": CodeFamily(name="receipt", source="receipt", prefix="ESSA", width=4, start=1001),
}


def _family(name: str) -> CodeFamily:
    try:
        return FAMILIES[name]
    except KeyError:
        raise ValueError(f"Unknown code family: {name}") from None


def format_code(family: str, number: int, year: int | None = None) -> str:
    fam = _family(family)
    if fam.yearly and year is None:
        raise ValueError(f"A year is required for {family} codes")
    return f"{fam.prefix_for(year)}{number:0{fam.width}d}"


def parse_code_number(family: str, code: str | None) -> int | None:
    """Extract the numeric suffix of ``code``, or None when it does not match the family."""
    if not code:
        return None
    fam = _family(family)
    middle = r"\d+-" if fam.yearly else ""
    match = re.fullmatch(rf"{re.escape(fam.prefix)}{middle}(\d+)", code)
    return int(match.group(1)) if match else None


class CodeGenerator:
    def __init__(self, repo: CodeCounterRepository) -> None:
        self.repo = repo

    def next_code(self, family: str, year: int | None = None) -> str:
        fam = _family(family)
        if fam.yearly and year is None:
            year = datetime.now(LOCAL_TZ).year

        def seed() -> int:
            last = self.repo.last_code(fam.source, fam.prefix_for(year))
            number = parse_code_number(family, last)
            start = fam.start if number is None else max(number + 1, fam.start)
            logger.info("Seeding %s counter at %d (last code=%s)", fam.counter_key(year), start, last)
            return start

        number = self.repo.increment(fam.counter_key(year), seed)
        code = format_code(family, number, year)
        logger.debug("Generated %s code %s", family, code)
        return code

    def company_code(self) -> str:
        return self.next_code("company")

    def driver_code(self) -> str:
        return self.next_code("driver")

    def vehicle_code(self) -> str:
        return self.next_code("vehicle")

    def rental_code(self, year: int | None = None) -> str:
        return self.next_code("rental", year)

    def receipt_code(self) -> str:
        return self.next_code("receipt")
