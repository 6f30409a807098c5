from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Request

from fleetdesk.models.report import MonthlyAnalytics
from web.deps import get_report_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/monthly-rental-analytics")
async def monthly_rental_analytics(
    request: Request,
    year: int | None = Query(default=None, ge=1970, le=9999),
) -> MonthlyAnalytics:
    logger.info("GET /dashboard/monthly-rental-analytics - year=%s", year)
    return get_report_service(request).monthly_rental_analytics(year)
