from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from fleetdesk.models.transaction import (
    BulkResult,
    RentalTransactionDetail,
    RentalTransactionInput,
    RentalTransactionSummary,
    RentalTransactionUpdate,
)
from web.deps import get_transaction_service
from web.schemas import BulkTransactions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("/rental", status_code=201)
async def rental_transaction_create(request: Request, body: RentalTransactionInput) -> dict:
    logger.info("POST /transactions/rental - vehicle_type=%s", body.vehicle_type)
    summary: RentalTransactionSummary = get_transaction_service(request).create_rental_transaction(body)
    return {"message": "Rental transaction created successfully", "data": summary.model_dump(mode="json")}


@router.post("/rental/bulk")
async def rental_transaction_bulk(request: Request, body: BulkTransactions) -> BulkResult:
    logger.info("POST /transactions/rental/bulk - %d rows", len(body.transactions))
    return get_transaction_service(request).bulk_create(body.transactions)


@router.get("/rental/{id_or_code}")
async def rental_transaction_detail(request: Request, id_or_code: str) -> RentalTransactionDetail:
    return get_transaction_service(request).get_rental_transaction(id_or_code)


@router.put("/rental/{id_or_code}")
async def rental_transaction_update(
    request: Request, id_or_code: str, body: RentalTransactionUpdate
) -> RentalTransactionDetail:
    logger.info("PUT /transactions/rental/%s", id_or_code)
    return get_transaction_service(request).update_rental_transaction(id_or_code, body)
