"""
POS Service — Tables and payment methods (read only)
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.db import queries
from pos_service.db.database import get_db
from pos_service.schemas.table import PaymentMethodOut, TableListResponse, TableOut

router = APIRouter(tags=["tables"])


@router.get("/tables", response_model=TableListResponse)
async def list_tables(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Tables that are free to seat a new order."""
    tables, total = await queries.list_available_tables(db, page=page, limit=limit)
    return TableListResponse(
        tables=[TableOut.model_validate(t) for t in tables],
        total=total,
        page=page,
        limit=limit,
        pages=queries.page_count(total, limit),
    )


@router.get("/payments", response_model=list[PaymentMethodOut])
async def list_payments(db: AsyncSession = Depends(get_db)):
    return [PaymentMethodOut.model_validate(m) for m in await queries.list_payment_methods(db)]
