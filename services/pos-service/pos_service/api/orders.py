"""
POS Service — Orders API

Create / update / delete run through db.order_ops as one transaction each.
After commit the touched stock is pushed to the Redis cache and an order
event is published; both are best-effort.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.api.errors import http_error
from pos_service.core.cache import cached_out_of_stock, publish_order_event, sync_stock_cache
from pos_service.core.errors import InvalidStateError, PosError
from pos_service.core.order_lifecycle import OrderChange, SubmittedItem
from pos_service.db import order_ops, queries
from pos_service.db.database import get_db
from pos_service.models.enums import PaymentStatus
from pos_service.schemas.order import (
    OrderCreateRequest,
    OrderDetail,
    OrderListResponse,
    OrderSummary,
    OrderUpdateRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=OrderListResponse)
async def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    name: str | None = None,
    code_order: str | None = None,
    status_payment: PaymentStatus | None = None,
    db: AsyncSession = Depends(get_db),
):
    orders, total = await queries.list_orders(
        db, page=page, limit=limit, name=name, code_order=code_order, status_payment=status_payment
    )
    return OrderListResponse(
        orders=[OrderSummary.model_validate(o) for o in orders],
        total=total,
        page=page,
        limit=limit,
        pages=queries.page_count(total, limit),
    )


@router.get("/{order_id}", response_model=OrderDetail)
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await queries.get_order_detail(db, order_id)
    except PosError as exc:
        raise http_error(exc) from exc


@router.post("", response_model=OrderDetail, status_code=status.HTTP_201_CREATED)
async def create_order(payload: OrderCreateRequest, db: AsyncSession = Depends(get_db)):
    """
    Seat a customer: reserve the table, consume stock for every item and
    assign the next order code.
    """
    empty = await cached_out_of_stock(item.product_id for item in payload.items)
    if empty:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Product(s) {', '.join(map(str, empty))} out of stock (cache hit). Order rejected.",
        )

    try:
        result = await order_ops.create_order(
            db,
            name=payload.name,
            table_id=payload.table_id,
            items=[SubmittedItem(i.product_id, i.quantity) for i in payload.items],
        )
        detail = await queries.get_order_detail(db, result.order.id)
    except PosError as exc:
        raise http_error(exc) from exc

    await sync_stock_cache(result.stock)
    await publish_order_event(
        detail.order_id, "order_created", code_order=detail.code_order, table_id=detail.table_id
    )
    return detail


@router.put("/{order_id}", response_model=OrderDetail)
async def update_order(order_id: int, payload: OrderUpdateRequest, db: AsyncSession = Depends(get_db)):
    change = OrderChange(
        table_id=payload.table_id,
        status_payment=payload.status_payment,
        status_kitchen=payload.status_kitchen,
        payment_method_id=payload.payment_method_id,
    )
    items = [SubmittedItem(i.product_id, i.quantity, id=i.id) for i in payload.items]
    try:
        result = await order_ops.update_order(db, order_id, change, items, name=payload.name)
        detail = await queries.get_order_detail(db, result.order.id)
    except PosError as exc:
        raise http_error(exc) from exc

    await sync_stock_cache(result.stock)
    await publish_order_event(
        detail.order_id,
        "order_updated",
        status_payment=detail.status_payment.value,
        status_kitchen=detail.status_kitchen.value,
        table_id=detail.table_id,
    )
    return detail


@router.delete("/{order_id}")
async def delete_order(order_id: int, db: AsyncSession = Depends(get_db)):
    """Only an open (In Process) order can be deleted."""
    try:
        order = await queries.get_order(db, order_id)
        if order.status_payment != PaymentStatus.IN_PROCESS:
            raise InvalidStateError(
                f"order {order.code_order} is {order.status_payment.value}; "
                "only In Process orders can be deleted"
            )
        result = await order_ops.delete_order(db, order)
    except PosError as exc:
        raise http_error(exc) from exc

    await sync_stock_cache(result.stock)
    await publish_order_event(order_id, "order_deleted", code_order=result.order.code_order)
    return {"message": "order deleted", "order_id": order_id, "code_order": result.order.code_order}
