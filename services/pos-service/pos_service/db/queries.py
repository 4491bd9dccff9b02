"""
POS Service — Read side: order listing/detail, open tables, payment methods

Read-only queries. They never lock rows and never write.
"""
import math

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.core.errors import NotFoundError
from pos_service.models.enums import PaymentStatus
from pos_service.models.inventory import Product
from pos_service.models.order import Order, OrderItem
from pos_service.models.table import DiningTable, PaymentMethod
from pos_service.schemas.order import OrderDetail, OrderItemOut


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


async def list_orders(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    name: str | None = None,
    code_order: str | None = None,
    status_payment: PaymentStatus | None = None,
) -> tuple[list[Order], int]:
    query = select(Order).where(Order.deleted_at.is_(None))
    if name:
        query = query.where(Order.name.ilike(f"{name}%"))
    if code_order:
        query = query.where(Order.code_order == code_order)
    if status_payment is not None:
        query = query.where(Order.status_payment == status_payment)

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(
        query.order_by(Order.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all()), total


async def get_order(db: AsyncSession, order_id: int) -> Order:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id, Order.deleted_at.is_(None))
        .execution_options(populate_existing=True)
    )
    order = result.scalar_one_or_none()
    if order is None:
        raise NotFoundError(f"order {order_id} not found")
    return order


async def get_order_detail(db: AsyncSession, order_id: int) -> OrderDetail:
    order = await get_order(db, order_id)

    table_name = (
        await db.execute(select(DiningTable.name).where(DiningTable.id == order.table_id))
    ).scalar_one_or_none()
    payment_name = None
    if order.payment_method_id is not None:
        payment_name = (
            await db.execute(
                select(PaymentMethod.name).where(PaymentMethod.id == order.payment_method_id)
            )
        ).scalar_one_or_none()

    rows = await db.execute(
        select(OrderItem, Product.name, Product.price)
        .join(Product, Product.id == OrderItem.product_id)
        .where(OrderItem.order_id == order.id)
        .order_by(OrderItem.id)
        .execution_options(populate_existing=True)
    )
    items = [
        OrderItemOut(
            order_item_id=item.id,
            product_id=item.product_id,
            product_name=product_name,
            product_price=price,
            quantity=item.quantity,
            sub_total=item.sub_total,
        )
        for item, product_name, price in rows.all()
    ]

    return OrderDetail(
        order_id=order.id,
        code_order=order.code_order,
        name=order.name,
        table_id=order.table_id,
        table_name=table_name,
        payment_method_id=order.payment_method_id,
        payment_method_name=payment_name,
        status_payment=order.status_payment,
        status_kitchen=order.status_kitchen,
        tax=order.tax,
        amount=order.amount,
        created_at=order.created_at,
        items=items,
    )


async def list_available_tables(
    db: AsyncSession, page: int = 1, limit: int = 10
) -> tuple[list[DiningTable], int]:
    query = select(DiningTable).where(DiningTable.status.is_(True))
    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(
        query.order_by(DiningTable.id)
        .offset((page - 1) * limit)
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all()), total


async def list_payment_methods(db: AsyncSession) -> list[PaymentMethod]:
    result = await db.execute(
        select(PaymentMethod).where(PaymentMethod.status.is_(True)).order_by(PaymentMethod.id)
    )
    return list(result.scalars().all())
