"""
POS Service — Order item hooks and reconciliation

Each item mutation carries its stock effect with it:
    create  → consume item.quantity
    update  → consume (new - old), or swap products
    delete  → restore item.quantity
"""
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.core.errors import NotFoundError
from pos_service.core.order_lifecycle import ItemLine, SubmittedItem, item_update_effects, line_subtotal
from pos_service.db.stock_ops import adjust_stock
from pos_service.models.inventory import Product
from pos_service.models.order import OrderItem


async def load_items(db: AsyncSession, order_id: int) -> list[OrderItem]:
    result = await db.execute(
        select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
    )
    return list(result.scalars().all())


def as_lines(items: Iterable[OrderItem]) -> list[ItemLine]:
    return [ItemLine(id=i.id, product_id=i.product_id, quantity=i.quantity) for i in items]


async def _orderable_product(db: AsyncSession, product_id: int) -> Product:
    product = await db.get(Product, product_id)
    if product is None or product.deleted_at is not None:
        raise NotFoundError(f"product {product_id} not found")
    return product


async def create_item(db: AsyncSession, order_id: int, submitted: SubmittedItem) -> OrderItem:
    product = await _orderable_product(db, submitted.product_id)
    item = OrderItem(
        order_id=order_id,
        product_id=product.id,
        quantity=submitted.quantity,
        sub_total=line_subtotal(product.price, submitted.quantity),
    )
    db.add(item)
    await db.flush()
    await adjust_stock(db, item.product_id, -item.quantity)
    return item


async def update_item(db: AsyncSession, item: OrderItem, submitted: SubmittedItem) -> OrderItem:
    old = ItemLine(id=item.id, product_id=item.product_id, quantity=item.quantity)
    product = await _orderable_product(db, submitted.product_id)

    item.product_id = product.id
    item.quantity = submitted.quantity
    item.sub_total = line_subtotal(product.price, submitted.quantity)
    await db.flush()

    for effect in item_update_effects(old, submitted):
        await adjust_stock(db, effect.product_id, effect.delta)
    return item


async def delete_item(db: AsyncSession, item: OrderItem) -> None:
    product_id, quantity = item.product_id, item.quantity
    await db.delete(item)
    await db.flush()
    await adjust_stock(db, product_id, quantity)


async def reconcile_items(db: AsyncSession, order_id: int, kept_ids: set[int]) -> list[int]:
    """
    Delete every persisted item of the order whose id is not in kept_ids.
    Only removes: creates/updates must already be flushed and their ids
    included in kept_ids, otherwise they would be deleted here.
    """
    removed: list[int] = []
    for item in await load_items(db, order_id):
        if item.id not in kept_ids:
            removed.append(item.id)
            await delete_item(db, item)
    return removed
