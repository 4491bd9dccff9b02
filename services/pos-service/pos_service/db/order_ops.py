"""
POS Service — Order lifecycle operations (create / update / delete)

Each operation is one unit of work on the session it is given:
  1. lock the order row and every product it can touch (ascending id)
  2. plan the transition with core.order_lifecycle (pure)
  3. apply the planned effects and item changes in order
  4. commit, or roll back everything on the first error

Order, order items, product stock and table availability therefore move
together: no partial stock or table effect is ever committed.
"""
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.core.config import get_settings
from pos_service.core.errors import DuplicateError, NotFoundError, PosError, ValidationError
from pos_service.core.order_lifecycle import (
    AdjustStock,
    Effect,
    OrderChange,
    OrderState,
    RequireTableAvailable,
    SetTableAvailability,
    SubmittedItem,
    diff_items,
    order_total,
    plan_create,
    plan_delete,
    plan_update,
)
from pos_service.db.order_code import next_order_code
from pos_service.db.order_items import as_lines, create_item, load_items, reconcile_items, update_item
from pos_service.db.stock_ops import adjust_stock, lock_products
from pos_service.db.table_ops import ensure_table_available, set_table_availability
from pos_service.models.enums import KitchenStatus, PaymentStatus
from pos_service.models.inventory import Product
from pos_service.models.order import Order
from pos_service.models.table import PaymentMethod

settings = get_settings()
logger = logging.getLogger(__name__)


@dataclass
class LifecycleResult:
    order: Order
    products: dict[int, Product] = field(default_factory=dict)

    @property
    def stock(self) -> dict[int, int]:
        """Stock of every product the operation locked, as committed."""
        return {pid: product.stock for pid, product in self.products.items()}


def constraint_error(exc: IntegrityError) -> PosError:
    """Translate a violated database constraint into the matching domain error."""
    detail = str(exc.orig)
    if "code_order" in detail:
        return DuplicateError("order code already taken by a concurrent order, retry the request")
    if "UNIQUE" in detail.upper() or "DUPLICATE" in detail.upper():
        return DuplicateError(f"order conflicts with an existing record: {detail}")
    return ValidationError(f"order violates a database constraint: {detail}")


@asynccontextmanager
async def _unit_of_work(db: AsyncSession, action: str):
    try:
        yield
        await db.commit()
    except PosError as exc:
        await db.rollback()
        logger.warning("%s rejected: %s", action, exc)
        raise
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("%s hit a constraint: %s", action, exc.orig)
        raise constraint_error(exc) from exc
    except Exception:
        await db.rollback()
        logger.exception("%s failed", action)
        raise


async def _apply(db: AsyncSession, effects: Iterable[Effect]) -> None:
    for effect in effects:
        if isinstance(effect, RequireTableAvailable):
            await ensure_table_available(db, effect.table_id)
        elif isinstance(effect, SetTableAvailability):
            await set_table_availability(db, effect.table_id, effect.available)
        elif isinstance(effect, AdjustStock):
            await adjust_stock(db, effect.product_id, effect.delta)
        else:
            raise TypeError(f"unknown lifecycle effect: {effect!r}")


async def _recalculate_amount(db: AsyncSession, order: Order) -> None:
    items = await load_items(db, order.id)
    order.amount = order_total((item.sub_total for item in items), order.tax)


async def _ensure_payment_method(db: AsyncSession, payment_method_id: int) -> None:
    result = await db.execute(
        select(PaymentMethod).where(
            PaymentMethod.id == payment_method_id, PaymentMethod.status.is_(True)
        )
    )
    if result.scalar_one_or_none() is None:
        raise NotFoundError(f"payment method {payment_method_id} not found")


async def get_order_for_update(db: AsyncSession, order_id: int) -> Order:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id, Order.deleted_at.is_(None))
        .with_for_update()
    )
    order = result.scalar_one_or_none()
    if order is None:
        raise NotFoundError(f"order {order_id} not found")
    return order


def _state_of(order: Order) -> OrderState:
    return OrderState(
        table_id=order.table_id,
        status_payment=order.status_payment,
        status_kitchen=order.status_kitchen,
        payment_method_id=order.payment_method_id,
    )


async def create_order(
    db: AsyncSession,
    name: str,
    table_id: int,
    items: list[SubmittedItem],
) -> LifecycleResult:
    if not items:
        raise ValidationError("order items cannot be empty")
    if any(item.quantity <= 0 for item in items):
        raise ValidationError("quantity must be greater than 0")

    plan = plan_create(table_id)
    async with _unit_of_work(db, "create order"):
        products = await lock_products(db, (item.product_id for item in items))
        await _apply(db, plan.before_persist)

        order = Order(
            name=name,
            table_id=table_id,
            code_order=await next_order_code(db),
            tax=Decimal(str(settings.DEFAULT_TAX_RATE)),
            status_payment=PaymentStatus.IN_PROCESS,
            status_kitchen=KitchenStatus.IN_THE_KITCHEN,
        )
        db.add(order)
        await db.flush()

        for item in items:
            await create_item(db, order.id, SubmittedItem(item.product_id, item.quantity))
        await _recalculate_amount(db, order)

        await _apply(db, plan.after_persist)

    await db.refresh(order)
    logger.info("Order %s created at table %d with %d item(s)", order.code_order, table_id, len(items))
    return LifecycleResult(order=order, products=products)


async def update_order(
    db: AsyncSession,
    order_id: int,
    change: OrderChange,
    items: list[SubmittedItem],
    name: str | None = None,
) -> LifecycleResult:
    """
    Apply a full update: the caller submits the complete desired item list.
    Submitted items with an id update that line, items without one are
    added, and persisted items missing from the list are removed.
    """
    if not items:
        raise ValidationError("order items cannot be empty")

    async with _unit_of_work(db, f"update order {order_id}"):
        order = await get_order_for_update(db, order_id)
        persisted = await load_items(db, order.id)
        lines = as_lines(persisted)

        plan = plan_update(_state_of(order), change, lines)
        diff = diff_items(lines, items)
        if plan.items_locked and not diff.is_empty:
            raise ValidationError(
                "items cannot be changed on an order that is completed or cancelled"
            )
        if change.payment_method_id is not None:
            await _ensure_payment_method(db, change.payment_method_id)

        touched = [*plan.before_persist, *diff.stock_effects()]
        products = await lock_products(
            db, (effect.product_id for effect in touched if isinstance(effect, AdjustStock))
        )
        await _apply(db, plan.before_persist)

        state = plan.state
        if name is not None:
            order.name = name
        order.table_id = state.table_id
        order.status_payment = state.status_payment
        order.status_kitchen = state.status_kitchen
        order.payment_method_id = state.payment_method_id

        by_id = {item.id: item for item in persisted}
        kept = {item.id for item in items if item.id is not None}
        for old, new in diff.updates:
            await update_item(db, by_id[old.id], new)
        for new in diff.creates:
            created = await create_item(db, order.id, new)
            kept.add(created.id)
        await db.flush()

        await _apply(db, plan.after_persist)
        await reconcile_items(db, order.id, kept)
        await _recalculate_amount(db, order)

    await db.refresh(order)
    logger.info(
        "Order %s updated: payment=%s kitchen=%s table=%d",
        order.code_order, order.status_payment.value, order.status_kitchen.value, order.table_id,
    )
    return LifecycleResult(order=order, products=products)


async def delete_order(db: AsyncSession, order: Order) -> LifecycleResult:
    """
    Soft-delete an order, restoring the stock of all its items and freeing its
    table if the tab was still open. The caller only passes In Process orders.
    """
    async with _unit_of_work(db, f"delete order {order.id}"):
        order = await get_order_for_update(db, order.id)
        lines = as_lines(await load_items(db, order.id))
        products = await lock_products(db, (line.product_id for line in lines))

        await _apply(db, plan_delete(_state_of(order), lines))
        order.deleted_at = datetime.now(timezone.utc)

    logger.info("Order %s deleted, stock restored for %d item(s)", order.code_order, len(lines))
    return LifecycleResult(order=order, products=products)
