"""
POS Service — Stock ledger

Every stock change runs inside the caller's transaction:
  - READ:  SELECT ... FOR UPDATE on the product row
  - CHECK: new_stock = stock + delta must stay >= 0
  - WRITE: new stock and the availability label derived from it

Nothing here commits; the lifecycle operation that owns the session does.
"""
import logging
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.core.config import get_settings
from pos_service.core.errors import InsufficientStockError, NotFoundError
from pos_service.models.enums import availability_for
from pos_service.models.inventory import Product

settings = get_settings()
logger = logging.getLogger(__name__)


async def lock_products(db: AsyncSession, product_ids: Iterable[int]) -> dict[int, Product]:
    """Lock every product an operation will touch, in ascending id order."""
    ids = sorted(set(product_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(Product).where(Product.id.in_(ids)).order_by(Product.id).with_for_update()
    )
    return {product.id: product for product in result.scalars().all()}


async def adjust_stock(db: AsyncSession, product_id: int, delta: int) -> Product:
    """
    Apply a signed stock delta: negative consumes, positive restores.
    Raises InsufficientStockError (naming the product) if stock would go negative.
    """
    result = await db.execute(
        select(Product).where(Product.id == product_id).with_for_update()
    )
    product: Product | None = result.scalar_one_or_none()
    if product is None:
        raise NotFoundError(f"product {product_id} not found")

    new_stock = product.stock + delta
    if new_stock < 0:
        logger.warning(
            "Insufficient stock for %s: requested=%d, available=%d",
            product.name, -delta, product.stock,
        )
        raise InsufficientStockError(
            f"insufficient stock for product {product.name}: "
            f"requested={-delta}, available={product.stock}"
        )

    product.stock = new_stock
    product.availability = availability_for(new_stock, settings.LOW_STOCK_THRESHOLD)
    await db.flush()
    return product
