"""
POS Service — Product catalogue persistence

Stock set here is an absolute restock/correction by staff; order-driven
changes go through db/stock_ops.py instead. The availability label is
recomputed on every save.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.core.config import get_settings
from pos_service.core.errors import DuplicateError, NotFoundError, ValidationError
from pos_service.models.enums import Availability, ProductStatus, availability_for
from pos_service.models.inventory import Product

settings = get_settings()
logger = logging.getLogger(__name__)


def _active():
    return Product.deleted_at.is_(None)


async def _ensure_unique(db: AsyncSession, name: str | None, code: str | None, exclude_id: int | None = None):
    clauses = []
    if name:
        clauses.append(func.lower(Product.name) == name.lower())
    if code:
        clauses.append(func.lower(Product.code_product) == code.lower())
    if not clauses:
        return
    query = select(Product.id).where(or_(*clauses))
    if exclude_id is not None:
        query = query.where(Product.id != exclude_id)
    if (await db.execute(query.limit(1))).scalar_one_or_none() is not None:
        raise DuplicateError("a product with this name or code already exists")


async def get_product(db: AsyncSession, product_id: int) -> Product:
    result = await db.execute(select(Product).where(Product.id == product_id, _active()))
    product = result.scalar_one_or_none()
    if product is None:
        raise NotFoundError(f"product {product_id} not found")
    return product


async def list_products(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    status: ProductStatus | None = None,
    availability: Availability | None = None,
) -> tuple[list[Product], int]:
    query = select(Product).where(_active())
    if status is not None:
        query = query.where(Product.status == status)

    low = settings.LOW_STOCK_THRESHOLD
    if availability == Availability.IN_STOCK:
        query = query.where(Product.stock > low)
    elif availability == Availability.LOW_STOCK:
        query = query.where(Product.stock > 0, Product.stock <= low)
    elif availability == Availability.OUT_OF_STOCK:
        query = query.where(Product.stock < 1)

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(
        query.order_by(Product.id).offset((page - 1) * limit).limit(limit)
    )
    return list(result.scalars().all()), total


async def create_product(db: AsyncSession, data: dict) -> Product:
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("name is required")
    await _ensure_unique(db, name, data.get("code_product"))

    product = Product(**{**data, "name": name})
    product.availability = availability_for(product.stock, settings.LOW_STOCK_THRESHOLD)
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info("Product %s added with stock %d", product.name, product.stock)
    return product


async def update_product(db: AsyncSession, product_id: int, data: dict) -> Product:
    product = await get_product(db, product_id)

    if data.get("name") is not None:
        data["name"] = str(data["name"]).strip()
        if not data["name"]:
            raise ValidationError("name is required")
    await _ensure_unique(db, data.get("name"), data.get("code_product"), exclude_id=product_id)

    for key, value in data.items():
        if value is not None:
            setattr(product, key, value)
    product.availability = availability_for(product.stock, settings.LOW_STOCK_THRESHOLD)

    await db.commit()
    await db.refresh(product)
    return product


async def delete_product(db: AsyncSession, product_id: int) -> None:
    product = await get_product(db, product_id)
    product.deleted_at = datetime.now(timezone.utc)
    await db.commit()
    logger.info("Product %s soft deleted", product.name)
