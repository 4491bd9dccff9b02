"""
POS Service — Product catalogue API
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.api.errors import http_error
from pos_service.core.cache import sync_stock_cache
from pos_service.core.errors import PosError
from pos_service.db import product_ops
from pos_service.db.database import get_db
from pos_service.db.queries import page_count
from pos_service.models.enums import Availability, ProductStatus
from pos_service.schemas.product import ProductCreate, ProductListResponse, ProductOut, ProductUpdate

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: ProductStatus | None = Query(None, alias="status"),
    availability: Availability | None = None,
    db: AsyncSession = Depends(get_db),
):
    products, total = await product_ops.list_products(
        db, page=page, limit=limit, status=status_filter, availability=availability
    )
    return ProductListResponse(
        products=[ProductOut.model_validate(p) for p in products],
        total=total,
        page=page,
        limit=limit,
        pages=page_count(total, limit),
    )


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return ProductOut.model_validate(await product_ops.get_product(db, product_id))
    except PosError as exc:
        raise http_error(exc) from exc


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductCreate, db: AsyncSession = Depends(get_db)):
    try:
        product = await product_ops.create_product(db, payload.model_dump())
    except PosError as exc:
        raise http_error(exc) from exc
    await sync_stock_cache({product.id: product.stock})
    return ProductOut.model_validate(product)


@router.put("/{product_id}", response_model=ProductOut)
async def update_product(product_id: int, payload: ProductUpdate, db: AsyncSession = Depends(get_db)):
    try:
        product = await product_ops.update_product(db, product_id, payload.model_dump(exclude_unset=True))
    except PosError as exc:
        raise http_error(exc) from exc
    await sync_stock_cache({product.id: product.stock})
    return ProductOut.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    try:
        await product_ops.delete_product(db, product_id)
    except PosError as exc:
        raise http_error(exc) from exc
