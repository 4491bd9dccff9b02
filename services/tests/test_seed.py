import pytest
from sqlalchemy import func, select

from pos_service.db.seed import DEMO_PAYMENT_METHODS, DEMO_PRODUCTS, DEMO_TABLE_COUNT, seed_demo_data
from pos_service.models.enums import Availability
from pos_service.models.inventory import Product
from pos_service.models.table import DiningTable, PaymentMethod


async def _count(db, model):
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_seed_fills_empty_database_once(db):
    await seed_demo_data(db)
    await seed_demo_data(db)

    assert await _count(db, DiningTable) == DEMO_TABLE_COUNT
    assert await _count(db, PaymentMethod) == len(DEMO_PAYMENT_METHODS)
    assert await _count(db, Product) == len(DEMO_PRODUCTS)

    kopi = (await db.execute(select(Product).where(Product.code_product == "DR-002"))).scalar_one()
    assert kopi.availability == Availability.LOW_STOCK
