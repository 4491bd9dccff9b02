"""
POS Service — Demo data (SEED_DEMO_DATA=true)

Only fills empty tables, so restarting the service never duplicates rows.
"""
import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.core.config import get_settings
from pos_service.models.enums import availability_for
from pos_service.models.inventory import Product
from pos_service.models.table import DiningTable, PaymentMethod

settings = get_settings()
logger = logging.getLogger(__name__)

DEMO_TABLE_COUNT = 10
DEMO_PAYMENT_METHODS = ["Cash", "Credit Card", "E-Wallet"]
DEMO_PRODUCTS = [
    # name, code, price, stock
    ("Nasi Goreng", "FD-001", "25000.00", 50),
    ("Mie Ayam", "FD-002", "20000.00", 40),
    ("Sate Ayam", "FD-003", "30000.00", 30),
    ("Es Teh Manis", "DR-001", "8000.00", 100),
    ("Kopi Susu", "DR-002", "15000.00", 4),
]


async def _is_empty(db: AsyncSession, model) -> bool:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one() == 0


async def seed_demo_data(db: AsyncSession) -> None:
    if await _is_empty(db, DiningTable):
        db.add_all(DiningTable(name=f"T{n}", status=True) for n in range(1, DEMO_TABLE_COUNT + 1))
        logger.info("Seeded %d tables", DEMO_TABLE_COUNT)

    if await _is_empty(db, PaymentMethod):
        db.add_all(PaymentMethod(name=name, status=True) for name in DEMO_PAYMENT_METHODS)
        logger.info("Seeded payment methods: %s", ", ".join(DEMO_PAYMENT_METHODS))

    if await _is_empty(db, Product):
        db.add_all(
            Product(
                name=name,
                code_product=code,
                price=Decimal(price),
                stock=stock,
                availability=availability_for(stock, settings.LOW_STOCK_THRESHOLD),
            )
            for name, code, price, stock in DEMO_PRODUCTS
        )
        logger.info("Seeded %d products", len(DEMO_PRODUCTS))

    await db.commit()
