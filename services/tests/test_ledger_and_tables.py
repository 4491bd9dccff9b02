"""
Leaf components against the database: stock ledger, table occupancy
tracker and order code generator.
"""
from datetime import datetime, timezone

import pytest

from pos_service.core.errors import (
    CodeParseError,
    InsufficientStockError,
    NotFoundError,
    TableReservedError,
)
from pos_service.db.order_code import increment_code, next_order_code
from pos_service.db.stock_ops import adjust_stock, lock_products
from pos_service.db.table_ops import ensure_table_available, set_table_availability
from pos_service.models.enums import Availability
from pos_service.models.order import Order

from conftest import stock_of, table_free


# ─── Stock ledger ──────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_adjust_stock_consumes_and_restores(db, catalogue):
    product = await adjust_stock(db, catalogue.nasi, -4)
    assert product.stock == 6
    product = await adjust_stock(db, catalogue.nasi, 1)
    assert product.stock == 7
    await db.commit()
    assert await stock_of(db, catalogue.nasi) == 7


@pytest.mark.asyncio
async def test_adjust_stock_refuses_to_go_negative(db, catalogue):
    with pytest.raises(InsufficientStockError, match="Es Teh"):
        await adjust_stock(db, catalogue.teh, -6)
    assert await stock_of(db, catalogue.teh) == 5


@pytest.mark.asyncio
async def test_adjust_stock_relabels_availability(db, catalogue):
    product = await adjust_stock(db, catalogue.nasi, -5)
    assert product.availability == Availability.LOW_STOCK
    product = await adjust_stock(db, catalogue.nasi, -5)
    assert product.availability == Availability.OUT_OF_STOCK
    product = await adjust_stock(db, catalogue.nasi, 6)
    assert product.availability == Availability.IN_STOCK


@pytest.mark.asyncio
async def test_adjust_stock_unknown_product(db, catalogue):
    with pytest.raises(NotFoundError):
        await adjust_stock(db, 999, -1)


@pytest.mark.asyncio
async def test_lock_products_returns_requested_rows(db, catalogue):
    locked = await lock_products(db, [catalogue.teh, catalogue.nasi, catalogue.teh, 999])
    assert set(locked) == {catalogue.nasi, catalogue.teh}
    assert await lock_products(db, []) == {}


# ─── Table occupancy ───────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_table_occupied_then_rejected(db, catalogue):
    await ensure_table_available(db, catalogue.t1)
    await set_table_availability(db, catalogue.t1, False)
    await db.commit()

    assert await table_free(db, catalogue.t1) is False
    with pytest.raises(TableReservedError, match="T1 is already reserved"):
        await ensure_table_available(db, catalogue.t1)


@pytest.mark.asyncio
async def test_set_availability_is_unconditional(db, catalogue):
    await set_table_availability(db, catalogue.t2, True)
    await set_table_availability(db, catalogue.t2, True)
    assert await table_free(db, catalogue.t2) is True


@pytest.mark.asyncio
async def test_unknown_table(db, catalogue):
    with pytest.raises(NotFoundError):
        await ensure_table_available(db, 404)
    with pytest.raises(NotFoundError):
        await set_table_availability(db, 404, False)


# ─── Order codes ───────────────────────────────────────────────────────────────
@pytest.mark.parametrize("last,expected", [
    (None, "ORD0001"),
    ("ORD0007", "ORD0008"),
    ("ORD0099", "ORD0100"),
    ("ORD9999", "ORD10000"),
])
def test_increment_code(last, expected):
    assert increment_code(last, "ORD", 4) == expected


@pytest.mark.parametrize("last", ["ORDABCD", "XYZ0001", "ORD"])
def test_increment_code_rejects_malformed(last):
    with pytest.raises(CodeParseError):
        increment_code(last, "ORD", 4)


@pytest.mark.asyncio
async def test_next_code_counts_soft_deleted_orders(db, catalogue):
    assert await next_order_code(db) == "ORD0001"
    db.add(Order(table_id=catalogue.t1, name="gone", code_order="ORD0007",
                 deleted_at=datetime.now(timezone.utc)))
    await db.commit()
    assert await next_order_code(db) == "ORD0008"
