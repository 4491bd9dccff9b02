"""
Shared fixtures: in-memory SQLite per test, seeded tables/products, and an
authenticated httpx client wired to the FastAPI app.
"""
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["REDIS_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"

from dataclasses import dataclass
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from jose import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pos_service.core.config import get_settings
from pos_service.db.database import Base, get_db
from pos_service.main import app
from pos_service.models.enums import availability_for
from pos_service.models.inventory import Product
from pos_service.models.table import DiningTable, PaymentMethod

settings = get_settings()


@dataclass
class Catalogue:
    t1: int
    t2: int
    cash: int
    nasi: int  # price 25000, stock 10
    teh: int   # price 8000, stock 5


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def catalogue(session_factory) -> Catalogue:
    async with session_factory() as session:
        t1, t2 = DiningTable(name="T1"), DiningTable(name="T2")
        cash = PaymentMethod(name="Cash")
        nasi = Product(
            name="Nasi Goreng", code_product="FD-001", price=Decimal("25000.00"), stock=10,
            availability=availability_for(10, settings.LOW_STOCK_THRESHOLD),
        )
        teh = Product(
            name="Es Teh", code_product="DR-001", price=Decimal("8000.00"), stock=5,
            availability=availability_for(5, settings.LOW_STOCK_THRESHOLD),
        )
        session.add_all([t1, t2, cash, nasi, teh])
        await session.commit()
        return Catalogue(t1=t1.id, t2=t2.id, cash=cash.id, nasi=nasi.id, teh=teh.id)


@pytest.fixture
def token() -> str:
    return jwt.encode(
        {"sub": "cashier-01", "role": "cashier"},
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )


@pytest_asyncio.fixture
async def client(session_factory, token):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://pos.test",
        headers={"Authorization": f"Bearer {token}"},
    ) as c:
        yield c
    app.dependency_overrides.clear()


# ─── Helpers ───────────────────────────────────────────────────────────────────
async def stock_of(session: AsyncSession, product_id: int) -> int:
    return (await session.execute(select(Product.stock).where(Product.id == product_id))).scalar_one()


async def table_free(session: AsyncSession, table_id: int) -> bool:
    return (
        await session.execute(select(DiningTable.status).where(DiningTable.id == table_id))
    ).scalar_one()
