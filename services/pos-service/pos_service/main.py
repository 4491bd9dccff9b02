"""
POS Service — FastAPI entrypoint
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from pos_service.core.config import get_settings
from pos_service.core.redis_client import close_redis
from pos_service.db.database import Base, SessionLocal, engine
from pos_service.db.seed import seed_demo_data
from pos_service.middleware.auth import JWTAuthMiddleware
from pos_service.api import health, orders, products, reservations, tables
from pos_service.models import inventory, order, reservation, table  # noqa: F401  (register mappers)

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if settings.SEED_DEMO_DATA:
        async with SessionLocal() as db:
            await seed_demo_data(db)
    logger.info("%s %s ready", settings.SERVICE_NAME, settings.SERVICE_VERSION)
    yield
    if settings.REDIS_ENABLED:
        await close_redis()
    await engine.dispose()


app = FastAPI(
    title="RestoPOS Order Service",
    description="Order lifecycle with consistent table occupancy and product stock.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True,
                   allow_methods=["*"], allow_headers=["*"])
app.add_middleware(JWTAuthMiddleware)

if settings.METRICS_ENABLED:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")

app.include_router(orders.router)
app.include_router(tables.router)
app.include_router(products.router)
app.include_router(reservations.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("pos_service.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
