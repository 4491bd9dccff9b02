"""
POS Service — Best-effort Redis integration

  stock:{product_id}  → last committed stock, TTL STOCK_CACHE_TTL_SECONDS
  order:{order_id}    → pub/sub channel, one JSON event per lifecycle operation

The database stays authoritative: a Redis failure is logged and never fails
the request that triggered it.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Iterable

from redis.exceptions import RedisError

from pos_service.core.config import get_settings
from pos_service.core.redis_client import get_redis

settings = get_settings()
logger = logging.getLogger(__name__)

STOCK_CACHE_KEY = "stock:{product_id}"
ORDER_CHANNEL = "order:{order_id}"


async def sync_stock_cache(stock: dict[int, int]) -> None:
    if not settings.REDIS_ENABLED or not stock:
        return
    try:
        redis = get_redis()
        async with redis.pipeline(transaction=False) as pipe:
            for product_id, value in stock.items():
                pipe.setex(
                    STOCK_CACHE_KEY.format(product_id=product_id),
                    settings.STOCK_CACHE_TTL_SECONDS,
                    value,
                )
            await pipe.execute()
    except RedisError as exc:
        logger.warning("Stock cache update failed: %s", exc)


async def cached_out_of_stock(product_ids: Iterable[int]) -> list[int]:
    """
    Product ids the cache reports at stock 0. A cache miss or an unreadable
    value is not a rejection; the stock ledger makes the real decision.
    """
    if not settings.REDIS_ENABLED:
        return []
    ids = list(dict.fromkeys(product_ids))
    try:
        values = await get_redis().mget([STOCK_CACHE_KEY.format(product_id=pid) for pid in ids])
    except RedisError as exc:
        logger.warning("Stock cache read failed: %s", exc)
        return []

    empty = []
    for product_id, value in zip(ids, values):
        if value is None:
            continue
        try:
            if int(value) <= 0:
                empty.append(product_id)
        except ValueError:
            continue
    return empty


async def publish_order_event(order_id: int, event: str, **payload) -> None:
    if not settings.REDIS_ENABLED:
        return
    message = json.dumps(
        {
            "event": event,
            "order_id": order_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **payload,
        },
        default=str,
    )
    try:
        await get_redis().publish(ORDER_CHANNEL.format(order_id=order_id), message)
    except RedisError as exc:
        logger.warning("Order event %s for order %d not published: %s", event, order_id, exc)
