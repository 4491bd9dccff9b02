"""
POS Service — Sequential order codes (ORD0001, ORD0002, ...)

The next code is derived from the most recently created order. Soft-deleted
orders keep their row, so they are included and a code is never handed out
twice; the UNIQUE constraint on orders.code_order backs this up under races.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.core.config import get_settings
from pos_service.core.errors import CodeParseError
from pos_service.models.order import Order

settings = get_settings()


def increment_code(last_code: str | None, prefix: str, width: int) -> str:
    if not last_code:
        last_code = prefix + "0" * width

    suffix = last_code[len(prefix):] if last_code.startswith(prefix) else ""
    if not suffix.isdigit():
        raise CodeParseError(f"failed to parse last order code number: {last_code!r}")

    return f"{prefix}{int(suffix) + 1:0{width}d}"


async def next_order_code(db: AsyncSession) -> str:
    result = await db.execute(
        select(Order.code_order).order_by(Order.id.desc()).limit(1)
    )
    last_code = result.scalar_one_or_none()
    return increment_code(last_code, settings.ORDER_CODE_PREFIX, settings.ORDER_CODE_WIDTH)
