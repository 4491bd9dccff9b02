"""
POS Service — Table occupancy tracker
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.core.errors import NotFoundError, TableReservedError
from pos_service.models.table import DiningTable


async def _get_table(db: AsyncSession, table_id: int) -> DiningTable:
    result = await db.execute(
        select(DiningTable).where(DiningTable.id == table_id).with_for_update()
    )
    table = result.scalar_one_or_none()
    if table is None:
        raise NotFoundError(f"table {table_id} not found")
    return table


async def ensure_table_available(db: AsyncSession, table_id: int) -> DiningTable:
    table = await _get_table(db, table_id)
    if not table.status:
        raise TableReservedError(f"{table.name} is already reserved")
    return table


async def set_table_availability(db: AsyncSession, table_id: int, available: bool) -> DiningTable:
    """Overwrite the flag unconditionally; transition checks belong to the caller."""
    table = await _get_table(db, table_id)
    table.status = available
    await db.flush()
    return table
