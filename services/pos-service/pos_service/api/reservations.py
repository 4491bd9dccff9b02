"""
POS Service — Reservations API
"""
from typing import Literal
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.api.errors import http_error
from pos_service.core.errors import PosError
from pos_service.db import reservation_ops
from pos_service.db.database import get_db
from pos_service.schemas.reservation import ReservationCreate, ReservationOut, ReservationUpdate

router = APIRouter(prefix="/reservations", tags=["reservations"])

TimeFilter = Literal["today", "this_week", "this_month", "this_year", "all"]


@router.get("", response_model=list[ReservationOut])
async def list_reservations(
    time_filter: TimeFilter = Query("this_month", alias="filter"),
    db: AsyncSession = Depends(get_db),
):
    reservations = await reservation_ops.list_reservations(db, time_filter)
    return [ReservationOut.model_validate(r) for r in reservations]


@router.get("/{reservation_id}", response_model=ReservationOut)
async def get_reservation(reservation_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return ReservationOut.model_validate(await reservation_ops.get_reservation(db, reservation_id))
    except PosError as exc:
        raise http_error(exc) from exc


@router.post("", response_model=ReservationOut, status_code=status.HTTP_201_CREATED)
async def create_reservation(payload: ReservationCreate, db: AsyncSession = Depends(get_db)):
    """Book a table for a date and time; a slot already taken answers 409."""
    try:
        reservation = await reservation_ops.create_reservation(db, payload.model_dump())
    except PosError as exc:
        raise http_error(exc) from exc
    return ReservationOut.model_validate(reservation)


@router.put("/{reservation_id}", response_model=ReservationOut)
async def update_reservation(
    reservation_id: int, payload: ReservationUpdate, db: AsyncSession = Depends(get_db)
):
    try:
        reservation = await reservation_ops.update_reservation(
            db, reservation_id, payload.model_dump(exclude_unset=True)
        )
    except PosError as exc:
        raise http_error(exc) from exc
    return ReservationOut.model_validate(reservation)
