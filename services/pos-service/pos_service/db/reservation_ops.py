"""
POS Service — Table reservations

Booking rules, checked before the row is written:
  - new reservations start Confirmed
  - table number and party size stay within the configured maximums
  - the (date, time) slot is not in the past
  - nobody else holds the same table at the same date and time

The slot check is backed by the uq_reservation_slot constraint, so two
concurrent bookings of one slot cannot both commit.
"""
import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pos_service.core.config import get_settings
from pos_service.core.errors import NotFoundError, TableReservedError, ValidationError
from pos_service.models.enums import ReservationStatus
from pos_service.models.reservation import Reservation

settings = get_settings()
logger = logging.getLogger(__name__)

SLOT_FIELDS = ("reservation_date", "reservation_time", "table_number")


def filter_range(time_filter: str, today: date) -> tuple[date, date] | None:
    """Inclusive date range for a listing filter; None means no date filter."""
    if time_filter == "today":
        return today, today
    if time_filter == "this_week":
        monday = today - timedelta(days=today.weekday())
        return monday, monday + timedelta(days=6)
    if time_filter == "this_month":
        first = today.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        return first, next_month - timedelta(days=1)
    if time_filter == "this_year":
        return date(today.year, 1, 1), date(today.year, 12, 31)
    return None


def _full_name(first_name: str | None, surname: str | None, fallback: str | None) -> str:
    name = " ".join(part.strip() for part in (first_name, surname) if part and part.strip())
    name = name or (fallback or "").strip()
    if not name:
        raise ValidationError("reservation name, or first name and surname, is required")
    return name


def _check_limits(table_number: int, pax_number: int) -> None:
    if pax_number > settings.RESERVATION_MAX_PAX:
        raise ValidationError(f"pax number cannot exceed {settings.RESERVATION_MAX_PAX}")
    if table_number > settings.RESERVATION_MAX_TABLE_NUMBER:
        raise ValidationError(f"table number cannot exceed {settings.RESERVATION_MAX_TABLE_NUMBER}")


def _check_not_past(reservation_date: date, reservation_time: time, now: datetime) -> None:
    if datetime.combine(reservation_date, reservation_time) < now:
        raise ValidationError("reservation date and time cannot be in the past")


async def _ensure_slot_free(
    db: AsyncSession,
    reservation_date: date,
    reservation_time: time,
    table_number: int,
    exclude_id: int | None = None,
) -> None:
    query = select(Reservation.id).where(
        Reservation.reservation_date == reservation_date,
        Reservation.reservation_time == reservation_time,
        Reservation.table_number == table_number,
    )
    if exclude_id is not None:
        query = query.where(Reservation.id != exclude_id)
    if (await db.execute(query.limit(1))).scalar_one_or_none() is not None:
        logger.warning(
            "Table %d already reserved at %s %s", table_number, reservation_date, reservation_time
        )
        raise TableReservedError(f"table {table_number} is already reserved at the selected time")


async def _commit(db: AsyncSession, reservation: Reservation) -> Reservation:
    table_number = reservation.table_number
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise TableReservedError(
            f"table {table_number} is already reserved at the selected time"
        ) from exc
    await db.refresh(reservation)
    return reservation


async def get_reservation(db: AsyncSession, reservation_id: int) -> Reservation:
    reservation = await db.get(Reservation, reservation_id, populate_existing=True)
    if reservation is None:
        raise NotFoundError(f"reservation {reservation_id} not found")
    return reservation


async def list_reservations(
    db: AsyncSession, time_filter: str = "this_month", today: date | None = None
) -> list[Reservation]:
    query = select(Reservation)
    bounds = filter_range(time_filter, today or date.today())
    if bounds is not None:
        query = query.where(Reservation.reservation_date.between(*bounds))
    result = await db.execute(
        query.order_by(Reservation.reservation_date, Reservation.reservation_time, Reservation.id)
    )
    return list(result.scalars().all())


async def create_reservation(db: AsyncSession, data: dict, now: datetime | None = None) -> Reservation:
    data = dict(data)
    status = data.pop("status", None) or ReservationStatus.CONFIRMED
    if status != ReservationStatus.CONFIRMED:
        raise ValidationError("status must be 'Confirmed'")

    _check_limits(data["table_number"], data["pax_number"])
    _check_not_past(data["reservation_date"], data["reservation_time"], now or datetime.now())
    await _ensure_slot_free(db, *(data[field] for field in SLOT_FIELDS))

    data["reservation_name"] = _full_name(
        data.get("first_name"), data.get("surname"), data.get("reservation_name")
    )
    reservation = Reservation(**data, status=status)
    db.add(reservation)
    await _commit(db, reservation)
    logger.info(
        "Reservation %d: table %d on %s %s for %d",
        reservation.id, reservation.table_number, reservation.reservation_date,
        reservation.reservation_time, reservation.pax_number,
    )
    return reservation


async def update_reservation(
    db: AsyncSession, reservation_id: int, data: dict, now: datetime | None = None
) -> Reservation:
    """Partial update. A moved slot is re-checked; cancelling only flips the status."""
    reservation = await get_reservation(db, reservation_id)
    changes = {key: value for key, value in data.items() if value is not None}

    slot = {field: changes.get(field, getattr(reservation, field)) for field in SLOT_FIELDS}
    moved = any(slot[field] != getattr(reservation, field) for field in SLOT_FIELDS)

    _check_limits(slot["table_number"], changes.get("pax_number", reservation.pax_number))
    if moved:
        _check_not_past(slot["reservation_date"], slot["reservation_time"], now or datetime.now())
        await _ensure_slot_free(db, *slot.values(), exclude_id=reservation.id)

    if {"first_name", "surname", "reservation_name"} & changes.keys():
        changes["reservation_name"] = _full_name(
            changes.get("first_name", reservation.first_name),
            changes.get("surname", reservation.surname),
            changes.get("reservation_name", reservation.reservation_name),
        )

    for key, value in changes.items():
        setattr(reservation, key, value)
    await _commit(db, reservation)
    logger.info("Reservation %d updated (%s)", reservation.id, reservation.status.value)
    return reservation
