"""
Table reservations: booking limits, no past slots, no double booking.
"""
from datetime import date, datetime, time, timedelta

import pytest
from sqlalchemy import func, select

from pos_service.core.errors import NotFoundError, TableReservedError, ValidationError
from pos_service.db.reservation_ops import (
    create_reservation,
    filter_range,
    get_reservation,
    list_reservations,
    update_reservation,
)
from pos_service.models.enums import ReservationStatus
from pos_service.models.reservation import Reservation

NOW = datetime(2030, 5, 8, 9, 0)   # a Wednesday
TOMORROW = date(2030, 5, 9)
DINNER = time(19, 0)


def booking(**overrides):
    data = {
        "reservation_date": TOMORROW,
        "reservation_time": DINNER,
        "table_number": 3,
        "pax_number": 4,
        "first_name": "Jane",
        "surname": "Doe",
    }
    data.update(overrides)
    return data


async def _count(db):
    return (await db.execute(select(func.count()).select_from(Reservation))).scalar_one()


# ─── Create ────────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_create_confirms_and_names_the_booking(db):
    reservation = await create_reservation(db, booking(), now=NOW)
    assert reservation.status == ReservationStatus.CONFIRMED
    assert reservation.reservation_name == "Jane Doe"
    assert reservation.table_number == 3


@pytest.mark.asyncio
async def test_same_table_same_slot_is_rejected(db):
    await create_reservation(db, booking(), now=NOW)

    with pytest.raises(TableReservedError, match="table 3 is already reserved"):
        await create_reservation(db, booking(first_name="John"), now=NOW)
    assert await _count(db) == 1

    await create_reservation(db, booking(table_number=4), now=NOW)
    await create_reservation(db, booking(reservation_time=time(20, 0)), now=NOW)
    await create_reservation(db, booking(reservation_date=TOMORROW + timedelta(days=1)), now=NOW)
    assert await _count(db) == 4


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides,message", [
    ({"table_number": 8}, "table number cannot exceed 7"),
    ({"pax_number": 9}, "pax number cannot exceed 8"),
    ({"reservation_date": date(2030, 5, 7)}, "in the past"),
    ({"reservation_date": date(2030, 5, 8), "reservation_time": time(8, 30)}, "in the past"),
    ({"status": ReservationStatus.CANCELED}, "Confirmed"),
    ({"first_name": None, "surname": None}, "name"),
])
async def test_create_enforces_booking_rules(db, overrides, message):
    with pytest.raises(ValidationError, match=message):
        await create_reservation(db, booking(**overrides), now=NOW)
    assert await _count(db) == 0


@pytest.mark.asyncio
async def test_later_today_is_bookable(db):
    reservation = await create_reservation(
        db, booking(reservation_date=NOW.date(), reservation_time=time(12, 0)), now=NOW
    )
    assert reservation.reservation_date == NOW.date()


# ─── Update ────────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_cancel_keeps_the_slot(db):
    first = await create_reservation(db, booking(), now=NOW)
    cancelled = await update_reservation(db, first.id, {"status": ReservationStatus.CANCELED}, now=NOW)
    assert cancelled.status == ReservationStatus.CANCELED

    with pytest.raises(TableReservedError):
        await create_reservation(db, booking(), now=NOW)


@pytest.mark.asyncio
async def test_move_onto_taken_slot_is_rejected(db):
    await create_reservation(db, booking(table_number=1), now=NOW)
    second_id = (await create_reservation(db, booking(table_number=2), now=NOW)).id

    with pytest.raises(TableReservedError):
        await update_reservation(db, second_id, {"table_number": 1}, now=NOW)

    assert (await get_reservation(db, second_id)).table_number == 2


@pytest.mark.asyncio
async def test_update_in_place_and_rename(db):
    reservation = await create_reservation(db, booking(), now=NOW)
    updated = await update_reservation(
        db, reservation.id, {"pax_number": 6, "surname": "Smith", "table_number": 3}, now=NOW
    )
    assert updated.pax_number == 6
    assert updated.reservation_name == "Jane Smith"

    with pytest.raises(ValidationError):
        await update_reservation(db, reservation.id, {"pax_number": 12}, now=NOW)


@pytest.mark.asyncio
async def test_unknown_reservation(db):
    with pytest.raises(NotFoundError):
        await get_reservation(db, 404)
    with pytest.raises(NotFoundError):
        await update_reservation(db, 404, {"pax_number": 2}, now=NOW)


# ─── Listing ───────────────────────────────────────────────────────────────────
def test_filter_ranges():
    today = date(2030, 5, 8)
    assert filter_range("today", today) == (today, today)
    assert filter_range("this_week", today) == (date(2030, 5, 6), date(2030, 5, 12))
    assert filter_range("this_month", today) == (date(2030, 5, 1), date(2030, 5, 31))
    assert filter_range("this_month", date(2030, 12, 31)) == (date(2030, 12, 1), date(2030, 12, 31))
    assert filter_range("this_year", today) == (date(2030, 1, 1), date(2030, 12, 31))
    assert filter_range("all", today) is None


@pytest.mark.asyncio
async def test_list_by_time_filter(db):
    for day in (date(2030, 5, 8), date(2030, 5, 10), date(2030, 5, 25), date(2030, 9, 1), date(2031, 1, 5)):
        await create_reservation(db, booking(reservation_date=day), now=NOW)

    today = NOW.date()
    counts = {f: len(await list_reservations(db, f, today=today))
              for f in ("today", "this_week", "this_month", "this_year", "all")}
    assert counts == {"today": 1, "this_week": 2, "this_month": 3, "this_year": 4, "all": 5}


# ─── HTTP ──────────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_reservation_endpoints(client):
    day = (date.today() + timedelta(days=30)).isoformat()
    payload = {
        "reservation_date": day,
        "reservation_time": "19:30:00",
        "table_number": 5,
        "pax_number": 2,
        "first_name": "Alice",
        "surname": "Smith",
        "deposit_fee": "50000.00",
    }

    r = await client.post("/reservations", json=payload)
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["reservation_name"] == "Alice Smith"
    assert created["reservation_date"] == day
    assert created["reservation_time"] == "19:30:00"

    r = await client.post("/reservations", json=payload)
    assert r.status_code == 409

    r = await client.post("/reservations", json={**payload, "table_number": 8})
    assert r.status_code == 400

    assert (await client.get(f"/reservations/{created['id']}")).status_code == 200
    assert (await client.get("/reservations/404")).status_code == 404

    r = await client.get("/reservations", params={"filter": "all"})
    assert [res["id"] for res in r.json()] == [created["id"]]
    assert (await client.get("/reservations", params={"filter": "someday"})).status_code == 422

    r = await client.put(f"/reservations/{created['id']}", json={"status": "Canceled"})
    assert r.status_code == 200
    assert r.json()["status"] == "Canceled"


@pytest.mark.asyncio
async def test_reservations_require_token(client):
    r = await client.get("/reservations", headers={"Authorization": ""})
    assert r.status_code == 401
