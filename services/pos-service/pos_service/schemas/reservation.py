"""
POS Service — Reservation schemas
Dates travel as YYYY-MM-DD and times as HH:MM:SS.
"""
from datetime import date, datetime, time
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from pos_service.models.enums import ReservationStatus


class ReservationCreate(BaseModel):
    reservation_date: date = Field(..., examples=["2024-12-14"])
    reservation_time: time = Field(..., examples=["14:00:00"])
    table_number: int = Field(..., ge=1)
    pax_number: int = Field(..., ge=1)
    status: ReservationStatus = ReservationStatus.CONFIRMED
    reservation_name: str | None = Field(None, max_length=100)
    deposit_fee: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)
    title: str | None = Field(None, max_length=10)
    first_name: str | None = Field(None, max_length=50)
    surname: str | None = Field(None, max_length=50)
    phone_number: str | None = Field(None, max_length=20)
    email_address: str | None = Field(None, max_length=100)


class ReservationUpdate(BaseModel):
    reservation_date: date | None = None
    reservation_time: time | None = None
    table_number: int | None = Field(None, ge=1)
    pax_number: int | None = Field(None, ge=1)
    status: ReservationStatus | None = None
    reservation_name: str | None = Field(None, max_length=100)
    deposit_fee: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    title: str | None = Field(None, max_length=10)
    first_name: str | None = Field(None, max_length=50)
    surname: str | None = Field(None, max_length=50)
    phone_number: str | None = Field(None, max_length=20)
    email_address: str | None = Field(None, max_length=100)


class ReservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reservation_date: date
    reservation_time: time
    table_number: int
    status: ReservationStatus
    reservation_name: str
    pax_number: int
    deposit_fee: Decimal
    title: str | None = None
    first_name: str | None = None
    surname: str | None = None
    phone_number: str | None = None
    email_address: str | None = None
    created_at: datetime | None = None
