"""
POS Service — Table reservation model

One row books one table number for one (date, time) slot. Cancelled
reservations keep their row and keep the slot.
"""
from datetime import date, datetime, time
from decimal import Decimal
from sqlalchemy import String, Integer, Numeric, Date, Time, DateTime, Enum, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from pos_service.db.database import Base
from pos_service.models.enums import ReservationStatus, enum_values


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        UniqueConstraint(
            "reservation_date", "reservation_time", "table_number", name="uq_reservation_slot"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    reservation_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    reservation_time: Mapped[time] = mapped_column(Time, nullable=False)
    table_number: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[ReservationStatus] = mapped_column(
        Enum(ReservationStatus, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        default=ReservationStatus.CONFIRMED,
    )
    reservation_name: Mapped[str] = mapped_column(String(100), nullable=False)
    pax_number: Mapped[int] = mapped_column(Integer, nullable=False)
    deposit_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    title: Mapped[str | None] = mapped_column(String(10), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    surname: Mapped[str | None] = mapped_column(String(50), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email_address: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<Reservation table={self.table_number} at {self.reservation_date} {self.reservation_time}>"
