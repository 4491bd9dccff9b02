"""
POS Service — Dining tables and payment methods

[CONFIG DATA] — both are seeded once and only their flags change afterwards.
"""
from datetime import datetime
from sqlalchemy import String, Integer, Boolean, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from pos_service.db.database import Base


class DiningTable(Base):
    """
    status=True means the table is free; an open order flips it to False.
    """
    __tablename__ = "tables"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<DiningTable name={self.name} available={self.status}>"


class PaymentMethod(Base):
    __tablename__ = "payment_methods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)  # active
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
