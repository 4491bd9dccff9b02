"""
POS Service — Product (inventory) model

stock is the authoritative count of un-consumed inventory. Every order item
mutation goes through the stock ledger (db/stock_ops.py) so the count stays
consistent with outstanding order items.
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import String, Integer, Numeric, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from pos_service.db.database import Base
from pos_service.models.enums import Availability, ProductStatus, enum_values


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    code_product: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    availability: Mapped[Availability] = mapped_column(
        Enum(Availability, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        default=Availability.OUT_OF_STOCK,
    )
    status: Mapped[ProductStatus] = mapped_column(
        Enum(ProductStatus, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        default=ProductStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name} stock={self.stock}>"
