"""
POS Service — Order DB models

[TRANSACTIONAL DATA] — orders are soft-deleted (deleted_at) so their codes
are never reused; order items are hard-deleted when removed from an order.
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import String, Integer, Numeric, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from pos_service.db.database import Base
from pos_service.models.enums import PaymentStatus, KitchenStatus, enum_values


class Order(Base):
    """
    One customer tab, seated at one table.
    code_order is assigned once, on first persist, and never recomputed.
    """
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    table_id: Mapped[int] = mapped_column(ForeignKey("tables.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    code_order: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    tax: Mapped[Decimal] = mapped_column(Numeric(4, 2), nullable=False, default=Decimal("10.00"))
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    payment_method_id: Mapped[int | None] = mapped_column(ForeignKey("payment_methods.id"), nullable=True)
    status_payment: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        default=PaymentStatus.IN_PROCESS,
        index=True,
    )
    status_kitchen: Mapped[KitchenStatus] = mapped_column(
        Enum(KitchenStatus, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        default=KitchenStatus.IN_THE_KITCHEN,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<Order code={self.code_order} table={self.table_id} payment={self.status_payment}>"


class OrderItem(Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False
    )
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    sub_total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
