"""
POS Service — Order schemas
"""
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from pos_service.models.enums import KitchenStatus, PaymentStatus


class OrderItemCreate(BaseModel):
    product_id: int = Field(..., ge=1, examples=[1])
    quantity: int = Field(..., ge=1, examples=[2])


class OrderCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Alice"])
    table_id: int = Field(..., ge=1)
    items: list[OrderItemCreate] = Field(..., min_length=1)


class OrderItemUpdate(BaseModel):
    id: int | None = Field(None, description="Existing order item id; omit to add a new line")
    product_id: int = Field(..., ge=1)
    quantity: int = Field(..., ge=1)


class OrderUpdateRequest(BaseModel):
    """Full desired state: persisted items missing from `items` are removed."""
    name: str | None = Field(None, min_length=1, max_length=100)
    table_id: int = Field(..., ge=1)
    payment_method_id: int | None = None
    status_payment: PaymentStatus | None = None
    status_kitchen: KitchenStatus | None = None
    items: list[OrderItemUpdate] = Field(..., min_length=1)


class OrderItemOut(BaseModel):
    order_item_id: int
    product_id: int
    product_name: str
    product_price: Decimal
    quantity: int
    sub_total: Decimal


class OrderDetail(BaseModel):
    order_id: int
    code_order: str
    name: str
    table_id: int
    table_name: str | None = None
    payment_method_id: int | None = None
    payment_method_name: str | None = None
    status_payment: PaymentStatus
    status_kitchen: KitchenStatus
    tax: Decimal
    amount: Decimal
    created_at: datetime | None = None
    items: list[OrderItemOut] = []


class OrderSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code_order: str
    name: str
    table_id: int
    status_payment: PaymentStatus
    status_kitchen: KitchenStatus
    amount: Decimal
    created_at: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderSummary]
    total: int
    page: int
    limit: int
    pages: int
