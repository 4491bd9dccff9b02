"""
POS Service — Product catalogue schemas
"""
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from pos_service.models.enums import Availability, ProductStatus


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Nasi Goreng"])
    code_product: str = Field(..., min_length=1, max_length=50, examples=["NG-001"])
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)
    status: ProductStatus = ProductStatus.ACTIVE


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    code_product: str | None = Field(None, min_length=1, max_length=50)
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    stock: int | None = Field(None, ge=0)
    status: ProductStatus | None = None


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code_product: str
    price: Decimal
    stock: int
    availability: Availability
    status: ProductStatus
    created_at: datetime | None = None


class ProductListResponse(BaseModel):
    products: list[ProductOut]
    total: int
    page: int
    limit: int
    pages: int
