"""
POS Service — Table and payment method schemas
"""
from pydantic import BaseModel, ConfigDict


class TableOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    status: bool


class TableListResponse(BaseModel):
    tables: list[TableOut]
    total: int
    page: int
    limit: int
    pages: int


class PaymentMethodOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str

