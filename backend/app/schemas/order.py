"""Order and order item schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.enums import OrderStatus


class OrderItemCreate(BaseModel):
    product_id: int
    quantity: Decimal = Field(gt=0)
    # Snapshot of the unit price; defaults to the product's selling price
    price: Optional[Decimal] = Field(default=None, ge=0)


class OrderItemUpdate(BaseModel):
    quantity: Optional[Decimal] = Field(default=None, gt=0)
    price: Optional[Decimal] = Field(default=None, ge=0)


class OrderItemRead(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: Decimal
    price: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderBase(BaseModel):
    customer_id: Optional[int] = None
    order_date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    status: OrderStatus = OrderStatus.PENDING
    notes: Optional[str] = None


class OrderCreate(OrderBase):
    items: list[OrderItemCreate] = []

    model_config = ConfigDict(use_enum_values=True)


class OrderUpdate(BaseModel):
    customer_id: Optional[int] = None
    order_date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: Optional[int]
    order_date: datetime
    delivery_date: Optional[datetime]
    status: str
    notes: Optional[str]
    total_amount: Decimal

    created_at: datetime
    updated_at: datetime


class OrderDetailRead(OrderRead):
    items: list[OrderItemRead] = []


class OrderTotalRead(BaseModel):
    order_id: int
    total_amount: Decimal
