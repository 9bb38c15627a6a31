"""Product and product-ingredient schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    name: str
    description: Optional[str] = None
    selling_price: Decimal = Field(default=Decimal("0"), ge=0)
    stock: Decimal = Field(default=Decimal("0"), ge=0)
    min_order: Decimal = Field(default=Decimal("0"), ge=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    selling_price: Optional[Decimal] = Field(default=None, ge=0)
    stock: Optional[Decimal] = Field(default=None, ge=0)
    min_order: Optional[Decimal] = Field(default=None, ge=0)


class ProductRead(ProductBase):
    id: int
    cost_price: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductIngredientCreate(BaseModel):
    ingredient_id: int
    quantity: Decimal = Field(gt=0)


class ProductIngredientUpdate(BaseModel):
    quantity: Decimal = Field(gt=0)


class ProductIngredientRead(BaseModel):
    id: int
    product_id: int
    ingredient_id: int
    quantity: Decimal

    model_config = ConfigDict(from_attributes=True)
