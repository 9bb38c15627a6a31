"""Ingredient schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class IngredientBase(BaseModel):
    name: str
    description: Optional[str] = None
    stock: Decimal = Field(default=Decimal("0"), ge=0)
    unit: Optional[str] = None
    price_per_unit: Decimal = Field(default=Decimal("0"), ge=0)


class IngredientCreate(IngredientBase):
    pass


class IngredientUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    stock: Optional[Decimal] = Field(default=None, ge=0)
    unit: Optional[str] = None
    price_per_unit: Optional[Decimal] = Field(default=None, ge=0)


class IngredientRead(IngredientBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
