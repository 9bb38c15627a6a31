"""Ingredient model; products are assembled from ingredients."""

from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Ingredient(Base):
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    stock = Column(Numeric(12, 3), default=0, nullable=False)
    unit = Column(String(32), nullable=True)
    price_per_unit = Column(Numeric(10, 2), default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    product_links = relationship("ProductIngredient", back_populates="ingredient")
    task_templates = relationship("TaskTemplate", back_populates="ingredient")
