"""Product model for the sellable catalog."""

from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    cost_price = Column(Numeric(10, 2), default=0, nullable=False)
    selling_price = Column(Numeric(10, 2), default=0, nullable=False)
    stock = Column(Numeric(12, 3), default=0, nullable=False)
    min_order = Column(Numeric(12, 3), default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    ingredient_links = relationship("ProductIngredient", back_populates="product", cascade="all, delete-orphan")
    task_templates = relationship("TaskTemplate", back_populates="product")
    order_items = relationship("OrderItem", back_populates="product")
