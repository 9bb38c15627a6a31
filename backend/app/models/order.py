"""Order model; aggregate root for items and derived tasks."""

from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True, index=True)
    order_date = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    delivery_date = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(32), default="pending", nullable=False)
    notes = Column(Text, nullable=True)
    # Scale covers price (2) plus quantity (3) so the stored total is never rounded
    total_amount = Column(Numeric(18, 5), default=Decimal("0.00"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    customer = relationship("Customer", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="order", cascade="all, delete-orphan")
