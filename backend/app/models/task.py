"""Task model: order-scoped work, either manual or derived from templates."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(32), default="todo", nullable=False)
    priority = Column(String(16), nullable=True)
    parent_task_id = Column(Integer, ForeignKey("tasks.id"), nullable=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True, index=True)
    ingredient_id = Column(Integer, ForeignKey("ingredients.id"), nullable=True)
    task_type = Column(String(16), default="manual", nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=True)
    assignee_id = Column(String(255), nullable=True)
    # Set only on automatic tasks; a second derivation of the same task collides here
    derivation_key = Column(String(512), nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    order = relationship("Order", back_populates="tasks")
    product = relationship("Product")
    ingredient = relationship("Ingredient")
    parent = relationship("Task", remote_side=[id], back_populates="subtasks")
    subtasks = relationship("Task", back_populates="parent", cascade="all, delete-orphan")

    @property
    def product_name(self):
        return self.product.name if self.product is not None else None

    @property
    def ingredient_name(self):
        return self.ingredient.name if self.ingredient is not None else None
