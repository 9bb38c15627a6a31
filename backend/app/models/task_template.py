"""Task template model: reusable work attached to a product or ingredient."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class TaskTemplate(Base):
    __tablename__ = "task_templates"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(String(16), nullable=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True, index=True)
    ingredient_id = Column(Integer, ForeignKey("ingredients.id"), nullable=True, index=True)
    is_subtask = Column(Boolean, default=False, nullable=False)
    parent_template_id = Column(Integer, ForeignKey("task_templates.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    product = relationship("Product", back_populates="task_templates")
    ingredient = relationship("Ingredient", back_populates="task_templates")
    parent = relationship("TaskTemplate", remote_side=[id], back_populates="subtasks")
    subtasks = relationship("TaskTemplate", back_populates="parent", cascade="all, delete-orphan")
