"""Task template schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from backend.app.models.enums import TaskPriority


class TaskTemplateBase(BaseModel):
    title: str
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None


class TaskTemplateCreate(TaskTemplateBase):
    product_id: Optional[int] = None
    ingredient_id: Optional[int] = None
    is_subtask: bool = False
    parent_template_id: Optional[int] = None

    model_config = ConfigDict(use_enum_values=True)


class TaskTemplateUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None

    model_config = ConfigDict(use_enum_values=True)


class TaskTemplateRead(TaskTemplateBase):
    id: int
    product_id: Optional[int] = None
    ingredient_id: Optional[int] = None
    is_subtask: bool
    parent_template_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductTaskTemplateRead(TaskTemplateRead):
    """Template listed on a product; inherited rows come from its ingredients."""

    inherited: bool = False
