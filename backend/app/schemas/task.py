"""Task schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from backend.app.models.enums import TaskPriority, TaskStatus, TaskType


class TaskBase(BaseModel):
    title: str
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    deadline: Optional[datetime] = None
    assignee_id: Optional[str] = None


class TaskCreate(TaskBase):
    status: TaskStatus = TaskStatus.TODO
    task_type: TaskType = TaskType.MANUAL
    parent_task_id: Optional[int] = None
    order_id: Optional[int] = None
    product_id: Optional[int] = None
    ingredient_id: Optional[int] = None

    model_config = ConfigDict(use_enum_values=True)


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    deadline: Optional[datetime] = None
    assignee_id: Optional[str] = None
    status: Optional[TaskStatus] = None

    model_config = ConfigDict(use_enum_values=True)


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskRead(TaskBase):
    id: int
    status: str
    task_type: str
    parent_task_id: Optional[int] = None
    order_id: Optional[int] = None
    product_id: Optional[int] = None
    ingredient_id: Optional[int] = None
    product_name: Optional[str] = None
    ingredient_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskBoardRead(BaseModel):
    todo: list[TaskRead]
    in_progress: list[TaskRead]
    completed: list[TaskRead]
    cancelled: list[TaskRead]
