"""Task board services: manual tasks, status transitions and board grouping."""

import logging

from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError
from backend.app.models.enums import TaskPriority, TaskStatus, TaskType
from backend.app.models.order import Order
from backend.app.models.task import Task
from backend.app.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    TaskStatus.TODO.value: {TaskStatus.IN_PROGRESS.value, TaskStatus.CANCELLED.value},
    TaskStatus.IN_PROGRESS.value: {TaskStatus.COMPLETED.value, TaskStatus.CANCELLED.value},
    TaskStatus.COMPLETED.value: set(),
    TaskStatus.CANCELLED.value: set(),
}

BOARD_COLUMNS = [status.value for status in TaskStatus]


def get_task(db: Session, task_id: int) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


def list_tasks(db: Session, order_status: str | None = None, order_id: int | None = None) -> list[Task]:
    query = db.query(Task)
    if order_status:
        query = query.join(Order, Task.order_id == Order.id).filter(Order.status == order_status)
    if order_id is not None:
        query = query.filter(Task.order_id == order_id)
    return query.order_by(Task.id.asc()).all()


def group_tasks_by_status(tasks: list[Task]) -> dict[str, list[Task]]:
    grouped: dict[str, list[Task]] = {column: [] for column in BOARD_COLUMNS}
    for task in tasks:
        grouped.get(task.status, grouped[TaskStatus.TODO.value]).append(task)
    return grouped


def create_task(db: Session, task_in: TaskCreate) -> Task:
    """Create a task directly from the board; such tasks are always manual."""
    if task_in.order_id is not None and db.get(Order, task_in.order_id) is None:
        raise NotFoundError("Order", task_in.order_id)
    if task_in.parent_task_id is not None:
        get_task(db, task_in.parent_task_id)

    data = task_in.model_dump()
    data["task_type"] = TaskType.MANUAL.value
    data["priority"] = data["priority"] or TaskPriority.MEDIUM.value
    task = Task(**data)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def check_transition(current: str, target: str) -> None:
    if target == current:
        return
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ConflictError(f"Cannot move a task from {current} to {target}")


def change_task_status(db: Session, task: Task, status: str) -> Task:
    status = TaskStatus(status).value
    check_transition(task.status, status)
    if status != task.status:
        logger.info("Task %s moved from %s to %s", task.id, task.status, status)
        task.status = status
        db.commit()
        db.refresh(task)
    return task


def update_task(db: Session, task: Task, task_in: TaskUpdate) -> Task:
    update_data = task_in.model_dump(exclude_unset=True)
    status = update_data.pop("status", None)
    if status is not None:
        check_transition(task.status, status)
        task.status = status
    for field, value in update_data.items():
        setattr(task, field, value)
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task: Task) -> None:
    db.delete(task)
    db.commit()
