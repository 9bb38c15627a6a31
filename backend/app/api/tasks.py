"""Task board endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError
from backend.app.db.session import get_db
from backend.app.models.task import Task
from backend.app.schemas.task import TaskBoardRead, TaskCreate, TaskRead, TaskStatusUpdate, TaskUpdate
from backend.app.services import tasks as task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _get_task(db: Session, task_id: int) -> Task:
    try:
        return task_service.get_task(db, task_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


@router.get("/", response_model=list[TaskRead])
async def list_tasks(
    order_status: str | None = None,
    order_id: int | None = None,
    db: Session = Depends(get_db),
):
    return task_service.list_tasks(db, order_status=order_status, order_id=order_id)


@router.get("/board", response_model=TaskBoardRead)
async def get_task_board(order_status: str | None = None, db: Session = Depends(get_db)):
    grouped = task_service.group_tasks_by_status(task_service.list_tasks(db, order_status=order_status))
    return {
        "todo": grouped["todo"],
        "in_progress": grouped["in-progress"],
        "completed": grouped["completed"],
        "cancelled": grouped["cancelled"],
    }


@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(task_in: TaskCreate, db: Session = Depends(get_db)):
    try:
        return task_service.create_task(db, task_in)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(task_id: int, db: Session = Depends(get_db)):
    return _get_task(db, task_id)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(task_id: int, task_in: TaskUpdate, db: Session = Depends(get_db)):
    task = _get_task(db, task_id)
    try:
        return task_service.update_task(db, task, task_in)
    except ConflictError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.patch("/{task_id}/status", response_model=TaskRead)
async def change_task_status(task_id: int, payload: TaskStatusUpdate, db: Session = Depends(get_db)):
    task = _get_task(db, task_id)
    try:
        return task_service.change_task_status(db, task, payload.status)
    except ConflictError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/{task_id}")
async def delete_task(task_id: int, db: Session = Depends(get_db)):
    task = _get_task(db, task_id)
    task_service.delete_task(db, task)
    return {"status": "deleted", "id": task_id}
