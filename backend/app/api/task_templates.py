"""Task template endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError
from backend.app.db.session import get_db
from backend.app.models.task_template import TaskTemplate
from backend.app.schemas.task_template import TaskTemplateCreate, TaskTemplateRead, TaskTemplateUpdate
from backend.app.services import templates

router = APIRouter(prefix="/task-templates", tags=["task_templates"])


def _get_template(db: Session, template_id: int) -> TaskTemplate:
    try:
        return templates.get_template(db, template_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task template not found")


@router.post("/", response_model=TaskTemplateRead, status_code=status.HTTP_201_CREATED)
async def create_task_template(template_in: TaskTemplateCreate, db: Session = Depends(get_db)):
    try:
        return templates.create_template(db, template_in)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ConflictError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/", response_model=list[TaskTemplateRead])
async def list_task_templates(
    product_id: int | None = None,
    ingredient_id: int | None = None,
    db: Session = Depends(get_db),
):
    return templates.list_templates(db, product_id=product_id, ingredient_id=ingredient_id)


@router.get("/{template_id}", response_model=TaskTemplateRead)
async def get_task_template(template_id: int, db: Session = Depends(get_db)):
    return _get_template(db, template_id)


@router.put("/{template_id}", response_model=TaskTemplateRead)
async def update_task_template(template_id: int, template_in: TaskTemplateUpdate, db: Session = Depends(get_db)):
    template = _get_template(db, template_id)
    return templates.update_template(db, template, template_in)


@router.delete("/{template_id}")
async def delete_task_template(template_id: int, db: Session = Depends(get_db)):
    template = _get_template(db, template_id)
    templates.delete_template(db, template)
    return {"status": "deleted", "id": template_id}
