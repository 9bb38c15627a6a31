"""Task template management.

A template belongs to exactly one product or ingredient. Subtask templates
hang off a top-level template of the same origin and are removed with it.
"""

from typing import Iterable

from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError
from backend.app.models.ingredient import Ingredient
from backend.app.models.product import Product
from backend.app.models.task_template import TaskTemplate
from backend.app.schemas.task_template import TaskTemplateCreate, TaskTemplateUpdate


def get_template(db: Session, template_id: int) -> TaskTemplate:
    template = db.get(TaskTemplate, template_id)
    if template is None:
        raise NotFoundError("Task template", template_id)
    return template


def list_templates(
    db: Session,
    product_id: int | None = None,
    ingredient_id: int | None = None,
) -> list[TaskTemplate]:
    query = db.query(TaskTemplate)
    if product_id is not None:
        query = query.filter(TaskTemplate.product_id == product_id)
    if ingredient_id is not None:
        query = query.filter(TaskTemplate.ingredient_id == ingredient_id)
    return query.order_by(TaskTemplate.id.asc()).all()


def create_template(db: Session, template_in: TaskTemplateCreate) -> TaskTemplate:
    data = template_in.model_dump()

    if template_in.is_subtask:
        if template_in.parent_template_id is None:
            raise ConflictError("A subtask template needs a parent template")
        parent = get_template(db, template_in.parent_template_id)
        if parent.is_subtask:
            raise ConflictError("A subtask template cannot be the parent of another subtask")
        if data["product_id"] is None and data["ingredient_id"] is None:
            data["product_id"] = parent.product_id
            data["ingredient_id"] = parent.ingredient_id
        if (data["product_id"], data["ingredient_id"]) != (parent.product_id, parent.ingredient_id):
            raise ConflictError("A subtask template must share its parent's product or ingredient")
    elif template_in.parent_template_id is not None:
        raise ConflictError("Only subtask templates may have a parent template")

    if (data["product_id"] is None) == (data["ingredient_id"] is None):
        raise ConflictError("A task template belongs to exactly one product or ingredient")
    if data["product_id"] is not None and db.get(Product, data["product_id"]) is None:
        raise NotFoundError("Product", data["product_id"])
    if data["ingredient_id"] is not None and db.get(Ingredient, data["ingredient_id"]) is None:
        raise NotFoundError("Ingredient", data["ingredient_id"])

    template = TaskTemplate(**data)
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


def update_template(db: Session, template: TaskTemplate, template_in: TaskTemplateUpdate) -> TaskTemplate:
    for field, value in template_in.model_dump(exclude_unset=True).items():
        setattr(template, field, value)
    db.commit()
    db.refresh(template)
    return template


def delete_templates(db: Session, templates: Iterable[TaskTemplate]) -> None:
    """Mark templates for deletion; their subtask templates go first via cascade."""
    for template in templates:
        db.delete(template)
    db.flush()


def delete_template(db: Session, template: TaskTemplate) -> None:
    delete_templates(db, [template])
    db.commit()
