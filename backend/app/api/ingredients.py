"""Ingredient endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError
from backend.app.crud.crud_catalog import ingredient_crud
from backend.app.db.session import get_db
from backend.app.models.ingredient import Ingredient
from backend.app.schemas.ingredient import IngredientCreate, IngredientRead, IngredientUpdate
from backend.app.schemas.task_template import TaskTemplateRead
from backend.app.services import catalog, templates

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


def _get_ingredient(db: Session, ingredient_id: int) -> Ingredient:
    try:
        return catalog.get_ingredient(db, ingredient_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ingredient not found")


@router.post("/", response_model=IngredientRead, status_code=status.HTTP_201_CREATED)
async def create_ingredient(ingredient_in: IngredientCreate, db: Session = Depends(get_db)):
    return ingredient_crud.create(db, obj_in=ingredient_in)


@router.get("/", response_model=list[IngredientRead])
async def list_ingredients(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return ingredient_crud.get_multi(db, skip=skip, limit=limit)


@router.get("/{ingredient_id}", response_model=IngredientRead)
async def get_ingredient(ingredient_id: int, db: Session = Depends(get_db)):
    return _get_ingredient(db, ingredient_id)


@router.put("/{ingredient_id}", response_model=IngredientRead)
async def update_ingredient(ingredient_id: int, ingredient_in: IngredientUpdate, db: Session = Depends(get_db)):
    ingredient = _get_ingredient(db, ingredient_id)
    return ingredient_crud.update(db, db_obj=ingredient, obj_in=ingredient_in)


@router.delete("/{ingredient_id}")
async def delete_ingredient(ingredient_id: int, db: Session = Depends(get_db)):
    ingredient = _get_ingredient(db, ingredient_id)
    try:
        catalog.delete_ingredient(db, ingredient)
    except ConflictError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"status": "deleted", "id": ingredient_id}


@router.get("/{ingredient_id}/task-templates", response_model=list[TaskTemplateRead])
async def list_ingredient_templates(ingredient_id: int, db: Session = Depends(get_db)):
    _get_ingredient(db, ingredient_id)
    return templates.list_templates(db, ingredient_id=ingredient_id)
