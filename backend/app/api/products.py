"""Product endpoints, including recipe lines and the product's task templates."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError
from backend.app.crud.crud_catalog import product_crud
from backend.app.db.session import get_db
from backend.app.models.product import Product
from backend.app.schemas.product import (
    ProductCreate,
    ProductIngredientCreate,
    ProductIngredientRead,
    ProductIngredientUpdate,
    ProductRead,
    ProductUpdate,
)
from backend.app.schemas.task_template import ProductTaskTemplateRead
from backend.app.services import catalog

router = APIRouter(prefix="/products", tags=["products"])


def _get_product(db: Session, product_id: int) -> Product:
    try:
        return catalog.get_product(db, product_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")


@router.post("/", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(product_in: ProductCreate, db: Session = Depends(get_db)):
    return product_crud.create(db, obj_in=product_in)


@router.get("/", response_model=list[ProductRead])
async def list_products(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return product_crud.get_multi(db, skip=skip, limit=limit)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(product_id: int, db: Session = Depends(get_db)):
    return _get_product(db, product_id)


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(product_id: int, product_in: ProductUpdate, db: Session = Depends(get_db)):
    product = _get_product(db, product_id)
    return product_crud.update(db, db_obj=product, obj_in=product_in)


@router.delete("/{product_id}")
async def delete_product(product_id: int, db: Session = Depends(get_db)):
    product = _get_product(db, product_id)
    try:
        catalog.delete_product(db, product)
    except ConflictError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"status": "deleted", "id": product_id}


@router.get("/{product_id}/ingredients", response_model=list[ProductIngredientRead])
async def list_product_ingredients(product_id: int, db: Session = Depends(get_db)):
    return _get_product(db, product_id).ingredient_links


@router.post("/{product_id}/ingredients", response_model=ProductIngredientRead, status_code=status.HTTP_201_CREATED)
async def add_product_ingredient(product_id: int, link_in: ProductIngredientCreate, db: Session = Depends(get_db)):
    product = _get_product(db, product_id)
    try:
        return catalog.add_ingredient_to_product(db, product, link_in)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ingredient not found")


@router.put("/ingredients/{link_id}", response_model=ProductIngredientRead)
async def update_product_ingredient(link_id: int, link_in: ProductIngredientUpdate, db: Session = Depends(get_db)):
    try:
        link = catalog.get_product_ingredient(db, link_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product ingredient not found")
    return catalog.update_product_ingredient(db, link, link_in)


@router.delete("/ingredients/{link_id}")
async def remove_product_ingredient(link_id: int, db: Session = Depends(get_db)):
    try:
        link = catalog.get_product_ingredient(db, link_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product ingredient not found")
    catalog.remove_ingredient_from_product(db, link)
    return {"status": "deleted", "id": link_id}


@router.get("/{product_id}/task-templates", response_model=list[ProductTaskTemplateRead])
async def list_product_templates(product_id: int, db: Session = Depends(get_db)):
    _get_product(db, product_id)
    return catalog.list_product_templates(db, product_id)
