"""Product and ingredient services that go beyond plain CRUD."""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from backend.app.core.errors import ConflictError, NotFoundError
from backend.app.models.ingredient import Ingredient
from backend.app.models.order_item import OrderItem
from backend.app.models.product import Product
from backend.app.models.product_ingredient import ProductIngredient
from backend.app.models.task import Task
from backend.app.models.task_template import TaskTemplate
from backend.app.schemas.product import ProductIngredientCreate, ProductIngredientUpdate
from backend.app.schemas.task_template import ProductTaskTemplateRead
from backend.app.services.templates import delete_templates

logger = logging.getLogger(__name__)


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    return product


def get_ingredient(db: Session, ingredient_id: int) -> Ingredient:
    ingredient = db.get(Ingredient, ingredient_id)
    if ingredient is None:
        raise NotFoundError("Ingredient", ingredient_id)
    return ingredient


def get_product_ingredient(db: Session, link_id: int) -> ProductIngredient:
    link = db.get(ProductIngredient, link_id)
    if link is None:
        raise NotFoundError("Product ingredient", link_id)
    return link


def recompute_product_cost(db: Session, product_id: int) -> Decimal:
    """Set a product's cost price to the cost of its ingredient lines."""
    product = get_product(db, product_id)
    links = db.query(ProductIngredient).filter(ProductIngredient.product_id == product_id).all()
    cost = sum(
        (Decimal(str(link.quantity)) * Decimal(str(link.ingredient.price_per_unit or 0)) for link in links),
        Decimal("0.00"),
    )
    product.cost_price = cost
    db.flush()
    return cost


def add_ingredient_to_product(db: Session, product: Product, link_in: ProductIngredientCreate) -> ProductIngredient:
    get_ingredient(db, link_in.ingredient_id)
    link = ProductIngredient(product_id=product.id, ingredient_id=link_in.ingredient_id, quantity=link_in.quantity)
    db.add(link)
    db.flush()
    recompute_product_cost(db, product.id)
    db.commit()
    db.refresh(link)
    return link


def update_product_ingredient(db: Session, link: ProductIngredient, link_in: ProductIngredientUpdate) -> ProductIngredient:
    link.quantity = link_in.quantity
    db.flush()
    recompute_product_cost(db, link.product_id)
    db.commit()
    db.refresh(link)
    return link


def remove_ingredient_from_product(db: Session, link: ProductIngredient) -> None:
    product_id = link.product_id
    db.delete(link)
    db.flush()
    recompute_product_cost(db, product_id)
    db.commit()


def delete_product(db: Session, product: Product) -> None:
    in_orders = db.query(OrderItem.id).filter(OrderItem.product_id == product.id).first()
    if in_orders is not None:
        raise ConflictError("This product is used in orders and cannot be deleted")

    # Tasks outlive the catalog row; only their provenance is cleared
    db.query(Task).filter(Task.product_id == product.id).update({Task.product_id: None}, synchronize_session="fetch")
    templates = db.query(TaskTemplate).filter(TaskTemplate.product_id == product.id).all()
    delete_templates(db, templates)
    db.delete(product)
    db.commit()
    logger.info("Deleted product %s with %d task templates", product.id, len(templates))


def delete_ingredient(db: Session, ingredient: Ingredient) -> None:
    in_products = db.query(ProductIngredient.id).filter(ProductIngredient.ingredient_id == ingredient.id).first()
    if in_products is not None:
        raise ConflictError("This ingredient is used in products and cannot be deleted")

    db.query(Task).filter(Task.ingredient_id == ingredient.id).update(
        {Task.ingredient_id: None}, synchronize_session="fetch"
    )
    templates = db.query(TaskTemplate).filter(TaskTemplate.ingredient_id == ingredient.id).all()
    delete_templates(db, templates)
    db.delete(ingredient)
    db.commit()
    logger.info("Deleted ingredient %s with %d task templates", ingredient.id, len(templates))


def list_product_templates(db: Session, product_id: int) -> list[ProductTaskTemplateRead]:
    """Return a product's own templates followed by the ones it inherits from its ingredients.

    Inherited rows are informational; derivation never schedules them.
    """
    get_product(db, product_id)
    own = (
        db.query(TaskTemplate)
        .filter(TaskTemplate.product_id == product_id)
        .order_by(TaskTemplate.id.asc())
        .all()
    )
    ingredient_ids = [
        row.ingredient_id
        for row in db.query(ProductIngredient.ingredient_id).filter(ProductIngredient.product_id == product_id).all()
    ]
    inherited = []
    if ingredient_ids:
        inherited = (
            db.query(TaskTemplate)
            .filter(TaskTemplate.ingredient_id.in_(ingredient_ids), TaskTemplate.product_id.is_(None))
            .order_by(TaskTemplate.id.asc())
            .all()
        )

    rows = [ProductTaskTemplateRead.model_validate(template) for template in own]
    for template in inherited:
        row = ProductTaskTemplateRead.model_validate(template)
        row.inherited = True
        rows.append(row)
    return rows
