"""CRUD operations for products and ingredients.

Deletes go through `backend.app.services.catalog`, which guards dependants.
"""

from backend.app.crud.base import CRUDBase
from backend.app.models.ingredient import Ingredient
from backend.app.models.product import Product

product_crud = CRUDBase(Product)
ingredient_crud = CRUDBase(Ingredient)
