"""CRUD operations for customers."""

from backend.app.crud.base import CRUDBase
from backend.app.models.customer import Customer

customer_crud = CRUDBase(Customer)
