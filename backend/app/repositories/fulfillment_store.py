"""Read/write operations the task deriver needs from persistence.

`FulfillmentStore` is the seam between the deriver and the database. The
SQLAlchemy implementation only flushes; committing is left to the caller so
that a total recomputation lands in the same transaction as the item change
that triggered it.
"""

from decimal import Decimal
from typing import Any, Optional, Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.errors import DuplicateDerivation, StoreFailure
from backend.app.models.order import Order
from backend.app.models.order_item import OrderItem
from backend.app.models.task import Task
from backend.app.models.task_template import TaskTemplate
from backend.app.schemas.task import TaskCreate


class FulfillmentStore(Protocol):
    def get_order(self, order_id: int) -> Optional[Any]: ...

    def list_templates(
        self,
        *,
        product_id: Optional[int] = None,
        ingredient_id: Optional[int] = None,
        parent_template_id: Optional[int] = None,
        is_subtask: Optional[bool] = None,
    ) -> list[Any]: ...

    def create_task(self, fields: TaskCreate, derivation_key: Optional[str] = None) -> Any: ...

    def find_tasks(
        self,
        *,
        order_id: int,
        product_id: int,
        title: str,
        parent_task_id: Optional[int] = None,
    ) -> list[Any]: ...

    def list_order_items(self, order_id: int) -> list[Any]: ...

    def update_order_total(self, order_id: int, total_amount: Decimal) -> None: ...


class SqlAlchemyFulfillmentStore:
    def __init__(self, db: Session):
        self.db = db

    def get_order(self, order_id: int) -> Optional[Order]:
        try:
            return self.db.get(Order, order_id)
        except SQLAlchemyError as exc:
            raise StoreFailure(f"Failed to load order {order_id}") from exc

    def list_templates(
        self,
        *,
        product_id: Optional[int] = None,
        ingredient_id: Optional[int] = None,
        parent_template_id: Optional[int] = None,
        is_subtask: Optional[bool] = None,
    ) -> list[TaskTemplate]:
        query = self.db.query(TaskTemplate)
        if product_id is not None:
            query = query.filter(TaskTemplate.product_id == product_id)
        if ingredient_id is not None:
            query = query.filter(TaskTemplate.ingredient_id == ingredient_id)
        if parent_template_id is not None:
            query = query.filter(TaskTemplate.parent_template_id == parent_template_id)
        if is_subtask is not None:
            query = query.filter(TaskTemplate.is_subtask.is_(is_subtask))
        try:
            return query.order_by(TaskTemplate.id.asc()).all()
        except SQLAlchemyError as exc:
            raise StoreFailure("Failed to list task templates") from exc

    def create_task(self, fields: TaskCreate, derivation_key: Optional[str] = None) -> Task:
        task = Task(**fields.model_dump(), derivation_key=derivation_key)
        try:
            with self.db.begin_nested():
                self.db.add(task)
                self.db.flush()
        except IntegrityError as exc:
            if derivation_key is not None:
                raise DuplicateDerivation(derivation_key) from exc
            raise StoreFailure(f"Failed to create task {fields.title!r}") from exc
        except SQLAlchemyError as exc:
            raise StoreFailure(f"Failed to create task {fields.title!r}") from exc
        return task

    def find_tasks(
        self,
        *,
        order_id: int,
        product_id: int,
        title: str,
        parent_task_id: Optional[int] = None,
    ) -> list[Task]:
        query = self.db.query(Task).filter(
            Task.order_id == order_id,
            Task.product_id == product_id,
            Task.title == title,
        )
        if parent_task_id is None:
            query = query.filter(Task.parent_task_id.is_(None))
        else:
            query = query.filter(Task.parent_task_id == parent_task_id)
        try:
            return query.order_by(Task.id.asc()).all()
        except SQLAlchemyError as exc:
            raise StoreFailure("Failed to look up existing tasks") from exc

    def list_order_items(self, order_id: int) -> list[OrderItem]:
        try:
            return (
                self.db.query(OrderItem)
                .filter(OrderItem.order_id == order_id)
                .order_by(OrderItem.id.asc())
                .all()
            )
        except SQLAlchemyError as exc:
            raise StoreFailure(f"Failed to list items of order {order_id}") from exc

    def update_order_total(self, order_id: int, total_amount: Decimal) -> None:
        order = self.get_order(order_id)
        if order is None:
            raise StoreFailure(f"Order {order_id} vanished before its total was written")
        order.total_amount = total_amount
        try:
            self.db.flush()
        except SQLAlchemyError as exc:
            raise StoreFailure(f"Failed to update total of order {order_id}") from exc
