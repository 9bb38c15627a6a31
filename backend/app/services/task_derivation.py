"""Derivation of order tasks from product task templates.

When an order gains a product, each top-level template of that product
becomes a `todo` task of type `automatic`, and each of the template's direct
subtask templates becomes a child task of it. Ingredient templates are never
scheduled; they only describe prep work on the product page.

Derivation is idempotent: a task is looked up by (order, product, title,
parent task) before it is created, and the store's unique derivation key
turns a lost race into a skip instead of a duplicate.
"""

import logging
from decimal import Decimal
from typing import Any, Optional

from backend.app.core.errors import DuplicateDerivation, NotFoundError
from backend.app.models.enums import TaskStatus, TaskType
from backend.app.repositories.fulfillment_store import FulfillmentStore
from backend.app.schemas.task import TaskCreate

logger = logging.getLogger(__name__)


def derivation_key(order_id: int, product_id: int, title: str, parent_task_id: Optional[int] = None) -> str:
    parent = parent_task_id if parent_task_id is not None else "-"
    return f"{order_id}:{product_id}:{parent}:{title}"


class TaskDeriver:
    def __init__(self, store: FulfillmentStore):
        self.store = store

    def derive_tasks_for_order(self, order_id: int) -> None:
        if self.store.get_order(order_id) is None:
            raise NotFoundError("Order", order_id)

        product_ids: list[int] = []
        for item in self.store.list_order_items(order_id):
            if item.product_id not in product_ids:
                product_ids.append(item.product_id)

        for product_id in product_ids:
            self.derive_tasks_for_product(order_id, product_id)

    def derive_tasks_for_product(self, order_id: int, product_id: int) -> None:
        templates = self.store.list_templates(product_id=product_id, is_subtask=False)

        # Templates are processed one at a time so each lookup sees the previous insert
        template_task_map: dict[int, int] = {}
        for template in templates:
            task = self._materialize(order_id, product_id, template, parent_task_id=None)
            template_task_map[template.id] = task.id

        for template in templates:
            parent_task_id = template_task_map[template.id]
            subtemplates = self.store.list_templates(parent_template_id=template.id, product_id=product_id)
            for subtemplate in subtemplates:
                self._materialize(order_id, product_id, subtemplate, parent_task_id=parent_task_id)

    def recompute_order_total(self, order_id: int) -> Decimal:
        if self.store.get_order(order_id) is None:
            raise NotFoundError("Order", order_id)

        items = self.store.list_order_items(order_id)
        total = sum(
            (Decimal(str(item.price)) * Decimal(str(item.quantity)) for item in items),
            Decimal("0.00"),
        )
        self.store.update_order_total(order_id, total)
        return total

    def _materialize(self, order_id: int, product_id: int, template: Any, parent_task_id: Optional[int]) -> Any:
        existing = self.store.find_tasks(
            order_id=order_id,
            product_id=product_id,
            title=template.title,
            parent_task_id=parent_task_id,
        )
        if existing:
            logger.debug("Template %s already derived for order %s as task %s", template.id, order_id, existing[0].id)
            return existing[0]

        fields = TaskCreate(
            title=template.title,
            description=template.description,
            priority=template.priority,
            status=TaskStatus.TODO,
            task_type=TaskType.AUTOMATIC,
            parent_task_id=parent_task_id,
            order_id=order_id,
            product_id=product_id,
            ingredient_id=template.ingredient_id,
        )
        key = derivation_key(order_id, product_id, template.title, parent_task_id)
        try:
            task = self.store.create_task(fields, derivation_key=key)
        except DuplicateDerivation:
            existing = self.store.find_tasks(
                order_id=order_id,
                product_id=product_id,
                title=template.title,
                parent_task_id=parent_task_id,
            )
            if not existing:
                raise
            logger.info("Task %r for order %s was derived concurrently; reusing task %s", template.title, order_id, existing[0].id)
            return existing[0]

        logger.info("Derived task %s %r for order %s from template %s", task.id, task.title, order_id, template.id)
        return task
