"""Order management: header changes, line items and their follow-up work.

Every item mutation recomputes the order total before the transaction is
committed. Task derivation runs after the commit as a best-effort step: a
failure is logged and rolled back on its own, and the order change stands.
"""

import logging
from decimal import Decimal
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError, OrderDeskError
from backend.app.core.settings import get_settings
from backend.app.models.customer import Customer
from backend.app.models.order import Order
from backend.app.models.order_item import OrderItem
from backend.app.models.product import Product
from backend.app.models.task import Task
from backend.app.repositories.fulfillment_store import SqlAlchemyFulfillmentStore
from backend.app.schemas.order import OrderCreate, OrderItemCreate, OrderItemUpdate, OrderUpdate
from backend.app.services.task_derivation import TaskDeriver

logger = logging.getLogger(__name__)


def get_deriver(db: Session) -> TaskDeriver:
    return TaskDeriver(SqlAlchemyFulfillmentStore(db))


def get_order(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order", order_id)
    return order


def get_order_item(db: Session, item_id: int) -> OrderItem:
    item = db.get(OrderItem, item_id)
    if item is None:
        raise NotFoundError("Order item", item_id)
    return item


def list_orders(db: Session, status: str | None = None, skip: int = 0, limit: int = 50) -> list[Order]:
    query = db.query(Order)
    if status:
        query = query.filter(Order.status == status)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).offset(skip).limit(limit).all()


def _check_customer(db: Session, customer_id: int | None) -> None:
    if customer_id is not None and db.get(Customer, customer_id) is None:
        raise NotFoundError("Customer", customer_id)


def _add_item(db: Session, order: Order, item_in: OrderItemCreate) -> OrderItem:
    product = db.get(Product, item_in.product_id)
    if product is None:
        raise NotFoundError("Product", item_in.product_id)
    price = item_in.price if item_in.price is not None else product.selling_price
    item = OrderItem(order_id=order.id, product_id=product.id, quantity=item_in.quantity, price=price)
    db.add(item)
    db.flush()
    return item


def _derive_best_effort(db: Session, order_id: int, derive: Callable[[TaskDeriver], None]) -> None:
    try:
        derive(get_deriver(db))
        db.commit()
    except (OrderDeskError, SQLAlchemyError):
        db.rollback()
        logger.warning("Task derivation for order %s failed; the order was saved and tasks can be re-derived", order_id, exc_info=True)


def create_order(db: Session, order_in: OrderCreate) -> Order:
    _check_customer(db, order_in.customer_id)
    data = order_in.model_dump(exclude={"items"}, exclude_none=True)
    order = Order(**data)
    db.add(order)
    try:
        db.flush()
        for item_in in order_in.items:
            _add_item(db, order, item_in)
        get_deriver(db).recompute_order_total(order.id)
    except NotFoundError:
        db.rollback()
        raise
    db.commit()
    db.refresh(order)
    logger.info("Created order %s with %d items", order.id, len(order_in.items))

    if order_in.items:
        order_id = order.id
        _derive_best_effort(db, order_id, lambda deriver: deriver.derive_tasks_for_order(order_id))
        db.refresh(order)
    return order


def update_order(db: Session, order: Order, order_in: OrderUpdate) -> Order:
    update_data = order_in.model_dump(exclude_unset=True)
    if "customer_id" in update_data:
        _check_customer(db, update_data["customer_id"])
    for field, value in update_data.items():
        setattr(order, field, value)
    db.commit()
    db.refresh(order)
    return order


def delete_order(db: Session, order: Order) -> None:
    """Delete an order along with its items and every task recorded against it."""
    order_id = order.id
    db.delete(order)
    db.commit()
    logger.info("Deleted order %s", order_id)


def add_item_to_order(db: Session, order: Order, item_in: OrderItemCreate) -> OrderItem:
    item = _add_item(db, order, item_in)
    get_deriver(db).recompute_order_total(order.id)
    db.commit()
    db.refresh(item)

    if order.status in get_settings().derive_tasks_on_add_statuses:
        order_id, product_id = order.id, item.product_id
        _derive_best_effort(db, order_id, lambda deriver: deriver.derive_tasks_for_product(order_id, product_id))
        db.refresh(item)
    return item


def update_order_item(db: Session, item: OrderItem, item_in: OrderItemUpdate) -> OrderItem:
    for field, value in item_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(item, field, value)
    db.flush()
    get_deriver(db).recompute_order_total(item.order_id)
    db.commit()
    db.refresh(item)
    return item


def remove_item_from_order(db: Session, item: OrderItem) -> None:
    """Remove a line item; the product's tasks go too once no line references it."""
    order_id, product_id = item.order_id, item.product_id
    db.delete(item)
    db.flush()

    still_ordered = (
        db.query(OrderItem.id)
        .filter(OrderItem.order_id == order_id, OrderItem.product_id == product_id)
        .first()
    )
    if still_ordered is None:
        tasks = db.query(Task).filter(Task.order_id == order_id, Task.product_id == product_id).all()
        for task in tasks:
            db.delete(task)
        db.flush()

    get_deriver(db).recompute_order_total(order_id)
    db.commit()


def derive_tasks(db: Session, order_id: int) -> list[Task]:
    """Re-run derivation for a whole order; errors reach the caller."""
    try:
        get_deriver(db).derive_tasks_for_order(order_id)
    except OrderDeskError:
        db.rollback()
        raise
    db.commit()
    return db.query(Task).filter(Task.order_id == order_id).order_by(Task.id.asc()).all()


def recompute_total(db: Session, order_id: int) -> Decimal:
    total = get_deriver(db).recompute_order_total(order_id)
    db.commit()
    return total
