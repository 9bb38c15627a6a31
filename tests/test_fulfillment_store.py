import pytest
from decimal import Decimal

from backend.app.core.errors import DuplicateDerivation
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.models.order import Order
from backend.app.models.order_item import OrderItem
from backend.app.models.product import Product
from backend.app.models.task import Task
from backend.app.models.task_template import TaskTemplate
from backend.app.repositories.fulfillment_store import SqlAlchemyFulfillmentStore
from backend.app.schemas.task import TaskCreate


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _create_order_with_product(db):
    product = Product(name="Sourdough", selling_price=Decimal("6.50"))
    order = Order(status="pending")
    db.add_all([product, order])
    db.commit()
    db.refresh(product)
    db.refresh(order)
    return order, product


def test_duplicate_derivation_key_is_reported_and_session_survives():
    db = SessionLocal()
    try:
        order, product = _create_order_with_product(db)
        store = SqlAlchemyFulfillmentStore(db)
        fields = TaskCreate(title="Bake", task_type="automatic", order_id=order.id, product_id=product.id)

        first = store.create_task(fields, derivation_key="k-bake")
        db.commit()

        with pytest.raises(DuplicateDerivation):
            store.create_task(fields, derivation_key="k-bake")

        store.create_task(TaskCreate(title="Slice", order_id=order.id, product_id=product.id))
        db.commit()

        titles = sorted(task.title for task in db.query(Task).all())
        assert titles == ["Bake", "Slice"]
        assert db.get(Task, first.id).derivation_key == "k-bake"
    finally:
        db.close()


def test_find_tasks_separates_top_level_and_subtasks():
    db = SessionLocal()
    try:
        order, product = _create_order_with_product(db)
        store = SqlAlchemyFulfillmentStore(db)
        parent = store.create_task(TaskCreate(title="Wash", order_id=order.id, product_id=product.id))
        child = store.create_task(
            TaskCreate(title="Wash", order_id=order.id, product_id=product.id, parent_task_id=parent.id)
        )
        db.commit()

        top = store.find_tasks(order_id=order.id, product_id=product.id, title="Wash")
        nested = store.find_tasks(order_id=order.id, product_id=product.id, title="Wash", parent_task_id=parent.id)

        assert [t.id for t in top] == [parent.id]
        assert [t.id for t in nested] == [child.id]
    finally:
        db.close()


def test_list_templates_filters():
    db = SessionLocal()
    try:
        order, product = _create_order_with_product(db)
        top = TaskTemplate(title="Shape", product_id=product.id)
        db.add(top)
        db.commit()
        db.refresh(top)
        db.add(TaskTemplate(title="Flour bench", product_id=product.id, is_subtask=True, parent_template_id=top.id))
        db.commit()

        store = SqlAlchemyFulfillmentStore(db)
        assert [t.title for t in store.list_templates(product_id=product.id, is_subtask=False)] == ["Shape"]
        assert [t.title for t in store.list_templates(parent_template_id=top.id)] == ["Flour bench"]
    finally:
        db.close()


def test_update_order_total_is_flushed_not_committed():
    db = SessionLocal()
    try:
        order, product = _create_order_with_product(db)
        db.add(OrderItem(order_id=order.id, product_id=product.id, quantity=Decimal("2"), price=Decimal("6.50")))
        db.commit()

        store = SqlAlchemyFulfillmentStore(db)
        store.update_order_total(order.id, Decimal("13.00"))
        db.rollback()

        assert db.get(Order, order.id).total_amount == Decimal("0.00")
        assert [item.quantity for item in store.list_order_items(order.id)] == [Decimal("2")]
    finally:
        db.close()
