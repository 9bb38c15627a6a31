import itertools
from decimal import Decimal
from types import SimpleNamespace

import pytest

from backend.app.core.errors import DuplicateDerivation, NotFoundError, StoreFailure
from backend.app.services.task_derivation import TaskDeriver, derivation_key


class InMemoryFulfillmentStore:
    """Dict-backed stand-in for the database store."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.orders = {}
        self.templates = []
        self.items = []
        self.tasks = []

    def add_order(self, total_amount=Decimal("0.00")):
        order = SimpleNamespace(id=next(self._ids), total_amount=total_amount)
        self.orders[order.id] = order
        return order

    def add_template(self, title, product_id=None, ingredient_id=None, parent=None, description=None, priority=None):
        template = SimpleNamespace(
            id=next(self._ids),
            title=title,
            description=description,
            priority=priority,
            product_id=product_id,
            ingredient_id=ingredient_id,
            is_subtask=parent is not None,
            parent_template_id=parent.id if parent is not None else None,
        )
        self.templates.append(template)
        return template

    def add_item(self, order_id, product_id, quantity, price):
        item = SimpleNamespace(id=next(self._ids), order_id=order_id, product_id=product_id, quantity=quantity, price=price)
        self.items.append(item)
        return item

    def get_order(self, order_id):
        return self.orders.get(order_id)

    def list_templates(self, *, product_id=None, ingredient_id=None, parent_template_id=None, is_subtask=None):
        found = self.templates
        if product_id is not None:
            found = [t for t in found if t.product_id == product_id]
        if ingredient_id is not None:
            found = [t for t in found if t.ingredient_id == ingredient_id]
        if parent_template_id is not None:
            found = [t for t in found if t.parent_template_id == parent_template_id]
        if is_subtask is not None:
            found = [t for t in found if t.is_subtask == is_subtask]
        return list(found)

    def create_task(self, fields, derivation_key=None):
        if derivation_key is not None and any(t.derivation_key == derivation_key for t in self.tasks):
            raise DuplicateDerivation(derivation_key)
        task = SimpleNamespace(id=next(self._ids), derivation_key=derivation_key, **fields.model_dump())
        self.tasks.append(task)
        return task

    def find_tasks(self, *, order_id, product_id, title, parent_task_id=None):
        return [
            t
            for t in self.tasks
            if t.order_id == order_id and t.product_id == product_id and t.title == title and t.parent_task_id == parent_task_id
        ]

    def list_order_items(self, order_id):
        return [i for i in self.items if i.order_id == order_id]

    def update_order_total(self, order_id, total_amount):
        self.orders[order_id].total_amount = total_amount


PRODUCT_P = 100
PRODUCT_Q = 200
INGREDIENT_FLOUR = 300


@pytest.fixture
def store():
    return InMemoryFulfillmentStore()


@pytest.fixture
def order_with_prepare_and_package(store):
    order = store.add_order()
    store.add_item(order.id, PRODUCT_P, Decimal("1"), Decimal("25.00"))
    prepare = store.add_template("Prepare", product_id=PRODUCT_P, priority="high")
    store.add_template("Package", product_id=PRODUCT_P)
    store.add_template("Wash", product_id=PRODUCT_P, parent=prepare, ingredient_id=INGREDIENT_FLOUR)
    return order


def _by_title(tasks):
    return {task.title: task for task in tasks}


def test_derive_order_creates_parent_and_subtasks(store, order_with_prepare_and_package):
    order = order_with_prepare_and_package

    TaskDeriver(store).derive_tasks_for_order(order.id)

    assert len(store.tasks) == 3
    tasks = _by_title(store.tasks)
    assert tasks["Prepare"].parent_task_id is None
    assert tasks["Package"].parent_task_id is None
    assert tasks["Wash"].parent_task_id == tasks["Prepare"].id
    for task in store.tasks:
        assert task.status == "todo"
        assert task.task_type == "automatic"
        assert task.order_id == order.id
        assert task.product_id == PRODUCT_P
    assert tasks["Prepare"].priority == "high"


def test_second_derivation_creates_nothing_new(store, order_with_prepare_and_package):
    deriver = TaskDeriver(store)

    deriver.derive_tasks_for_order(order_with_prepare_and_package.id)
    deriver.derive_tasks_for_order(order_with_prepare_and_package.id)

    assert len(store.tasks) == 3
    top_level = [t for t in store.tasks if t.parent_task_id is None]
    assert sorted(t.title for t in top_level) == ["Package", "Prepare"]


def test_repeated_product_derivation_keeps_one_task_per_template(store):
    order = store.add_order()
    for title in ("Mix", "Bake", "Cool", "Box"):
        store.add_template(title, product_id=PRODUCT_P)
    deriver = TaskDeriver(store)

    deriver.derive_tasks_for_product(order.id, PRODUCT_P)
    deriver.derive_tasks_for_product(order.id, PRODUCT_P)

    assert len([t for t in store.tasks if t.task_type == "automatic" and t.parent_task_id is None]) == 4


def test_subtask_carries_ingredient_and_parent(store, order_with_prepare_and_package):
    TaskDeriver(store).derive_tasks_for_order(order_with_prepare_and_package.id)

    tasks = _by_title(store.tasks)
    assert tasks["Wash"].ingredient_id == INGREDIENT_FLOUR
    assert tasks["Wash"].parent_task_id == tasks["Prepare"].id
    assert tasks["Prepare"].ingredient_id is None


def test_ingredient_templates_are_never_scheduled(store):
    order = store.add_order()
    store.add_item(order.id, PRODUCT_P, Decimal("1"), Decimal("5.00"))
    sift = store.add_template("Sift flour", ingredient_id=INGREDIENT_FLOUR)
    store.add_template("Weigh flour", ingredient_id=INGREDIENT_FLOUR, parent=sift)
    knead = store.add_template("Knead", product_id=PRODUCT_P)
    # an ingredient-only subtask hanging off a product template is still not scheduled
    store.add_template("Check flour batch", ingredient_id=INGREDIENT_FLOUR, parent=knead)

    TaskDeriver(store).derive_tasks_for_order(order.id)

    assert [t.title for t in store.tasks] == ["Knead"]


def test_products_on_several_items_are_derived_once(store):
    order = store.add_order()
    store.add_item(order.id, PRODUCT_P, Decimal("1"), Decimal("5.00"))
    store.add_item(order.id, PRODUCT_Q, Decimal("1"), Decimal("7.00"))
    store.add_item(order.id, PRODUCT_P, Decimal("3"), Decimal("5.00"))
    store.add_template("Bake", product_id=PRODUCT_P)
    store.add_template("Label", product_id=PRODUCT_Q)

    TaskDeriver(store).derive_tasks_for_order(order.id)

    assert sorted((t.product_id, t.title) for t in store.tasks) == [(PRODUCT_P, "Bake"), (PRODUCT_Q, "Label")]


def test_derive_unknown_order_raises_not_found(store):
    with pytest.raises(NotFoundError):
        TaskDeriver(store).derive_tasks_for_order(999)


def test_lost_race_reuses_existing_task(store):
    order = store.add_order()
    store.add_template("Bake", product_id=PRODUCT_P)
    winner = SimpleNamespace(
        id=50,
        title="Bake",
        order_id=order.id,
        product_id=PRODUCT_P,
        parent_task_id=None,
        derivation_key=derivation_key(order.id, PRODUCT_P, "Bake"),
    )
    stale_reads = iter([[]])
    real_find = store.find_tasks

    def find_tasks(**kwargs):
        # first lookup happens before the concurrent insert became visible
        stale = next(stale_reads, None)
        if stale is not None:
            store.tasks.append(winner)
            return stale
        return real_find(**kwargs)

    store.find_tasks = find_tasks

    TaskDeriver(store).derive_tasks_for_product(order.id, PRODUCT_P)

    assert store.tasks == [winner]


def test_store_failure_propagates(store):
    order = store.add_order()
    store.add_template("Bake", product_id=PRODUCT_P)

    def broken_create(fields, derivation_key=None):
        raise StoreFailure("connection reset")

    store.create_task = broken_create

    with pytest.raises(StoreFailure):
        TaskDeriver(store).derive_tasks_for_product(order.id, PRODUCT_P)


def test_recompute_total_adds_new_line(store):
    order = store.add_order()
    store.add_item(order.id, PRODUCT_P, Decimal("1"), Decimal("25.00"))
    deriver = TaskDeriver(store)
    assert deriver.recompute_order_total(order.id) == Decimal("25.00")

    store.add_item(order.id, PRODUCT_Q, Decimal("2"), Decimal("10.00"))
    total = deriver.recompute_order_total(order.id)

    assert total == Decimal("45.00")
    assert store.orders[order.id].total_amount == Decimal("45.00")


def test_recompute_total_keeps_decimal_precision(store):
    order = store.add_order()
    store.add_item(order.id, PRODUCT_P, Decimal("3"), Decimal("0.10"))
    store.add_item(order.id, PRODUCT_Q, Decimal("1"), Decimal("0.20"))

    total = TaskDeriver(store).recompute_order_total(order.id)

    assert total == Decimal("0.50")
    assert str(total) == "0.50"


def test_recompute_total_of_empty_order_is_zero(store):
    order = store.add_order(total_amount=Decimal("12.00"))

    assert TaskDeriver(store).recompute_order_total(order.id) == Decimal("0.00")
    assert store.orders[order.id].total_amount == Decimal("0.00")


def test_recompute_total_unknown_order(store):
    with pytest.raises(NotFoundError):
        TaskDeriver(store).recompute_order_total(42)


def test_derivation_key_distinguishes_parents():
    assert derivation_key(1, 2, "Wash") == "1:2:-:Wash"
    assert derivation_key(1, 2, "Wash", 7) == "1:2:7:Wash"
