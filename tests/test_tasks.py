import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.main import app
from backend.app.services.tasks import group_tasks_by_status


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def create_task(client: TestClient, title: str, **fields) -> dict:
    resp = client.post("/tasks", json={"title": title, **fields})
    assert resp.status_code == 201, resp.text
    return resp.json()


def move(client: TestClient, task_id: int, status: str):
    return client.patch(f"/tasks/{task_id}/status", json={"status": status})


def test_manual_task_defaults():
    client = TestClient(app)

    task = create_task(client, "Call supplier", task_type="automatic")

    assert task["status"] == "todo"
    assert task["priority"] == "medium"
    assert task["task_type"] == "manual"


def test_task_for_unknown_order_is_404():
    client = TestClient(app)

    resp = client.post("/tasks", json={"title": "Deliver", "order_id": 999})

    assert resp.status_code == 404


def test_status_moves_forward_to_completed():
    client = TestClient(app)
    task_id = create_task(client, "Bake")["id"]

    assert move(client, task_id, "in-progress").json()["status"] == "in-progress"
    assert move(client, task_id, "completed").json()["status"] == "completed"


def test_cancel_from_open_states_only():
    client = TestClient(app)
    todo_id = create_task(client, "Bake")["id"]
    done_id = create_task(client, "Box")["id"]
    move(client, done_id, "in-progress")
    move(client, done_id, "completed")

    assert move(client, todo_id, "cancelled").status_code == 200
    assert move(client, done_id, "cancelled").status_code == 400
    assert move(client, todo_id, "todo").status_code == 400


def test_skipping_in_progress_is_rejected():
    client = TestClient(app)
    task_id = create_task(client, "Bake")["id"]

    resp = move(client, task_id, "completed")

    assert resp.status_code == 400
    assert client.get(f"/tasks/{task_id}").json()["status"] == "todo"


def test_same_status_is_a_no_op():
    client = TestClient(app)
    task_id = create_task(client, "Bake")["id"]

    assert move(client, task_id, "todo").status_code == 200


def test_update_task_fields_and_status():
    client = TestClient(app)
    task_id = create_task(client, "Bake")["id"]

    resp = client.put(
        f"/tasks/{task_id}",
        json={"title": "Bake twice", "assignee_id": "sam", "deadline": "2030-01-01T09:00:00+00:00", "status": "in-progress"},
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["title"] == "Bake twice"
    assert data["assignee_id"] == "sam"
    assert data["status"] == "in-progress"
    assert client.put(f"/tasks/{task_id}", json={"status": "todo"}).status_code == 400


def test_board_filters_by_order_status():
    client = TestClient(app)
    pending_id = client.post("/orders", json={"status": "pending"}).json()["id"]
    done_id = client.post("/orders", json={"status": "completed"}).json()["id"]
    a = create_task(client, "Pending work", order_id=pending_id)
    create_task(client, "Finished work", order_id=done_id)
    move(client, a["id"], "in-progress")

    board = client.get("/tasks/board", params={"order_status": "pending"}).json()

    assert [t["title"] for t in board["in_progress"]] == ["Pending work"]
    assert board["todo"] == []
    assert board["completed"] == []
    assert board["cancelled"] == []
    assert len(client.get("/tasks").json()) == 2


def test_deleting_task_removes_subtasks():
    client = TestClient(app)
    parent = create_task(client, "Decorate")
    create_task(client, "Pipe icing", parent_task_id=parent["id"])

    assert client.delete(f"/tasks/{parent['id']}").status_code == 200
    assert client.get("/tasks").json() == []


class _Row:
    def __init__(self, status):
        self.status = status


def test_group_tasks_puts_unknown_status_in_todo():
    grouped = group_tasks_by_status([_Row("todo"), _Row("blocked"), _Row("completed")])

    assert [len(grouped[column]) for column in ("todo", "in-progress", "completed", "cancelled")] == [2, 0, 1, 0]


def test_task_carries_product_and_ingredient_names():
    client = TestClient(app)
    product_id = client.post("/products", json={"name": "Baguette", "selling_price": "3.00"}).json()["id"]
    ingredient_id = client.post(
        "/ingredients", json={"name": "Rye flour", "unit": "kg", "price_per_unit": "2.10"}
    ).json()["id"]
    create_task(client, "Bake", product_id=product_id)
    create_task(client, "Restock", ingredient_id=ingredient_id)
    create_task(client, "Sweep")

    names = {t["title"]: (t["product_name"], t["ingredient_name"]) for t in client.get("/tasks").json()}

    assert names == {"Bake": ("Baguette", None), "Restock": (None, "Rye flour"), "Sweep": (None, None)}
    board = client.get("/tasks/board").json()
    assert {t["product_name"] for t in board["todo"]} == {"Baguette", None}
