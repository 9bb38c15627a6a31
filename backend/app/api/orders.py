"""Order endpoints: orders, their line items and derived tasks."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError
from backend.app.db.session import get_db
from backend.app.models.order import Order
from backend.app.models.order_item import OrderItem
from backend.app.schemas.order import (
    OrderCreate,
    OrderDetailRead,
    OrderItemCreate,
    OrderItemRead,
    OrderItemUpdate,
    OrderRead,
    OrderTotalRead,
    OrderUpdate,
)
from backend.app.schemas.task import TaskRead
from backend.app.services import orders as order_service

router = APIRouter(prefix="/orders", tags=["orders"])


def _get_order(db: Session, order_id: int) -> Order:
    try:
        return order_service.get_order(db, order_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")


def _get_item(db: Session, item_id: int) -> OrderItem:
    try:
        return order_service.get_order_item(db, item_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order item not found")


@router.get("/", response_model=List[OrderRead])
async def list_orders(
    status: str | None = None,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
):
    return order_service.list_orders(db, status=status, skip=skip, limit=limit)


@router.post("/", response_model=OrderDetailRead, status_code=status.HTTP_201_CREATED)
async def create_order(order_in: OrderCreate, db: Session = Depends(get_db)):
    try:
        return order_service.create_order(db, order_in)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/{order_id}", response_model=OrderDetailRead)
async def get_order(order_id: int, db: Session = Depends(get_db)):
    return _get_order(db, order_id)


@router.patch("/{order_id}", response_model=OrderRead)
async def update_order(order_id: int, order_in: OrderUpdate, db: Session = Depends(get_db)):
    order = _get_order(db, order_id)
    try:
        return order_service.update_order(db, order, order_in)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.delete("/{order_id}")
async def delete_order(order_id: int, db: Session = Depends(get_db)):
    order = _get_order(db, order_id)
    order_service.delete_order(db, order)
    return {"status": "deleted", "id": order_id}


@router.post("/{order_id}/items", response_model=OrderItemRead, status_code=status.HTTP_201_CREATED)
async def add_order_item(order_id: int, item_in: OrderItemCreate, db: Session = Depends(get_db)):
    order = _get_order(db, order_id)
    try:
        return order_service.add_item_to_order(db, order, item_in)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.patch("/items/{item_id}", response_model=OrderItemRead)
async def update_order_item(item_id: int, item_in: OrderItemUpdate, db: Session = Depends(get_db)):
    item = _get_item(db, item_id)
    return order_service.update_order_item(db, item, item_in)


@router.delete("/items/{item_id}")
async def remove_order_item(item_id: int, db: Session = Depends(get_db)):
    item = _get_item(db, item_id)
    order_service.remove_item_from_order(db, item)
    return {"status": "deleted", "id": item_id}


@router.get("/{order_id}/tasks", response_model=list[TaskRead])
async def list_order_tasks(order_id: int, db: Session = Depends(get_db)):
    return _get_order(db, order_id).tasks


@router.post("/{order_id}/derive-tasks", response_model=list[TaskRead])
async def derive_order_tasks(order_id: int, db: Session = Depends(get_db)):
    _get_order(db, order_id)
    return order_service.derive_tasks(db, order_id)


@router.post("/{order_id}/recompute-total", response_model=OrderTotalRead)
async def recompute_order_total(order_id: int, db: Session = Depends(get_db)):
    _get_order(db, order_id)
    total = order_service.recompute_total(db, order_id)
    return {"order_id": order_id, "total_amount": total}
