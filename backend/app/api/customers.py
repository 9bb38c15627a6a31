"""Customer endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.crud.crud_customer import customer_crud
from backend.app.db.session import get_db
from backend.app.models.customer import Customer
from backend.app.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate

router = APIRouter(prefix="/customers", tags=["customers"])


def _get_customer(db: Session, customer_id: int) -> Customer:
    customer = customer_crud.get(db, obj_id=customer_id)
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


@router.post("/", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def create_customer(customer_in: CustomerCreate, db: Session = Depends(get_db)):
    return customer_crud.create(db, obj_in=customer_in)


@router.get("/", response_model=list[CustomerRead])
async def list_customers(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return customer_crud.get_multi(db, skip=skip, limit=limit)


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return _get_customer(db, customer_id)


@router.put("/{customer_id}", response_model=CustomerRead)
async def update_customer(customer_id: int, customer_in: CustomerUpdate, db: Session = Depends(get_db)):
    customer = _get_customer(db, customer_id)
    return customer_crud.update(db, db_obj=customer, obj_in=customer_in)


@router.delete("/{customer_id}")
async def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    customer = _get_customer(db, customer_id)
    if customer.orders:
        raise HTTPException(status_code=400, detail="This customer has orders and cannot be deleted")
    customer_crud.delete(db, db_obj=customer)
    return {"status": "deleted", "id": customer_id}
