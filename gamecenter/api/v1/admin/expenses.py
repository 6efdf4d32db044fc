from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gamecenter.api.deps import get_clock
from gamecenter.core.clock import Clock
from gamecenter.core.errors import NotFoundError, ValidationError
from gamecenter.db.session import get_db
from gamecenter.models.expense import Expense
from gamecenter.schemas.common import MessageResponse
from gamecenter.schemas.expense import Expense as ExpenseSchema, ExpenseCreate, ExpenseUpdate

router = APIRouter(prefix="/admin/expenses", tags=["Admin - Expenses"])


def _get_expense(db: Session, expense_id: UUID) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise NotFoundError("Expense not found")
    return expense


@router.get("/", response_model=List[ExpenseSchema])
def list_expenses(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    if date_from and date_to and date_to < date_from:
        raise ValidationError("date_to must not be before date_from")

    query = db.query(Expense)
    if date_from:
        query = query.filter(Expense.date >= date_from)
    if date_to:
        query = query.filter(Expense.date <= date_to)
    if category:
        query = query.filter(Expense.category == category)
    return query.order_by(Expense.date.desc(), Expense.created_at.desc()).all()


@router.post("/", response_model=ExpenseSchema, status_code=status.HTTP_201_CREATED)
def create_expense(
    data: ExpenseCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    expense = Expense(**data.model_dump(), created_at=clock.now())
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


@router.patch("/{expense_id}", response_model=ExpenseSchema)
def update_expense(expense_id: UUID, data: ExpenseUpdate, db: Session = Depends(get_db)):
    expense = _get_expense(db, expense_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(expense, field, value)
    db.commit()
    db.refresh(expense)
    return expense


@router.delete("/{expense_id}", response_model=MessageResponse)
def delete_expense(expense_id: UUID, db: Session = Depends(get_db)):
    expense = _get_expense(db, expense_id)
    db.delete(expense)
    db.commit()
    return MessageResponse(message="Expense deleted")
