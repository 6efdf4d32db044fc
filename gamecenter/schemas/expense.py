from typing import Optional, List
from pydantic import BaseModel, UUID4, Field
from decimal import Decimal
from datetime import date as date_type, datetime


class ExpenseBase(BaseModel):
    category: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1)
    amount: Decimal = Field(gt=0)
    date: date_type


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(BaseModel):
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    date: Optional[date_type] = None


class Expense(ExpenseBase):
    id: UUID4
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
