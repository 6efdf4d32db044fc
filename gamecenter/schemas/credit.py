from typing import Optional, List, Literal
from pydantic import BaseModel, UUID4, Field
from decimal import Decimal
from datetime import datetime


class CreditEntry(BaseModel):
    id: UUID4
    booking_id: Optional[UUID4] = None
    total_amount: Decimal
    non_credit_paid: Decimal
    credit_issued: Decimal
    remaining_amount: Decimal
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class CreditPayment(BaseModel):
    id: UUID4
    amount: Decimal
    payment_method: str
    cash_amount: Optional[Decimal] = None
    upi_amount: Optional[Decimal] = None
    paid_at: datetime

    class Config:
        from_attributes = True


class CreditAccount(BaseModel):
    id: UUID4
    customer_name: str
    whatsapp_number: str
    current_balance: Decimal
    total_credit_issued: Decimal
    total_paid: Decimal

    class Config:
        from_attributes = True


class CreditAccountDetail(CreditAccount):
    entries: List[CreditEntry] = []
    payments: List[CreditPayment] = []


# POST /credit/accounts/{id}/payments
class CreditPaymentCreate(BaseModel):
    amount: Decimal = Field(gt=0)
    payment_method: Literal["cash", "upi", "split"]
    cash_amount: Optional[Decimal] = Field(None, ge=0)
    upi_amount: Optional[Decimal] = Field(None, ge=0)
