from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gamecenter.api.deps import get_clock
from gamecenter.core.clock import Clock
from gamecenter.db.session import get_db
from gamecenter.schemas.credit import (
    CreditAccount,
    CreditAccountDetail,
    CreditPayment,
    CreditPaymentCreate,
)
from gamecenter.services import credit as credit_service

router = APIRouter(prefix="/credit", tags=["Credit"])


@router.get("/accounts", response_model=List[CreditAccount])
def list_accounts(
    outstanding_only: bool = Query(False, description="Only accounts with a balance due"),
    db: Session = Depends(get_db),
):
    return credit_service.list_accounts(db, outstanding_only=outstanding_only)


@router.get("/accounts/{account_id}", response_model=CreditAccountDetail)
def get_account(account_id: UUID, db: Session = Depends(get_db)):
    """Account with its credit entries (oldest first) and payments."""
    return credit_service.get_account(db, account_id)


@router.post(
    "/accounts/{account_id}/payments",
    response_model=CreditPayment,
    status_code=status.HTTP_201_CREATED,
)
def record_payment(
    account_id: UUID,
    data: CreditPaymentCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Take a payment against the outstanding balance. The amount is applied to
    pending entries oldest first; an entry flips to `paid` once fully covered.
    """
    return credit_service.record_payment(db, account_id, data, clock.now())
