"""Customer credit ("pay later") accounts."""
import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from gamecenter.core.errors import NotFoundError, ValidationError
from gamecenter.models.credit import CreditAccount, CreditEntry, CreditPayment
from gamecenter.schemas.credit import CreditPaymentCreate
from gamecenter.utils.money import to_money

logger = logging.getLogger(__name__)


def split_amounts(
    method: str,
    amount: Decimal,
    cash_amount: Optional[Decimal],
    upi_amount: Optional[Decimal],
):
    """Normalise a cash/UPI/split payment into (cash, upi). A split must add up exactly."""
    amount = to_money(amount)
    if method == "cash":
        return amount, None
    if method == "upi":
        return None, amount
    if method == "split":
        cash = to_money(cash_amount or 0)
        upi = to_money(upi_amount or 0)
        if cash + upi != amount:
            raise ValidationError(
                f"Split payment of {cash} cash + {upi} UPI does not add up to {amount}"
            )
        return cash, upi
    raise ValidationError(f"Unsupported payment method '{method}'")


def list_accounts(db: Session, outstanding_only: bool = False) -> List[CreditAccount]:
    query = db.query(CreditAccount)
    if outstanding_only:
        query = query.filter(CreditAccount.current_balance > 0)
    return query.order_by(CreditAccount.current_balance.desc()).all()


def get_account(db: Session, account_id: UUID) -> CreditAccount:
    account = db.query(CreditAccount).filter(CreditAccount.id == account_id).first()
    if not account:
        raise NotFoundError("Credit account not found")
    return account


def issue_credit(
    db: Session,
    whatsapp_number: str,
    customer_name: str,
    total_amount: Decimal,
    non_credit_paid: Decimal,
    now: datetime,
    booking_id: Optional[UUID] = None,
) -> CreditEntry:
    """
    Put the unpaid part of a bill on the customer's account.

    Does not commit; booking completion commits it together with the booking.
    """
    total = to_money(total_amount)
    paid_now = to_money(non_credit_paid or 0)
    if paid_now < 0 or paid_now > total:
        raise ValidationError("Amount paid up front must be between 0 and the bill total")
    issued = total - paid_now
    if issued <= 0:
        raise ValidationError("Nothing left to put on credit")

    account = db.query(CreditAccount).filter(CreditAccount.whatsapp_number == whatsapp_number).first()
    if account is None:
        account = CreditAccount(
            whatsapp_number=whatsapp_number,
            customer_name=customer_name,
            current_balance=Decimal("0.00"),
            total_credit_issued=Decimal("0.00"),
            total_paid=Decimal("0.00"),
        )
        db.add(account)
        db.flush()

    entry = CreditEntry(
        account_id=account.id,
        booking_id=booking_id,
        total_amount=total,
        non_credit_paid=paid_now,
        credit_issued=issued,
        remaining_amount=issued,
        status="pending",
        created_at=now,
    )
    db.add(entry)
    account.current_balance = to_money(Decimal(account.current_balance) + issued)
    account.total_credit_issued = to_money(Decimal(account.total_credit_issued) + issued)

    logger.info("Issued credit of %s to %s", issued, whatsapp_number)
    return entry


def record_payment(
    db: Session, account_id: UUID, data: CreditPaymentCreate, now: datetime
) -> CreditPayment:
    """Reduce an account balance, settling pending entries oldest first."""
    account = get_account(db, account_id)
    amount = to_money(data.amount)
    balance = Decimal(account.current_balance)
    if amount > balance:
        raise ValidationError(f"Payment of {amount} exceeds outstanding balance {balance}")
    cash, upi = split_amounts(data.payment_method, amount, data.cash_amount, data.upi_amount)

    left = amount
    pending = (
        db.query(CreditEntry)
        .filter(CreditEntry.account_id == account.id, CreditEntry.status == "pending")
        .order_by(CreditEntry.created_at)
        .all()
    )
    for entry in pending:
        if left <= 0:
            break
        remaining = Decimal(entry.remaining_amount)
        applied = min(left, remaining)
        entry.remaining_amount = to_money(remaining - applied)
        left -= applied
        if entry.remaining_amount == 0:
            entry.status = "paid"

    payment = CreditPayment(
        account_id=account.id,
        amount=amount,
        payment_method=data.payment_method,
        cash_amount=cash,
        upi_amount=upi,
        paid_at=now,
    )
    db.add(payment)
    account.current_balance = to_money(balance - amount)
    account.total_paid = to_money(Decimal(account.total_paid) + amount)
    db.commit()
    db.refresh(payment)
    return payment
