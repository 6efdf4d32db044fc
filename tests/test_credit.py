from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from gamecenter.core.errors import ValidationError
from gamecenter.models.credit import CreditAccount, CreditEntry
from gamecenter.schemas.booking import PaymentRequest
from gamecenter.schemas.credit import CreditPaymentCreate
from gamecenter.services import credit, lifecycle

NOW = datetime(2025, 1, 1, 12, 0)


def _issue(db_session, total, paid_now="0", when=NOW):
    entry = credit.issue_credit(
        db_session,
        whatsapp_number="9811111111",
        customer_name="Meera",
        total_amount=Decimal(total),
        non_credit_paid=Decimal(paid_now),
        now=when,
    )
    db_session.commit()
    return entry


def _account(db_session) -> CreditAccount:
    return db_session.query(CreditAccount).filter(CreditAccount.whatsapp_number == "9811111111").one()


def test_issue_credit_tracks_balance(db_session):
    entry = _issue(db_session, "300", paid_now="100")
    assert entry.credit_issued == Decimal("200.00")
    assert entry.remaining_amount == Decimal("200.00")
    assert entry.status == "pending"

    account = _account(db_session)
    assert account.current_balance == Decimal("200.00")
    assert account.total_credit_issued == Decimal("200.00")


def test_nothing_to_credit_rejected(db_session):
    with pytest.raises(ValidationError):
        _issue(db_session, "100", paid_now="100")


def test_payment_settles_oldest_entry_first(db_session):
    first = _issue(db_session, "100")
    second = _issue(db_session, "150", when=NOW + timedelta(hours=1))
    account = _account(db_session)

    credit.record_payment(
        db_session, account.id,
        CreditPaymentCreate(amount=Decimal("120"), payment_method="cash"),
        NOW + timedelta(days=1),
    )

    db_session.refresh(first)
    db_session.refresh(second)
    db_session.refresh(account)
    assert first.status == "paid"
    assert first.remaining_amount == Decimal("0.00")
    assert second.status == "pending"
    assert second.remaining_amount == Decimal("130.00")
    assert account.current_balance == Decimal("130.00")
    assert account.total_paid == Decimal("120.00")


def test_payment_cannot_exceed_balance(db_session):
    _issue(db_session, "100")
    account = _account(db_session)
    with pytest.raises(ValidationError):
        credit.record_payment(
            db_session, account.id,
            CreditPaymentCreate(amount=Decimal("150"), payment_method="upi"),
            NOW,
        )
    db_session.refresh(account)
    assert account.current_balance == Decimal("100.00")


def test_split_payment_must_add_up(db_session):
    _issue(db_session, "100")
    account = _account(db_session)
    with pytest.raises(ValidationError):
        credit.record_payment(
            db_session, account.id,
            CreditPaymentCreate(
                amount=Decimal("80"), payment_method="split",
                cash_amount=Decimal("50"), upi_amount=Decimal("20"),
            ),
            NOW,
        )
    payment = credit.record_payment(
        db_session, account.id,
        CreditPaymentCreate(
            amount=Decimal("80"), payment_method="split",
            cash_amount=Decimal("50"), upi_amount=Decimal("30"),
        ),
        NOW,
    )
    assert payment.cash_amount == Decimal("50.00")
    assert payment.upi_amount == Decimal("30.00")


def test_complete_on_credit_issues_entry(db_session, book, clock):
    booking = book(whatsapp_number="9811111111", customer_name="Meera")
    done, _, entry = lifecycle.complete_booking(
        db_session, booking.id, clock.now(),
        payment=PaymentRequest(payment_method="credit", cash_amount=Decimal("40")),
    )

    assert done.payment_status == "credit"
    assert entry.booking_id == booking.id
    assert entry.credit_issued == Decimal("60.00")
    assert db_session.query(CreditEntry).count() == 1


def test_credit_needs_contact_number(db_session, book, clock):
    booking = book()
    with pytest.raises(ValidationError):
        lifecycle.complete_booking(
            db_session, booking.id, clock.now(), payment=PaymentRequest(payment_method="credit"),
        )


def test_account_detail_endpoint(client, db_session):
    _issue(db_session, "100")
    account = _account(db_session)

    resp = client.post(
        f"/api/v1/credit/accounts/{account.id}/payments",
        json={"amount": "40", "payment_method": "cash"},
    )
    assert resp.status_code == 201

    resp = client.get(f"/api/v1/credit/accounts/{account.id}")
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["current_balance"]) == Decimal("60")
    assert len(body["entries"]) == 1
    assert len(body["payments"]) == 1
