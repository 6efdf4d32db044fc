from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from gamecenter.core.errors import ConflictError, NotFoundError, ValidationError
from gamecenter.models.booking import Booking
from gamecenter.schemas.booking import BookingCreate
from gamecenter.services import lifecycle

START = datetime(2025, 1, 1, 12, 0)


def _stub(status, start, end):
    return SimpleNamespace(status=status, start_time=start, end_time=end)


# ---------------------------------------------------------------------------
# compute_status
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "stored,now,expected",
    [
        ("upcoming", START - timedelta(minutes=1), "upcoming"),
        ("upcoming", START, "running"),
        ("running", START + timedelta(minutes=59), "running"),
        ("running", START + timedelta(hours=1), "expired"),
        ("paused", START + timedelta(hours=5), "paused"),
        ("completed", START, "completed"),
    ],
)
def test_compute_status(stored, now, expected):
    booking = _stub(stored, START, START + timedelta(hours=1))
    assert lifecycle.compute_status(booking, now) == expected


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


def test_walk_in_starts_running(book):
    booking = book()
    assert booking.status == "running"
    assert booking.booking_type == "walk-in"
    assert booking.start_time == START
    assert booking.end_time == START + timedelta(hours=1)
    assert booking.price == Decimal("100.00")
    assert booking.booking_code.startswith("BK-")
    assert booking.seat_number == 1


def test_advance_booking_is_upcoming(book):
    booking = book(booking_type="advance", start_time=START + timedelta(hours=2))
    assert booking.status == "upcoming"
    assert booking.start_time == START + timedelta(hours=2)


def test_advance_start_with_offset_is_converted_to_local_time(book):
    aware = (START + timedelta(hours=3)).astimezone(timezone(timedelta(hours=5, minutes=30)))
    booking = book(booking_type="advance", start_time=aware)
    assert booking.start_time == aware.astimezone().replace(tzinfo=None)
    assert booking.start_time == START + timedelta(hours=3)


def test_advance_booking_in_the_past_rejected(book):
    with pytest.raises(ValidationError):
        book(booking_type="advance", start_time=START - timedelta(hours=1))


def test_unknown_seat_rejected(book):
    with pytest.raises(ValidationError):
        book(seat_name="PC-9")


def test_unconfigured_category_not_found(book):
    with pytest.raises(NotFoundError):
        book(category="VR", seat_name="VR-1")


def test_multi_person_only_for_ps5(book):
    with pytest.raises(ValidationError):
        book(person_count=2)
    booking = book(category="PS5", seat_name="PS5-1", person_count=2)
    assert booking.price == Decimal("200.00")


def test_missing_price_rejects_booking(db_session, book):
    with pytest.raises(NotFoundError):
        book(duration="3 hours")
    assert db_session.query(Booking).count() == 0


def test_overlapping_booking_on_same_seat_conflicts(book):
    book()
    with pytest.raises(ConflictError):
        book(booking_type="advance", start_time=START + timedelta(minutes=30))
    # Starts exactly when the first one ends
    follow_up = book(booking_type="advance", start_time=START + timedelta(hours=1))
    assert follow_up.status == "upcoming"


def test_paused_booking_keeps_its_seat(db_session, book, clock):
    first = book()
    lifecycle.pause_booking(db_session, first.id, clock.now())
    with pytest.raises(ConflictError):
        book(booking_type="advance", start_time=START + timedelta(hours=3))


# ---------------------------------------------------------------------------
# Sweep
# ---------------------------------------------------------------------------


def test_sweep_is_idempotent(db_session, book, clock):
    walk_in = book()
    advance = book(seat_name="PC-2", booking_type="advance", start_time=START + timedelta(hours=1))

    clock.set(START + timedelta(hours=1, minutes=30))
    first = lifecycle.sweep_statuses(db_session, clock.now())
    second = lifecycle.sweep_statuses(db_session, clock.now())

    assert first.updated == 2
    assert second.updated == 0
    db_session.refresh(walk_in)
    db_session.refresh(advance)
    assert walk_in.status == "expired"
    assert advance.status == "running"


def test_sweep_leaves_paused_and_completed_alone(db_session, book, clock):
    paused = book()
    lifecycle.pause_booking(db_session, paused.id, clock.now())
    done = book(seat_name="PC-2")
    lifecycle.complete_booking(db_session, done.id, clock.now())

    clock.advance(hours=3)
    result = lifecycle.sweep_statuses(db_session, clock.now())

    assert result.updated == 0
    assert lifecycle.get_booking(db_session, paused.id).status == "paused"
    assert lifecycle.get_booking(db_session, done.id).status == "completed"


# ---------------------------------------------------------------------------
# Pause / resume
# ---------------------------------------------------------------------------


def test_pause_and_resume_recomputes_end_from_remaining_time(db_session, book, clock):
    booking = book()

    clock.advance(minutes=20)
    paused = lifecycle.pause_booking(db_session, booking.id, clock.now())
    assert paused.status == "paused"
    assert paused.paused_remaining_seconds == 40 * 60

    clock.advance(minutes=30)
    resumed = lifecycle.resume_booking(db_session, booking.id, clock.now())
    assert resumed.status == "running"
    assert resumed.paused_remaining_seconds is None
    assert resumed.end_time == START + timedelta(minutes=90)


def test_resume_cannot_run_into_next_booking(db_session, book, clock):
    booking = book()
    book(booking_type="advance", start_time=START + timedelta(hours=1))

    clock.advance(minutes=30)
    lifecycle.pause_booking(db_session, booking.id, clock.now())

    clock.advance(minutes=20)
    with pytest.raises(ConflictError):
        lifecycle.resume_booking(db_session, booking.id, clock.now())
    db_session.refresh(booking)
    assert booking.status == "paused"
    assert booking.paused_remaining_seconds == 30 * 60


def test_resume_that_ends_as_next_booking_starts_is_allowed(db_session, book, clock):
    booking = book()
    book(booking_type="advance", start_time=START + timedelta(hours=1))

    clock.advance(minutes=30)
    lifecycle.pause_booking(db_session, booking.id, clock.now())
    resumed = lifecycle.resume_booking(db_session, booking.id, clock.now())
    assert resumed.end_time == START + timedelta(hours=1)


def test_only_running_sessions_can_be_paused(db_session, book):
    booking = book(booking_type="advance", start_time=START + timedelta(hours=1))
    with pytest.raises(ConflictError):
        lifecycle.pause_booking(db_session, booking.id, START)


def test_resume_requires_paused(db_session, book, clock):
    booking = book()
    with pytest.raises(ConflictError):
        lifecycle.resume_booking(db_session, booking.id, clock.now())


# ---------------------------------------------------------------------------
# Extend
# ---------------------------------------------------------------------------


def test_extend_adds_time_and_price(db_session, book, clock):
    booking = book()
    clock.advance(minutes=30)
    extended = lifecycle.extend_booking(db_session, booking.id, "30 mins", clock.now())
    assert extended.end_time == START + timedelta(minutes=90)
    assert extended.price == Decimal("160.00")


def test_extend_expired_session_restarts_from_now(db_session, book, clock):
    booking = book()
    clock.set(START + timedelta(hours=1, minutes=10))
    extended = lifecycle.extend_booking(db_session, booking.id, "30 mins", clock.now())
    assert extended.status == "running"
    assert extended.end_time == START + timedelta(hours=1, minutes=40)


def test_extend_paused_session_adds_to_remaining(db_session, book, clock):
    booking = book()
    lifecycle.pause_booking(db_session, booking.id, clock.now())
    extended = lifecycle.extend_booking(db_session, booking.id, "1 hour", clock.now())
    assert extended.status == "paused"
    assert extended.paused_remaining_seconds == 2 * 3600


def test_extend_paused_session_blocked_by_next_booking(db_session, book, clock):
    booking = book()
    book(booking_type="advance", start_time=START + timedelta(hours=1))

    clock.advance(minutes=30)
    lifecycle.pause_booking(db_session, booking.id, clock.now())
    with pytest.raises(ConflictError):
        lifecycle.extend_booking(db_session, booking.id, "1 hour", clock.now())
    db_session.refresh(booking)
    assert booking.paused_remaining_seconds == 30 * 60
    assert booking.price == Decimal("100.00")


def test_extend_blocked_by_next_booking(db_session, book):
    booking = book()
    book(booking_type="advance", start_time=START + timedelta(hours=1))
    with pytest.raises(ConflictError):
        lifecycle.extend_booking(db_session, booking.id, "30 mins", START)


# ---------------------------------------------------------------------------
# Complete / payment
# ---------------------------------------------------------------------------


def test_complete_freezes_end_and_status(db_session, book, clock):
    booking = book()
    clock.advance(minutes=45)
    done, accrual, entry = lifecycle.complete_booking(db_session, booking.id, clock.now())
    assert done.status == "completed"
    assert done.end_time == START + timedelta(minutes=45)
    assert done.completed_at == START + timedelta(minutes=45)
    assert accrual is None
    assert entry is None


def test_complete_expired_session_keeps_end(db_session, book, clock):
    booking = book()
    clock.set(START + timedelta(hours=2))
    done, _, _ = lifecycle.complete_booking(db_session, booking.id, clock.now())
    assert done.end_time == START + timedelta(hours=1)


def test_completed_booking_cannot_run_again(db_session, book, clock):
    booking = book()
    lifecycle.complete_booking(db_session, booking.id, clock.now())
    with pytest.raises(ConflictError):
        lifecycle.complete_booking(db_session, booking.id, clock.now())
    with pytest.raises(ConflictError):
        lifecycle.extend_booking(db_session, booking.id, "30 mins", clock.now())
    with pytest.raises(ConflictError):
        lifecycle.resume_booking(db_session, booking.id, clock.now())


def test_paused_session_must_resume_before_completion(db_session, book, clock):
    booking = book()
    lifecycle.pause_booking(db_session, booking.id, clock.now())
    with pytest.raises(ConflictError):
        lifecycle.complete_booking(db_session, booking.id, clock.now())


def test_split_payment_must_add_up(db_session, book, clock):
    from gamecenter.schemas.booking import PaymentRequest

    booking = book()
    with pytest.raises(ValidationError):
        lifecycle.record_payment(
            db_session, booking.id,
            PaymentRequest(payment_method="split", cash_amount=Decimal("50"), upi_amount=Decimal("20")),
            clock.now(),
        )
    paid = lifecycle.record_payment(
        db_session, booking.id,
        PaymentRequest(payment_method="split", cash_amount=Decimal("60"), upi_amount=Decimal("40")),
        clock.now(),
    )
    assert paid.payment_status == "paid"
    assert paid.cash_amount == Decimal("60.00")
    assert paid.upi_amount == Decimal("40.00")


def test_settled_booking_cannot_be_extended(db_session, book, clock):
    from gamecenter.schemas.booking import PaymentRequest

    booking = book()
    lifecycle.record_payment(db_session, booking.id, PaymentRequest(payment_method="cash"), clock.now())
    with pytest.raises(ConflictError):
        lifecycle.extend_booking(db_session, booking.id, "30 mins", clock.now())


# ---------------------------------------------------------------------------
# Food
# ---------------------------------------------------------------------------


def test_food_orders_merge_and_decrement_stock(db_session, book, snack):
    booking = book()
    lifecycle.add_food(db_session, booking.id, snack.id, 2)
    updated = lifecycle.add_food(db_session, booking.id, snack.id, 1)

    assert len(updated.food_orders) == 1
    assert updated.food_orders[0]["quantity"] == 3
    assert lifecycle.bill_total(updated) == Decimal("340.00")
    db_session.refresh(snack)
    assert snack.current_stock == 2


def test_food_beyond_stock_rejected(db_session, book, snack):
    booking = book()
    with pytest.raises(ValidationError):
        lifecycle.add_food(db_session, booking.id, snack.id, 6)
    db_session.refresh(snack)
    assert snack.current_stock == 5


def test_delete_booking(db_session, book):
    booking = book()
    lifecycle.delete_booking(db_session, booking.id)
    with pytest.raises(NotFoundError):
        lifecycle.get_booking(db_session, booking.id)


def test_booking_create_requires_start_for_advance():
    with pytest.raises(ValueError):
        BookingCreate(
            category="PC", seat_name="PC-1", customer_name="Ravi",
            duration="1 hour", booking_type="advance",
        )
