"""
Booking lifecycle manager.

    upcoming -> running -> expired / completed
    running <-> paused

Time-driven transitions come from ``compute_status``, a pure function of the
booking and "now", so the periodic sweep and every read path agree no matter
how often the sweep runs. Staff-driven transitions (pause, resume, extend,
complete) are explicit operations below.
"""
import logging
import random
import string
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from gamecenter.core.clock import to_local_naive
from gamecenter.core.errors import ConflictError, NotFoundError, ValidationError
from gamecenter.models.booking import Booking, ACTIVE_STATUSES
from gamecenter.models.device import DeviceConfig
from gamecenter.models.food import FoodItem
from gamecenter.models.promotion import DiscountPromotion
from gamecenter.schemas.booking import (
    BookingCreate,
    BookingUpdate,
    PaymentRequest,
    SweepResult,
)
from gamecenter.schemas.loyalty import AccrualResult
from gamecenter.services import credit as credit_service
from gamecenter.services import loyalty as loyalty_service
from gamecenter.services import promotions as promotion_service
from gamecenter.services.pricing import resolve_price, validate_person_count
from gamecenter.utils.durations import parse_duration_label
from gamecenter.utils.money import food_total, to_money

logger = logging.getLogger(__name__)

# Statuses whose clock is still ticking and may move on their own
_TIME_DRIVEN = ("upcoming", "running")


# ---------------------------------------------------------------------------
# Pure status rules
# ---------------------------------------------------------------------------


def compute_status(booking, now: datetime) -> str:
    """
    Status a booking should have at ``now``.

    Completed and paused bookings only move on staff action. Everything else
    is derived from the start/end window.
    """
    if booking.status in ("completed", "paused"):
        return booking.status
    if now < booking.start_time:
        return "upcoming"
    if now < booking.end_time:
        return "running"
    return "expired"


def remaining_seconds(booking, now: datetime) -> Optional[int]:
    status = compute_status(booking, now)
    if status == "paused":
        return booking.paused_remaining_seconds or 0
    if status in ("running", "upcoming"):
        return max(0, int((booking.end_time - now).total_seconds()))
    return 0 if status == "expired" else None


def bill_total(booking) -> Decimal:
    return to_money(Decimal(booking.price) + food_total(booking.food_orders))


def sweep_statuses(db: Session, now: datetime) -> SweepResult:
    """Bring stored statuses in line with the clock. Running it twice changes nothing the second time."""
    bookings = db.query(Booking).filter(Booking.status.in_(_TIME_DRIVEN)).all()
    updated = 0
    for booking in bookings:
        status = compute_status(booking, now)
        if status != booking.status:
            logger.debug("Booking %s: %s -> %s", booking.booking_code, booking.status, status)
            booking.status = status
            updated += 1
    if updated:
        db.commit()
    return SweepResult(checked=len(bookings), updated=updated)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _generate_booking_code(db: Session) -> str:
    """Generate a unique 'BK-XXXXXXXX' booking reference."""
    chars = string.ascii_uppercase + string.digits
    while True:
        code = "BK-" + "".join(random.choices(chars, k=8))
        if not db.query(Booking).filter(Booking.booking_code == code).first():
            return code


def _seat_number(db: Session, category: str, seat_name: str) -> int:
    device = db.query(DeviceConfig).filter(DeviceConfig.category == category).first()
    if not device:
        raise NotFoundError(f"No devices configured for category '{category}'")
    seats = list(device.seats or [])
    if seat_name not in seats:
        raise ValidationError(f"Seat '{seat_name}' is not a {category} device")
    return seats.index(seat_name) + 1


def _check_seat_free(
    db: Session,
    category: str,
    seat_name: str,
    start: datetime,
    end: datetime,
    exclude_id: Optional[UUID] = None,
) -> None:
    """Raise ConflictError if another active booking holds the seat in [start, end)."""
    query = db.query(Booking).filter(
        Booking.category == category,
        Booking.seat_name == seat_name,
        Booking.status.in_(ACTIVE_STATUSES),
    )
    if exclude_id:
        query = query.filter(Booking.id != exclude_id)

    for other in query.all():
        # A paused session keeps its seat until it is resumed or completed
        if other.status == "paused" or (other.start_time < end and start < other.end_time):
            raise ConflictError(
                f"Seat {seat_name} is already booked by {other.customer_name} "
                f"({other.start_time:%H:%M}-{other.end_time:%H:%M}, {other.status})"
            )


def _ensure_unsettled(booking: Booking) -> None:
    if booking.payment_status != "unpaid":
        raise ConflictError(f"Booking {booking.booking_code} is already settled ({booking.payment_status})")


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def get_booking(db: Session, booking_id: UUID) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def list_bookings(
    db: Session,
    status: Optional[str] = None,
    category: Optional[str] = None,
    active_only: bool = False,
) -> List[Booking]:
    query = db.query(Booking)
    if active_only:
        query = query.filter(Booking.status.in_(ACTIVE_STATUSES))
    if status:
        query = query.filter(Booking.status == status)
    if category:
        query = query.filter(Booking.category == category)
    return query.order_by(Booking.start_time).all()


# ---------------------------------------------------------------------------
# Create / edit
# ---------------------------------------------------------------------------


def create_booking(db: Session, data: BookingCreate, now: datetime) -> Booking:
    """
    Book a seat.

    Walk-ins start now. Advance bookings start at ``data.start_time``. The
    price is resolved for the session's start time; a currently valid
    promotion for the same key is redeemed unless ``apply_promotion`` is off.
    """
    validate_person_count(data.category, data.person_count)
    minutes = parse_duration_label(data.duration)
    seat_number = _seat_number(db, data.category, data.seat_name)

    if data.booking_type == "walk-in":
        start = now
    else:
        start = to_local_naive(data.start_time).replace(microsecond=0)
        if start < now:
            raise ValidationError("Advance bookings must start in the future")
    end = start + timedelta(minutes=minutes)

    resolved = resolve_price(db, data.category, data.duration, data.person_count, at=start)
    booking_type = "happy-hour" if resolved.source == "happy_hours" else data.booking_type

    promo = None
    if data.apply_promotion:
        promo = promotion_service.find_active_promotion(
            db, data.category, resolved.duration, data.person_count, now
        )
    if promo is not None and not isinstance(promo, DiscountPromotion):
        end = end + timedelta(minutes=promotion_service.bonus_minutes_for(promo.bonus_hours))

    # Seat check comes before redemption so a rejected booking never counts as a use
    _check_seat_free(db, data.category, data.seat_name, start, end)

    price = to_money(resolved.price)
    original_price = None
    discount_amount = None
    bonus_minutes = None
    details = None
    if isinstance(promo, DiscountPromotion):
        details = promotion_service.redeem_discount(promo, price)
        original_price = details.original_price
        discount_amount = details.discount_amount
        price = details.final_price
    elif promo is not None:
        details = promotion_service.redeem_bonus_hours(promo)
        bonus_minutes = details.bonus_minutes

    booking = Booking(
        booking_code=_generate_booking_code(db),
        category=data.category,
        seat_number=seat_number,
        seat_name=data.seat_name,
        customer_name=data.customer_name,
        whatsapp_number=data.whatsapp_number,
        start_time=start,
        end_time=end,
        duration=resolved.duration,
        person_count=data.person_count,
        price=price,
        status="running" if data.booking_type == "walk-in" else "upcoming",
        booking_type=booking_type,
        payment_status="unpaid",
        food_orders=[],
        original_price=original_price,
        discount_amount=discount_amount,
        bonus_minutes=bonus_minutes,
        promotion_details=details.model_dump(mode="json") if details else None,
        created_at=now,
    )
    booking.status = compute_status(booking, now)
    db.add(booking)
    db.commit()
    db.refresh(booking)

    logger.info(
        "Booked %s for %s: %s %s at %s (%s)",
        booking.seat_name, booking.customer_name, booking.duration,
        booking.booking_type, booking.price, booking.booking_code,
    )
    return booking


def update_booking(db: Session, booking_id: UUID, data: BookingUpdate) -> Booking:
    booking = get_booking(db, booking_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if field == "whatsapp_number" and value == "":
            value = None
        if field == "customer_name" and value is None:
            continue
        setattr(booking, field, value)
    db.commit()
    db.refresh(booking)
    return booking


def delete_booking(db: Session, booking_id: UUID) -> None:
    """Hard removal. Deleted bookings never reach history."""
    booking = get_booking(db, booking_id)
    db.delete(booking)
    db.commit()
    logger.info("Deleted booking %s", booking.booking_code)


# ---------------------------------------------------------------------------
# Staff-driven transitions
# ---------------------------------------------------------------------------


def extend_booking(db: Session, booking_id: UUID, duration: str, now: datetime) -> Booking:
    """
    Add time to a session, priced at the tier in effect now (not at booking time).
    Extending an expired session brings it back to running.
    """
    booking = get_booking(db, booking_id)
    if booking.status == "completed":
        raise ConflictError("Completed sessions cannot be extended")
    _ensure_unsettled(booking)

    minutes = parse_duration_label(duration)
    resolved = resolve_price(db, booking.category, duration, booking.person_count, at=now)

    if booking.status == "paused":
        remaining = (booking.paused_remaining_seconds or 0) + minutes * 60
        # Projected as if resumed now
        _check_seat_free(
            db, booking.category, booking.seat_name, now, now + timedelta(seconds=remaining),
            exclude_id=booking.id,
        )
        booking.paused_remaining_seconds = remaining
    else:
        # An expired session restarts its clock from now, not from the old end
        base = now if compute_status(booking, now) == "expired" else booking.end_time
        new_end = base + timedelta(minutes=minutes)
        _check_seat_free(
            db, booking.category, booking.seat_name, booking.start_time, new_end, exclude_id=booking.id
        )
        booking.end_time = new_end
        booking.status = compute_status(booking, now)

    booking.price = to_money(Decimal(booking.price) + resolved.price)
    db.commit()
    db.refresh(booking)
    logger.info("Extended %s by %s for %s", booking.booking_code, duration, resolved.price)
    return booking


def pause_booking(db: Session, booking_id: UUID, now: datetime) -> Booking:
    booking = get_booking(db, booking_id)
    status = compute_status(booking, now)
    if status != "running":
        raise ConflictError(f"Only running sessions can be paused (current status: '{status}')")

    booking.paused_remaining_seconds = max(0, int((booking.end_time - now).total_seconds()))
    booking.status = "paused"
    db.commit()
    db.refresh(booking)
    return booking


def resume_booking(db: Session, booking_id: UUID, now: datetime) -> Booking:
    """Restart the countdown from the stored remaining time; the old end time is discarded."""
    booking = get_booking(db, booking_id)
    if booking.status != "paused":
        raise ConflictError(f"Only paused sessions can be resumed (current status: '{booking.status}')")

    remaining = booking.paused_remaining_seconds or 0
    new_end = now + timedelta(seconds=remaining)
    _check_seat_free(db, booking.category, booking.seat_name, now, new_end, exclude_id=booking.id)
    booking.end_time = new_end
    booking.paused_remaining_seconds = None
    booking.status = "running"
    booking.status = compute_status(booking, now)
    db.commit()
    db.refresh(booking)
    return booking


def _settle(db: Session, booking: Booking, payment: PaymentRequest, now: datetime):
    """Record payment on a booking. Returns the credit entry when part of the bill goes on credit."""
    _ensure_unsettled(booking)
    total = bill_total(booking)

    if payment.payment_method == "credit":
        if not booking.whatsapp_number:
            raise ValidationError("A contact number is required to put a bill on credit")
        paid_now = to_money((payment.cash_amount or 0) + (payment.upi_amount or 0))
        entry = credit_service.issue_credit(
            db,
            whatsapp_number=booking.whatsapp_number,
            customer_name=booking.customer_name,
            total_amount=total,
            non_credit_paid=paid_now,
            now=now,
            booking_id=booking.id,
        )
        booking.cash_amount = to_money(payment.cash_amount) if payment.cash_amount else None
        booking.upi_amount = to_money(payment.upi_amount) if payment.upi_amount else None
        booking.payment_method = "credit"
        booking.payment_status = "credit"
        return entry

    cash, upi = credit_service.split_amounts(
        payment.payment_method, total, payment.cash_amount, payment.upi_amount
    )
    booking.cash_amount = cash
    booking.upi_amount = upi
    booking.payment_method = payment.payment_method
    booking.payment_status = "paid"
    return None


def record_payment(db: Session, booking_id: UUID, payment: PaymentRequest, now: datetime) -> Booking:
    booking = get_booking(db, booking_id)
    _settle(db, booking, payment, now)
    db.commit()
    db.refresh(booking)
    return booking


def complete_booking(
    db: Session,
    booking_id: UUID,
    now: datetime,
    payment: Optional[PaymentRequest] = None,
):
    """
    End billing for a running or expired session and freeze its price.

    Optionally settles payment in the same step, and credits loyalty points
    to the customer's contact number when one is on file.
    Returns (booking, accrual or None, credit entry or None).
    """
    booking = get_booking(db, booking_id)
    status = compute_status(booking, now)
    if status not in ("running", "expired"):
        raise ConflictError(
            f"Only running or expired sessions can be completed (current status: '{status}')"
        )

    entry = _settle(db, booking, payment, now) if payment else None

    if now < booking.end_time:
        booking.end_time = now
    booking.status = "completed"
    booking.completed_at = now
    booking.paused_remaining_seconds = None

    accrual: Optional[AccrualResult] = None
    if booking.whatsapp_number:
        accrual = loyalty_service.accrue_visit(
            db,
            whatsapp_number=booking.whatsapp_number,
            customer_name=booking.customer_name,
            amount_spent=bill_total(booking),
            now=now,
        )
        if accrual:
            booking.loyalty_points_awarded = accrual.points_earned

    db.commit()
    db.refresh(booking)
    logger.info("Completed %s, bill %s", booking.booking_code, bill_total(booking))
    return booking, accrual, entry


def add_food(db: Session, booking_id: UUID, item_id: UUID, quantity: int) -> Booking:
    booking = get_booking(db, booking_id)
    if booking.status == "completed":
        raise ConflictError("Cannot add food to a completed session")
    _ensure_unsettled(booking)
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")

    item = db.query(FoodItem).filter(FoodItem.id == item_id).first()
    if not item:
        raise NotFoundError("Food item not found")
    if item.current_stock is not None:
        if item.current_stock < quantity:
            raise ValidationError(f"Only {item.current_stock} {item.name} left in stock")
        item.current_stock -= quantity

    orders = [dict(order) for order in booking.food_orders or []]
    for order in orders:
        if order["item_id"] == str(item.id):
            order["quantity"] += quantity
            break
    else:
        orders.append({
            "item_id": str(item.id),
            "name": item.name,
            "price": str(to_money(item.price)),
            "quantity": quantity,
        })
    # Reassign so the JSON column is flagged dirty
    booking.food_orders = orders

    db.commit()
    db.refresh(booking)
    return booking
