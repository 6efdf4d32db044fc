from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gamecenter.api.deps import get_clock
from gamecenter.core.clock import Clock
from gamecenter.core.config import settings
from gamecenter.db.session import get_db
from gamecenter.schemas.booking import (
    ArchiveReport,
    Booking as BookingSchema,
    BookingCreate,
    BookingUpdate,
    CompleteRequest,
    CompletionResult,
    ExtendRequest,
    FoodOrderRequest,
    PaymentRequest,
    SweepResult,
)
from gamecenter.schemas.common import MessageResponse
from gamecenter.services import archival, lifecycle
from gamecenter.utils.money import food_total

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def serialize_booking(booking, now) -> BookingSchema:
    """
    Convert an active Booking row to its response schema.
    Status is recomputed for ``now`` on the way out; nothing is written.
    """
    out = BookingSchema.model_validate(booking)
    out.status = lifecycle.compute_status(booking, now)
    out.remaining_seconds = lifecycle.remaining_seconds(booking, now)
    out.food_total = food_total(booking.food_orders)
    out.total_amount = lifecycle.bill_total(booking)
    return out


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@router.get("/", response_model=List[BookingSchema])
def list_bookings(
    status: Optional[str] = Query(
        None, description="Filter by stored status: upcoming, running, paused, expired, completed"
    ),
    category: Optional[str] = Query(None, description="Filter by device category (PC, PS5, ...)"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Every booking still in the active table, ordered by start time."""
    now = clock.now()
    return [serialize_booking(b, now) for b in lifecycle.list_bookings(db, status=status, category=category)]


@router.get("/active", response_model=List[BookingSchema])
def list_active_bookings(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Upcoming, running and paused bookings."""
    now = clock.now()
    return [serialize_booking(b, now) for b in lifecycle.list_bookings(db, active_only=True)]


@router.get("/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: UUID,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return serialize_booking(lifecycle.get_booking(db, booking_id), clock.now())


# ---------------------------------------------------------------------------
# POST /bookings — create a walk-in or advance booking
# ---------------------------------------------------------------------------


@router.post("/", response_model=BookingSchema, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Book a seat.

    - **walk-in**: starts now, status `running`.
    - **advance**: starts at `start_time`, status `upcoming`.
    - Inside an enabled happy-hours window the happy-hours table prices the
      session and the booking type becomes `happy-hour`.
    - A currently valid discount or bonus-hours promotion for the same
      category / duration / person count is applied unless `apply_promotion`
      is false.
    """
    now = clock.now()
    booking = lifecycle.create_booking(db, data, now)
    return serialize_booking(booking, now)


@router.patch("/{booking_id}", response_model=BookingSchema)
def update_booking(
    booking_id: UUID,
    data: BookingUpdate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return serialize_booking(lifecycle.update_booking(db, booking_id, data), clock.now())


@router.delete("/{booking_id}", response_model=MessageResponse)
def delete_booking(booking_id: UUID, db: Session = Depends(get_db)):
    lifecycle.delete_booking(db, booking_id)
    return MessageResponse(message="Booking deleted")


# ---------------------------------------------------------------------------
# Session actions
# ---------------------------------------------------------------------------


@router.post("/{booking_id}/extend", response_model=BookingSchema)
def extend_booking(
    booking_id: UUID,
    data: ExtendRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Add time; the added duration is priced at the tier in effect now."""
    now = clock.now()
    return serialize_booking(lifecycle.extend_booking(db, booking_id, data.duration, now), now)


@router.post("/{booking_id}/pause", response_model=BookingSchema)
def pause_booking(
    booking_id: UUID,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    now = clock.now()
    return serialize_booking(lifecycle.pause_booking(db, booking_id, now), now)


@router.post("/{booking_id}/resume", response_model=BookingSchema)
def resume_booking(
    booking_id: UUID,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    now = clock.now()
    return serialize_booking(lifecycle.resume_booking(db, booking_id, now), now)


@router.post("/{booking_id}/complete", response_model=CompletionResult)
def complete_booking(
    booking_id: UUID,
    data: Optional[CompleteRequest] = None,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    End the session. Optionally takes payment in the same call; a contact
    number on the booking earns loyalty points.
    """
    now = clock.now()
    payment = data.payment if data else None
    booking, accrual, entry = lifecycle.complete_booking(db, booking_id, now, payment=payment)
    return CompletionResult(
        booking=serialize_booking(booking, now),
        loyalty=accrual,
        credit_entry_id=entry.id if entry else None,
    )


@router.post("/{booking_id}/payment", response_model=BookingSchema)
def record_payment(
    booking_id: UUID,
    data: PaymentRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    now = clock.now()
    return serialize_booking(lifecycle.record_payment(db, booking_id, data, now), now)


@router.post("/{booking_id}/food", response_model=BookingSchema)
def add_food(
    booking_id: UUID,
    data: FoodOrderRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    booking = lifecycle.add_food(db, booking_id, data.item_id, data.quantity)
    return serialize_booking(booking, clock.now())


# ---------------------------------------------------------------------------
# Housekeeping
# ---------------------------------------------------------------------------


@router.post("/sweep", response_model=SweepResult)
def sweep_statuses(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Run the status sweep now instead of waiting for the background loop."""
    return lifecycle.sweep_statuses(db, clock.now())


@router.post("/refresh", response_model=ArchiveReport)
def refresh(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Staff "refresh": move completed bookings (and expired ones, when
    ARCHIVE_EXPIRED_ON_REFRESH is on) into history. Failures are reported
    per booking and do not stop the rest of the batch.
    """
    return archival.archive_terminal_bookings(
        db,
        clock.now(),
        include_expired=settings.ARCHIVE_EXPIRED_ON_REFRESH,
        expired_grace_minutes=0,
    )
