from datetime import date, datetime, time
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gamecenter.core.errors import NotFoundError, ValidationError
from gamecenter.db.session import get_db
from gamecenter.models.booking import BookingHistory
from gamecenter.schemas.booking import BookingHistory as BookingHistorySchema
from gamecenter.schemas.common import PaginatedResponse
from gamecenter.services.lifecycle import bill_total
from gamecenter.utils.money import food_total

router = APIRouter(prefix="/history", tags=["History"])


def _serialize_history(record: BookingHistory) -> BookingHistorySchema:
    out = BookingHistorySchema.model_validate(record)
    out.food_total = food_total(record.food_orders)
    out.total_amount = bill_total(record)
    return out


@router.get("/", response_model=PaginatedResponse[BookingHistorySchema])
def list_history(
    date_from: Optional[date] = Query(None, description="Sessions starting on or after this day"),
    date_to: Optional[date] = Query(None, description="Sessions starting on or before this day"),
    category: Optional[str] = Query(None),
    whatsapp_number: Optional[str] = Query(None, description="Filter by customer contact"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    """Archived sessions, newest first."""
    if date_from and date_to and date_to < date_from:
        raise ValidationError("date_to must not be before date_from")

    query = db.query(BookingHistory)
    if date_from:
        query = query.filter(BookingHistory.start_time >= datetime.combine(date_from, time.min))
    if date_to:
        query = query.filter(BookingHistory.start_time <= datetime.combine(date_to, time.max))
    if category:
        query = query.filter(BookingHistory.category == category)
    if whatsapp_number:
        query = query.filter(BookingHistory.whatsapp_number == whatsapp_number)

    total = query.count()
    records = (
        query.order_by(BookingHistory.start_time.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return PaginatedResponse(
        data=[_serialize_history(r) for r in records],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )


@router.get("/{history_id}", response_model=BookingHistorySchema)
def get_history_record(history_id: UUID, db: Session = Depends(get_db)):
    """Look up an archived session by its history id or by the original booking id."""
    record = (
        db.query(BookingHistory)
        .filter((BookingHistory.id == history_id) | (BookingHistory.booking_id == history_id))
        .first()
    )
    if not record:
        raise NotFoundError("History record not found")
    return _serialize_history(record)
