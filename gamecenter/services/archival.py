"""
Archival: move terminal bookings into booking_history.

Each booking is copied and removed in its own transaction, so a booking is
always in exactly one of the two tables. A failure on one booking is
reported and the batch carries on.
"""
import copy
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from gamecenter.models.booking import Booking, BookingHistory
from gamecenter.models.expense import Expense
from gamecenter.schemas.booking import ArchiveFailure, ArchiveReport
from gamecenter.services.lifecycle import sweep_statuses

logger = logging.getLogger(__name__)

_SNAPSHOT_COLUMNS = [c.name for c in Booking.__table__.columns if c.name != "id"]


def snapshot(booking: Booking, archived_at: datetime) -> BookingHistory:
    """Full copy of a booking row, food orders and promotion metadata included."""
    values = {name: copy.deepcopy(getattr(booking, name)) for name in _SNAPSHOT_COLUMNS}
    return BookingHistory(booking_id=booking.id, archived_at=archived_at, **values)


def archive_booking(db: Session, booking: Booking, archived_at: datetime) -> BookingHistory:
    """Copy one booking into history and delete it, all or nothing."""
    try:
        record = snapshot(booking, archived_at)
        db.add(record)
        db.flush()
        db.delete(booking)
        db.flush()
        db.commit()
    except Exception:
        db.rollback()
        raise
    return record


def archive_terminal_bookings(
    db: Session,
    now: datetime,
    include_expired: bool,
    expired_grace_minutes: int = 0,
) -> ArchiveReport:
    """
    Archive completed bookings, and expired ones whose end is at least
    ``expired_grace_minutes`` in the past when ``include_expired`` is set.
    """
    # Statuses must be current before picking what is terminal
    sweep_statuses(db, now)

    eligible = [Booking.status == "completed"]
    if include_expired:
        cutoff = now - timedelta(minutes=expired_grace_minutes)
        eligible.append(and_(Booking.status == "expired", Booking.end_time <= cutoff))

    ids = [row.id for row in db.query(Booking.id).filter(or_(*eligible)).all()]

    report = ArchiveReport()
    for booking_id in ids:
        booking: Optional[Booking] = db.query(Booking).filter(Booking.id == booking_id).first()
        if booking is None:
            # Archived or deleted by another desk in the meantime
            continue
        try:
            archive_booking(db, booking, archived_at=now)
            report.archived.append(booking_id)
        except Exception as exc:
            logger.exception("Failed to archive booking %s", booking_id)
            report.failed.append(ArchiveFailure(booking_id=booking_id, error=str(exc)))

    if report.archived or report.failed:
        logger.info(
            "Archived %d booking(s), %d failure(s)", len(report.archived), len(report.failed)
        )
    return report


def delete_old_history(db: Session, now: datetime, retention_days: int) -> int:
    cutoff = now - timedelta(days=retention_days)
    count = (
        db.query(BookingHistory)
        .filter(BookingHistory.archived_at < cutoff)
        .delete(synchronize_session="fetch")
    )
    db.commit()
    return count


def delete_old_expenses(db: Session, now: datetime, retention_days: int) -> int:
    cutoff = (now - timedelta(days=retention_days)).date()
    count = (
        db.query(Expense)
        .filter(Expense.date < cutoff)
        .delete(synchronize_session="fetch")
    )
    db.commit()
    return count
