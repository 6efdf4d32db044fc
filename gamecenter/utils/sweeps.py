from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from gamecenter.core.config import settings
from gamecenter.schemas.booking import ArchiveReport, SweepResult
from gamecenter.services import archival
from gamecenter.services.lifecycle import sweep_statuses


def run_status_sweep(db: Session, now: datetime) -> SweepResult:
    """
    Move bookings whose window has opened to running and whose window has
    closed to expired. Paused and completed bookings are left alone.
    """
    return sweep_statuses(db, now)


def run_daily_maintenance(db: Session, now: datetime) -> dict:
    """
    Nightly housekeeping:
      - archive completed bookings (and expired ones past the grace period,
        when ARCHIVE_EXPIRED_ON_SWEEP is on)
      - drop booking history and expenses older than their retention periods

    Returns counts per step.
    """
    report: ArchiveReport = archival.archive_terminal_bookings(
        db,
        now,
        include_expired=settings.ARCHIVE_EXPIRED_ON_SWEEP,
        expired_grace_minutes=settings.EXPIRED_ARCHIVE_GRACE_MINUTES,
    )
    history_deleted = archival.delete_old_history(db, now, settings.BOOKING_HISTORY_RETENTION_DAYS)
    expenses_deleted = archival.delete_old_expenses(db, now, settings.EXPENSE_RETENTION_DAYS)
    return {
        "archived": len(report.archived),
        "archive_failures": len(report.failed),
        "history_deleted": history_deleted,
        "expenses_deleted": expenses_deleted,
    }


def seconds_until_hour(now: datetime, hour: int) -> float:
    """Seconds from ``now`` until the next occurrence of ``hour``:00 local time."""
    target = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if now >= target:
        target += timedelta(days=1)
    return (target - now).total_seconds()
