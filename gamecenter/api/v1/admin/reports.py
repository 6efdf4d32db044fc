from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gamecenter.api.deps import get_clock
from gamecenter.core.clock import Clock
from gamecenter.db.session import get_db
from gamecenter.schemas.report import BookingStats, ExpenseSummary
from gamecenter.services import reports

router = APIRouter(prefix="/admin/reports", tags=["Admin - Reports"])


@router.get("/stats", response_model=BookingStats)
def booking_stats(
    period: Literal["daily", "weekly", "monthly"] = Query("daily"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Session and food revenue from completed sessions, archived or not yet
    archived. Weeks start on Sunday, months on the 1st; the period always
    runs to the end of today.
    """
    return reports.booking_stats(db, period, clock.now())


@router.get("/expenses", response_model=ExpenseSummary)
def expense_summary(
    date_from: date = Query(...),
    date_to: date = Query(...),
    db: Session = Depends(get_db),
):
    return reports.expense_summary(db, date_from, date_to)
