from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from gamecenter.core.errors import ValidationError
from gamecenter.models.booking import Booking, BookingHistory
from gamecenter.models.expense import Expense
from gamecenter.schemas.report import BookingStats, ExpenseCategoryTotal, ExpenseSummary
from gamecenter.utils.money import food_total, to_money

PERIODS = ("daily", "weekly", "monthly")


def period_bounds(period: str, now: datetime) -> Tuple[datetime, datetime]:
    """Start of the period (weeks start on Sunday) to the end of today."""
    today = now.date()
    end = datetime.combine(today, time(23, 59, 59))
    if period == "daily":
        start_day = today
    elif period == "weekly":
        # date.weekday(): Monday=0 ... Sunday=6
        start_day = today - timedelta(days=(today.weekday() + 1) % 7)
    elif period == "monthly":
        start_day = today.replace(day=1)
    else:
        raise ValidationError(f"period must be one of {', '.join(PERIODS)}")
    return datetime.combine(start_day, time.min), end


def sessions_between(db: Session, start: datetime, end: datetime) -> List:
    """
    Finished sessions starting in [start, end]: archived history plus
    completed bookings still waiting for the next refresh or sweep.
    """
    archived = (
        db.query(BookingHistory)
        .filter(BookingHistory.start_time >= start, BookingHistory.start_time <= end)
        .all()
    )
    pending = (
        db.query(Booking)
        .filter(
            Booking.status == "completed",
            Booking.start_time >= start,
            Booking.start_time <= end,
        )
        .all()
    )
    return sorted(archived + pending, key=lambda r: r.start_time, reverse=True)


def booking_stats(db: Session, period: str, now: datetime) -> BookingStats:
    start, end = period_bounds(period, now)
    rows = sessions_between(db, start, end)

    revenue = sum((Decimal(r.price) for r in rows), Decimal("0"))
    food = sum((food_total(r.food_orders) for r in rows), Decimal("0"))
    minutes = sum((r.end_time - r.start_time).total_seconds() / 60 for r in rows)

    return BookingStats(
        period=period,
        start=start,
        end=end,
        total_revenue=to_money(revenue),
        total_food_revenue=to_money(food),
        total_sessions=len(rows),
        avg_session_minutes=round(minutes / len(rows)) if rows else 0,
    )


def expense_summary(db: Session, date_from: date, date_to: date) -> ExpenseSummary:
    if date_to < date_from:
        raise ValidationError("date_to must not be before date_from")

    rows = (
        db.query(
            Expense.category,
            func.coalesce(func.sum(Expense.amount), 0).label("total"),
            func.count(Expense.id).label("count"),
        )
        .filter(Expense.date >= date_from, Expense.date <= date_to)
        .group_by(Expense.category)
        .order_by(Expense.category)
        .all()
    )
    by_category = [
        ExpenseCategoryTotal(category=r.category, total=to_money(r.total), count=r.count)
        for r in rows
    ]
    return ExpenseSummary(
        date_from=date_from,
        date_to=date_to,
        total=to_money(sum((c.total for c in by_category), Decimal("0"))),
        by_category=by_category,
    )
