from typing import List
from pydantic import BaseModel
from decimal import Decimal
from datetime import date, datetime


class BookingStats(BaseModel):
    period: str          # "daily" | "weekly" | "monthly"
    start: datetime
    end: datetime
    total_revenue: Decimal
    total_food_revenue: Decimal
    total_sessions: int
    avg_session_minutes: int


class ExpenseCategoryTotal(BaseModel):
    category: str
    total: Decimal
    count: int


class ExpenseSummary(BaseModel):
    date_from: date
    date_to: date
    total: Decimal
    by_category: List[ExpenseCategoryTotal]
