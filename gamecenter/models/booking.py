
import uuid
from sqlalchemy import Column, String, DateTime, func, DECIMAL, Integer, JSON, Uuid
from gamecenter.db.session import Base

ACTIVE_STATUSES = ("upcoming", "running", "paused")
TERMINAL_STATUSES = ("expired", "completed")


class BookingColumns:
    """Columns shared by the live bookings table and its history snapshot."""

    booking_code = Column(String(20), nullable=False, index=True)
    category = Column(String(50), nullable=False, index=True)
    seat_number = Column(Integer, nullable=False)
    seat_name = Column(String(50), nullable=False)
    customer_name = Column(String(255), nullable=False)
    whatsapp_number = Column(String(20), nullable=True, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    duration = Column(String(50), nullable=False) # label originally booked, e.g. "1 hour"
    person_count = Column(Integer, nullable=False, default=1)
    price = Column(DECIMAL(10, 2), nullable=False)
    status = Column(String(20), nullable=False, index=True) # upcoming, running, paused, expired, completed
    booking_type = Column(String(20), nullable=False) # walk-in, advance, happy-hour
    paused_remaining_seconds = Column(Integer, nullable=True)

    # Payment
    payment_method = Column(String(20), nullable=True) # cash, upi, split, credit
    cash_amount = Column(DECIMAL(10, 2), nullable=True)
    upi_amount = Column(DECIMAL(10, 2), nullable=True)
    payment_status = Column(String(20), nullable=False, default="unpaid") # unpaid, paid, credit

    # [{"item_id": ..., "name": ..., "price": "80.00", "quantity": 2}]
    food_orders = Column(JSON, nullable=False, default=list)

    # Promotions
    original_price = Column(DECIMAL(10, 2), nullable=True)
    discount_amount = Column(DECIMAL(10, 2), nullable=True)
    bonus_minutes = Column(Integer, nullable=True)
    promotion_details = Column(JSON, nullable=True) # {"kind": "discount" | "bonus_hours", ...}

    loyalty_points_awarded = Column(Integer, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Booking(BookingColumns, Base):
    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)


class BookingHistory(BookingColumns, Base):
    __tablename__ = "booking_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, nullable=False, unique=True, index=True)
    archived_at = Column(DateTime, nullable=False, index=True)
