from __future__ import annotations

from typing import Optional, List, Literal
from pydantic import BaseModel, Field, UUID4, field_validator, model_validator
from decimal import Decimal
from datetime import datetime

from gamecenter.schemas.promotion import PromotionDetails
from gamecenter.schemas.loyalty import AccrualResult


class FoodOrder(BaseModel):
    item_id: UUID4
    name: str
    price: Decimal
    quantity: int


# Booking — Create (POST /bookings)
class BookingCreate(BaseModel):
    category: str = Field(min_length=1, max_length=50)
    seat_name: str = Field(min_length=1, max_length=50)
    customer_name: str = Field(min_length=1, max_length=255)
    whatsapp_number: Optional[str] = Field(None, max_length=20)
    duration: str = Field(min_length=1, max_length=50)
    person_count: int = 1
    booking_type: Literal["walk-in", "advance"] = "walk-in"
    start_time: Optional[datetime] = None  # required for advance bookings
    apply_promotion: bool = True

    @field_validator("whatsapp_number", mode="before")
    @classmethod
    def parse_empty_str_to_none(cls, v):
        if v == "":
            return None
        return v

    @model_validator(mode="after")
    def advance_needs_start(self):
        if self.booking_type == "advance" and self.start_time is None:
            raise ValueError("start_time is required for advance bookings")
        return self


# Booking — Update (PATCH /bookings/{id}); only customer details are editable
class BookingUpdate(BaseModel):
    customer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    whatsapp_number: Optional[str] = Field(None, max_length=20)


class ExtendRequest(BaseModel):
    duration: str = Field(min_length=1, max_length=50)


class PaymentRequest(BaseModel):
    payment_method: Literal["cash", "upi", "split", "credit"]
    cash_amount: Optional[Decimal] = Field(None, ge=0)
    upi_amount: Optional[Decimal] = Field(None, ge=0)


class CompleteRequest(BaseModel):
    payment: Optional[PaymentRequest] = None


class FoodOrderRequest(BaseModel):
    item_id: UUID4
    quantity: int = Field(1, ge=1, le=50)


# Booking — Full response
class Booking(BaseModel):
    id: UUID4
    booking_code: str
    category: str
    seat_number: int
    seat_name: str
    customer_name: str
    whatsapp_number: Optional[str] = None
    start_time: datetime
    end_time: datetime
    duration: str
    person_count: int
    price: Decimal
    status: str
    booking_type: str
    paused_remaining_seconds: Optional[int] = None
    remaining_seconds: Optional[int] = None
    payment_method: Optional[str] = None
    cash_amount: Optional[Decimal] = None
    upi_amount: Optional[Decimal] = None
    payment_status: str
    food_orders: List[FoodOrder] = []
    food_total: Decimal = Decimal("0.00")
    total_amount: Decimal = Decimal("0.00")
    original_price: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None
    bonus_minutes: Optional[int] = None
    promotion_details: Optional[PromotionDetails] = None
    loyalty_points_awarded: Optional[int] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookingHistory(Booking):
    booking_id: UUID4
    archived_at: datetime


class CompletionResult(BaseModel):
    booking: Booking
    loyalty: Optional[AccrualResult] = None
    credit_entry_id: Optional[UUID4] = None


class SweepResult(BaseModel):
    checked: int
    updated: int


class ArchiveFailure(BaseModel):
    booking_id: UUID4
    error: str


# POST /bookings/refresh — per-booking outcome of an archival batch
class ArchiveReport(BaseModel):
    archived: List[UUID4] = []
    failed: List[ArchiveFailure] = []
