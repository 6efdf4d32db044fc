import uuid
from decimal import Decimal

import pytest
from pydantic import TypeAdapter, ValidationError

from gamecenter import schemas


def test_device_seats_default_to_category_names():
    device = schemas.DeviceConfigUpsert(category="PS5", count=3)
    assert device.seats == ["PS5-1", "PS5-2", "PS5-3"]


@pytest.mark.parametrize(
    "seats",
    [["PC-1"], ["PC-1", "PC-1"]],
)
def test_device_seat_names_checked(seats):
    with pytest.raises(ValidationError):
        schemas.DeviceConfigUpsert(category="PC", count=2, seats=seats)


def test_promotion_details_pick_kind():
    adapter = TypeAdapter(schemas.PromotionDetails)
    details = adapter.validate_python({
        "kind": "bonus_hours",
        "promotion_id": str(uuid.uuid4()),
        "bonus_hours": "1.5",
        "bonus_minutes": 90,
    })
    assert isinstance(details, schemas.BonusHoursPromotionDetails)


def test_promotion_window_must_be_forward():
    with pytest.raises(ValidationError):
        schemas.DiscountPromotionCreate(
            category="PC",
            duration="1 hour",
            discount_percentage=Decimal("10"),
            start_date="2025-01-10T00:00:00",
            end_date="2025-01-01T00:00:00",
        )


def test_discount_percentage_bounds():
    with pytest.raises(ValidationError):
        schemas.DiscountPromotionCreate(
            category="PC",
            duration="1 hour",
            discount_percentage=Decimal("120"),
            start_date="2025-01-01T00:00:00",
            end_date="2025-01-10T00:00:00",
        )


def test_spend_bracket_range_checked():
    with pytest.raises(ValidationError):
        schemas.SpendBracketIn(min_spent=Decimal("300"), max_spent=Decimal("100"), points=5)


def test_empty_contact_number_becomes_none():
    data = schemas.BookingCreate(
        category="PC", seat_name="PC-1", customer_name="Ravi", duration="1 hour",
        whatsapp_number="",
    )
    assert data.whatsapp_number is None


def test_payment_method_restricted():
    with pytest.raises(ValidationError):
        schemas.PaymentRequest(payment_method="card")
