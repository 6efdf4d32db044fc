from datetime import datetime, time
from decimal import Decimal

import pytest

from gamecenter.core.errors import NotFoundError, ValidationError
from gamecenter.models.pricing import PricingConfig
from gamecenter.schemas.pricing import HappyHoursWindowIn, PriceRowIn
from gamecenter.services import pricing


@pytest.fixture
def ps5_happy_hours(db_session, price_tables):
    pricing.replace_happy_hours_windows(
        db_session, "PS5", [HappyHoursWindowIn(start_time=time(14, 0), end_time=time(18, 0))]
    )
    pricing.replace_happy_hours_pricing(
        db_session, "PS5", [PriceRowIn(duration="1 hour", person_count=2, price=Decimal("150"))]
    )


def test_happy_hours_price_inside_window(db_session, ps5_happy_hours):
    resolved = pricing.resolve_price(db_session, "PS5", "1 hour", 2, at=datetime(2025, 1, 1, 15, 0))
    assert resolved.price == Decimal("150")
    assert resolved.source == "happy_hours"
    assert resolved.window_start == time(14, 0)


def test_regular_price_outside_window(db_session, ps5_happy_hours):
    resolved = pricing.resolve_price(db_session, "PS5", "1 hour", 2, at=datetime(2025, 1, 1, 19, 0))
    assert resolved.price == Decimal("200")
    assert resolved.source == "regular"


def test_window_end_is_exclusive(db_session, ps5_happy_hours):
    at_start = pricing.resolve_price(db_session, "PS5", "1 hour", 2, at=datetime(2025, 1, 1, 14, 0))
    at_end = pricing.resolve_price(db_session, "PS5", "1 hour", 2, at=datetime(2025, 1, 1, 18, 0))
    assert at_start.source == "happy_hours"
    assert at_end.source == "regular"


def test_disabled_window_is_ignored(db_session, price_tables):
    pricing.replace_happy_hours_windows(
        db_session, "PS5",
        [HappyHoursWindowIn(start_time=time(14, 0), end_time=time(18, 0), enabled=False)],
    )
    pricing.replace_happy_hours_pricing(
        db_session, "PS5", [PriceRowIn(duration="1 hour", person_count=2, price=Decimal("150"))]
    )
    resolved = pricing.resolve_price(db_session, "PS5", "1 hour", 2, at=datetime(2025, 1, 1, 15, 0))
    assert resolved.price == Decimal("200")


def test_active_window_without_happy_price_falls_back_to_regular(db_session, ps5_happy_hours):
    resolved = pricing.resolve_price(db_session, "PS5", "1 hour", 1, at=datetime(2025, 1, 1, 15, 0))
    assert resolved.price == Decimal("120")
    assert resolved.source == "regular"


def test_missing_price_is_not_found(db_session, price_tables):
    with pytest.raises(NotFoundError):
        pricing.resolve_price(db_session, "PC", "3 hours", 1, at=datetime(2025, 1, 1, 12, 0))


@pytest.mark.parametrize(
    "start,end,at,expected",
    [
        (time(14, 0), time(18, 0), time(13, 59), False),
        (time(14, 0), time(18, 0), time(17, 59), True),
        (time(22, 0), time(2, 0), time(23, 30), True),
        (time(22, 0), time(2, 0), time(1, 0), True),
        (time(22, 0), time(2, 0), time(2, 0), False),
        (time(22, 0), time(2, 0), time(12, 0), False),
    ],
)
def test_window_contains(start, end, at, expected):
    assert pricing.window_contains(start, end, at) is expected


def test_multi_person_rows_only_for_ps5(db_session, devices):
    with pytest.raises(ValidationError):
        pricing.replace_pricing(
            db_session, "PC", [PriceRowIn(duration="1 hour", person_count=2, price=Decimal("180"))]
        )
    with pytest.raises(ValidationError):
        pricing.replace_happy_hours_pricing(
            db_session, "PC", [PriceRowIn(duration="1 hour", person_count=3, price=Decimal("150"))]
        )
    assert db_session.query(PricingConfig).count() == 0


def test_duplicate_rows_rejected(db_session, devices):
    with pytest.raises(ValidationError):
        pricing.replace_pricing(db_session, "PC", [
            PriceRowIn(duration="1 hour", price=Decimal("100")),
            PriceRowIn(duration="1 hour", price=Decimal("110")),
        ])


def test_non_positive_price_rejected(db_session, devices):
    with pytest.raises(ValidationError):
        pricing.replace_pricing(db_session, "PC", [PriceRowIn(duration="1 hour", price=Decimal("0"))])


def test_replace_swaps_whole_table(db_session, price_tables):
    pricing.replace_pricing(db_session, "PC", [PriceRowIn(duration="1 hour", price=Decimal("90"))])
    rows = db_session.query(PricingConfig).filter(PricingConfig.category == "PC").all()
    assert [(r.duration, r.price) for r in rows] == [("1 hour", Decimal("90.00"))]


def test_resolve_endpoint(client, ps5_happy_hours, clock):
    clock.set(datetime(2025, 1, 1, 15, 30))
    resp = client.get(
        "/api/v1/admin/pricing/resolve",
        params={"category": "PS5", "duration": "1 hour", "person_count": 2},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["price"]) == Decimal("150")
    assert body["source"] == "happy_hours"


def test_happy_hours_status_endpoint(client, ps5_happy_hours, clock):
    clock.set(datetime(2025, 1, 1, 19, 0))
    resp = client.get("/api/v1/admin/happy-hours/active", params={"category": "PS5"})
    assert resp.status_code == 200
    assert resp.json()["active"] is False
