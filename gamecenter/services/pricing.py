"""
Pricing resolver.

A session price is looked up by (category, duration label, person count).
While an enabled happy-hours window for the category contains the time of
day, the happy-hours table wins over the regular one.
"""
import logging
from datetime import datetime, time
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from gamecenter.core.config import settings
from gamecenter.core.errors import NotFoundError, ValidationError
from gamecenter.models.pricing import PricingConfig, HappyHoursConfig, HappyHoursPricing
from gamecenter.schemas.pricing import PriceRowIn, HappyHoursWindowIn, ResolvedPrice
from gamecenter.utils.durations import parse_duration_label
from gamecenter.utils.money import to_money

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Write-time rules
# ---------------------------------------------------------------------------


def validate_person_count(category: str, person_count: int) -> None:
    if person_count < 1:
        raise ValidationError("person_count must be at least 1")
    if person_count > 1 and not settings.allows_multi_person(category):
        raise ValidationError(
            f"Category '{category}' only supports single-person pricing "
            f"(multi-person allowed for: {', '.join(settings.MULTI_PERSON_CATEGORIES)})"
        )


def _validate_rows(category: str, rows: Iterable[PriceRowIn]) -> List[PriceRowIn]:
    seen = set()
    validated = []
    for row in rows:
        validate_person_count(category, row.person_count)
        parse_duration_label(row.duration)
        if row.price <= 0:
            raise ValidationError(f"Price for '{row.duration}' must be positive")
        key = (row.duration.strip().lower(), row.person_count)
        if key in seen:
            raise ValidationError(
                f"Duplicate price row for '{row.duration}' with {row.person_count} person(s)"
            )
        seen.add(key)
        validated.append(row)
    return validated


def _replace_rows(db: Session, model, category: str, rows: Iterable[PriceRowIn]):
    validated = _validate_rows(category, rows)

    db.query(model).filter(model.category == category).delete(synchronize_session="fetch")
    created = []
    for row in validated:
        obj = model(
            category=category,
            duration=row.duration.strip(),
            person_count=row.person_count,
            price=to_money(row.price),
        )
        db.add(obj)
        created.append(obj)

    db.commit()
    for obj in created:
        db.refresh(obj)
    return created


def replace_pricing(db: Session, category: str, rows: Iterable[PriceRowIn]) -> List[PricingConfig]:
    """Replace the whole regular price table of a category."""
    return _replace_rows(db, PricingConfig, category, rows)


def replace_happy_hours_pricing(
    db: Session, category: str, rows: Iterable[PriceRowIn]
) -> List[HappyHoursPricing]:
    """Replace the whole happy-hours price table of a category."""
    return _replace_rows(db, HappyHoursPricing, category, rows)


def replace_happy_hours_windows(
    db: Session, category: str, windows: Iterable[HappyHoursWindowIn]
) -> List[HappyHoursConfig]:
    windows = list(windows)
    for w in windows:
        if w.start_time == w.end_time:
            raise ValidationError("Happy hours window must not start and end at the same time")

    db.query(HappyHoursConfig).filter(HappyHoursConfig.category == category).delete(
        synchronize_session="fetch"
    )
    created = [
        HappyHoursConfig(
            category=category,
            start_time=w.start_time,
            end_time=w.end_time,
            enabled=w.enabled,
        )
        for w in windows
    ]
    db.add_all(created)
    db.commit()
    for obj in created:
        db.refresh(obj)
    return created


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


def window_contains(start: time, end: time, at: time) -> bool:
    """Start-inclusive, end-exclusive. A window whose end is before its start wraps midnight."""
    if start < end:
        return start <= at < end
    return at >= start or at < end


def active_happy_hours_window(
    db: Session, category: str, at: datetime
) -> Optional[HappyHoursConfig]:
    windows = (
        db.query(HappyHoursConfig)
        .filter(HappyHoursConfig.category == category, HappyHoursConfig.enabled == True)  # noqa: E712
        .order_by(HappyHoursConfig.start_time)
        .all()
    )
    current = at.time()
    for window in windows:
        if window_contains(window.start_time, window.end_time, current):
            return window
    return None


def _lookup(db: Session, model, category: str, duration: str, person_count: int):
    return (
        db.query(model)
        .filter(
            model.category == category,
            model.duration == duration.strip(),
            model.person_count == person_count,
        )
        .first()
    )


def resolve_price(
    db: Session, category: str, duration: str, person_count: int, at: datetime
) -> ResolvedPrice:
    """
    Resolve the price for a session key at a point in time.

    Raises NotFoundError when neither table has a row for the key; callers
    must reject the booking rather than charge nothing.
    """
    window = active_happy_hours_window(db, category, at)
    if window is not None:
        row = _lookup(db, HappyHoursPricing, category, duration, person_count)
        if row is not None:
            return ResolvedPrice(
                category=category,
                duration=row.duration,
                person_count=person_count,
                price=Decimal(row.price),
                source="happy_hours",
                window_start=window.start_time,
                window_end=window.end_time,
            )
        logger.debug(
            "Happy hours active for %s but no happy-hours price for %s/%d; using regular table",
            category, duration, person_count,
        )

    row = _lookup(db, PricingConfig, category, duration, person_count)
    if row is None:
        raise NotFoundError(
            f"No pricing found for {category} / {duration} / {person_count} person(s)"
        )
    return ResolvedPrice(
        category=category,
        duration=row.duration,
        person_count=person_count,
        price=Decimal(row.price),
        source="regular",
    )
