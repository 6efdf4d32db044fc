"""
Promotion engine.

Two kinds of promotion exist per (category, duration, person_count) key:
a percentage discount and free bonus hours. At most one of them may be
enabled for overlapping dates on the same key. Expired or disabled rows stay
in storage; they are filtered out when read.
"""
import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy.orm import Session

from gamecenter.core.errors import (
    ConflictError,
    NotFoundError,
    PromotionUnavailableError,
    ValidationError,
)
from gamecenter.models.promotion import DiscountPromotion, BonusHoursPromotion
from gamecenter.schemas.promotion import (
    DiscountPromotionCreate,
    DiscountPromotionUpdate,
    BonusHoursPromotionCreate,
    BonusHoursPromotionUpdate,
    DiscountPromotionDetails,
    BonusHoursPromotionDetails,
)
from gamecenter.services.pricing import validate_person_count
from gamecenter.utils.durations import parse_duration_label
from gamecenter.utils.money import to_money

logger = logging.getLogger(__name__)

Promotion = Union[DiscountPromotion, BonusHoursPromotion]

_OTHER_KIND = {DiscountPromotion: BonusHoursPromotion, BonusHoursPromotion: DiscountPromotion}


# ---------------------------------------------------------------------------
# Pure rules
# ---------------------------------------------------------------------------


def is_currently_valid(promo: Promotion, now: datetime) -> bool:
    return bool(promo.enabled) and promo.start_date <= now <= promo.end_date


def unavailable_reason(promo: Promotion, now: datetime) -> Optional[str]:
    if not promo.enabled:
        return "disabled"
    if now > promo.end_date:
        return "expired"
    if now < promo.start_date:
        return "not started"
    return None


def discount_price(base_price: Decimal, percentage: Decimal) -> Tuple[Decimal, Decimal]:
    """Return (final_price, discount_amount) for a percentage discount."""
    base = to_money(base_price)
    final = to_money(base - base * Decimal(percentage) / Decimal(100))
    return final, base - final


def bonus_minutes_for(bonus_hours: Decimal) -> int:
    return int((Decimal(bonus_hours) * 60).to_integral_value(rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Write path (admin screens)
# ---------------------------------------------------------------------------


def _ensure_exclusive(
    db: Session,
    model,
    category: str,
    duration: str,
    person_count: int,
    start_date: datetime,
    end_date: datetime,
) -> None:
    """Reject an enabled promotion that would overlap an enabled promotion of the other kind."""
    other_model = _OTHER_KIND[model]
    clash = (
        db.query(other_model)
        .filter(
            other_model.category == category,
            other_model.duration == duration,
            other_model.person_count == person_count,
            other_model.enabled == True,  # noqa: E712
            other_model.start_date <= end_date,
            other_model.end_date >= start_date,
        )
        .first()
    )
    if clash:
        kind = "bonus hours" if other_model is BonusHoursPromotion else "discount"
        raise ConflictError(
            f"An enabled {kind} promotion already covers {category} / {duration} / "
            f"{person_count} person(s) between {clash.start_date} and {clash.end_date}"
        )


def _create(db: Session, model, data, **fields) -> Promotion:
    validate_person_count(data.category, data.person_count)
    parse_duration_label(data.duration)

    existing = (
        db.query(model)
        .filter(
            model.category == data.category,
            model.duration == data.duration,
            model.person_count == data.person_count,
        )
        .first()
    )
    if existing:
        raise ConflictError(
            f"A promotion of this kind already exists for {data.category} / {data.duration} / "
            f"{data.person_count} person(s); update it instead"
        )
    if data.enabled:
        _ensure_exclusive(
            db, model, data.category, data.duration, data.person_count,
            data.start_date, data.end_date,
        )

    promo = model(
        category=data.category,
        duration=data.duration,
        person_count=data.person_count,
        start_date=data.start_date,
        end_date=data.end_date,
        enabled=data.enabled,
        usage_count=0,
        **fields,
    )
    db.add(promo)
    db.commit()
    db.refresh(promo)
    return promo


def _update(db: Session, model, promo_id: UUID, data) -> Promotion:
    promo = get_promotion(db, model, promo_id)
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

    start_date = changes.get("start_date", promo.start_date)
    end_date = changes.get("end_date", promo.end_date)
    enabled = changes.get("enabled", promo.enabled)
    if end_date <= start_date:
        raise ValidationError("end_date must be after start_date")
    if enabled:
        _ensure_exclusive(
            db, model, promo.category, promo.duration, promo.person_count,
            start_date, end_date,
        )

    for field, value in changes.items():
        setattr(promo, field, value)
    db.commit()
    db.refresh(promo)
    return promo


def get_promotion(db: Session, model, promo_id: UUID) -> Promotion:
    promo = db.query(model).filter(model.id == promo_id).first()
    if not promo:
        raise NotFoundError("Promotion not found")
    return promo


def list_promotions(db: Session, model, category: Optional[str] = None) -> List[Promotion]:
    query = db.query(model)
    if category:
        query = query.filter(model.category == category)
    return query.order_by(model.category, model.duration, model.person_count).all()


def create_discount(db: Session, data: DiscountPromotionCreate) -> DiscountPromotion:
    return _create(
        db, DiscountPromotion, data,
        discount_percentage=data.discount_percentage,
        total_savings=Decimal("0.00"),
    )


def update_discount(db: Session, promo_id: UUID, data: DiscountPromotionUpdate) -> DiscountPromotion:
    return _update(db, DiscountPromotion, promo_id, data)


def create_bonus_hours(db: Session, data: BonusHoursPromotionCreate) -> BonusHoursPromotion:
    return _create(
        db, BonusHoursPromotion, data,
        bonus_hours=data.bonus_hours,
        total_hours_given=Decimal("0.00"),
    )


def update_bonus_hours(
    db: Session, promo_id: UUID, data: BonusHoursPromotionUpdate
) -> BonusHoursPromotion:
    return _update(db, BonusHoursPromotion, promo_id, data)


def delete_promotion(db: Session, model, promo_id: UUID) -> None:
    promo = get_promotion(db, model, promo_id)
    db.delete(promo)
    db.commit()


# ---------------------------------------------------------------------------
# Read / redeem path (booking desk)
# ---------------------------------------------------------------------------


def find_active_promotion(
    db: Session,
    category: str,
    duration: str,
    person_count: int,
    now: datetime,
    strict: bool = False,
) -> Optional[Promotion]:
    """
    Return the promotion currently valid for the key, if any.

    With ``strict`` the caller wants a promotion: NotFoundError when no row
    exists for the key, PromotionUnavailableError when rows exist but none is
    valid right now.
    """
    candidates = [
        promo
        for model in (DiscountPromotion, BonusHoursPromotion)
        for promo in db.query(model).filter(
            model.category == category,
            model.duration == duration,
            model.person_count == person_count,
        )
    ]
    for promo in candidates:
        if is_currently_valid(promo, now):
            return promo

    if strict:
        if not candidates:
            raise NotFoundError(
                f"No promotion configured for {category} / {duration} / {person_count} person(s)"
            )
        reasons = ", ".join(unavailable_reason(p, now) or "invalid" for p in candidates)
        raise PromotionUnavailableError(
            f"Promotion for {category} / {duration} is not currently valid ({reasons})"
        )
    return None


def redeem_discount(
    promo: DiscountPromotion, base_price: Decimal
) -> DiscountPromotionDetails:
    """Apply a discount and bump its counters. The caller commits."""
    final, saved = discount_price(base_price, promo.discount_percentage)
    promo.usage_count = (promo.usage_count or 0) + 1
    promo.total_savings = to_money(Decimal(promo.total_savings or 0) + saved)
    logger.info("Discount promotion %s redeemed: saved %s", promo.id, saved)
    return DiscountPromotionDetails(
        promotion_id=promo.id,
        discount_percentage=Decimal(promo.discount_percentage),
        original_price=to_money(base_price),
        discount_amount=saved,
        final_price=final,
    )


def redeem_bonus_hours(promo: BonusHoursPromotion) -> BonusHoursPromotionDetails:
    """Grant bonus time and bump its counters. The caller commits."""
    hours = Decimal(promo.bonus_hours)
    promo.usage_count = (promo.usage_count or 0) + 1
    promo.total_hours_given = Decimal(promo.total_hours_given or 0) + hours
    logger.info("Bonus hours promotion %s redeemed: %s hour(s)", promo.id, hours)
    return BonusHoursPromotionDetails(
        promotion_id=promo.id,
        bonus_hours=hours,
        bonus_minutes=bonus_minutes_for(hours),
    )