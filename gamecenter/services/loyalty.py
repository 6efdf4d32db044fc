"""
Loyalty accrual and redemption.

Points for a completed visit are a flat ``points_per_visit`` plus a bonus from
the spend-bracket table. Tiers come from lifetime points, recomputed on every
accrual, so redeeming points never demotes a member.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from gamecenter.core.errors import NotFoundError, ValidationError
from gamecenter.models.loyalty import (
    LoyaltyConfig,
    LoyaltySpendBracket,
    LoyaltyMember,
    LoyaltyReward,
    LoyaltyRedemption,
)
from gamecenter.schemas.loyalty import (
    AccrualResult,
    LoyaltyConfigUpdate,
    SpendBracketIn,
    LoyaltyRedemption as LoyaltyRedemptionSchema,
)
from gamecenter.utils.money import to_money

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def get_config(db: Session, commit: bool = True) -> LoyaltyConfig:
    """Return the loyalty config row, creating it with defaults on first use."""
    config = db.query(LoyaltyConfig).filter(LoyaltyConfig.id == "global").first()
    if config is None:
        config = LoyaltyConfig(id="global")
        db.add(config)
        if commit:
            db.commit()
            db.refresh(config)
        else:
            db.flush()
    return config


def update_config(db: Session, data: LoyaltyConfigUpdate) -> LoyaltyConfig:
    config = get_config(db)
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

    silver = changes.get("silver_threshold", config.silver_threshold)
    gold = changes.get("gold_threshold", config.gold_threshold)
    platinum = changes.get("platinum_threshold", config.platinum_threshold)
    if not 0 < silver < gold < platinum:
        raise ValidationError("Tier thresholds must be ascending: 0 < silver < gold < platinum")

    for field, value in changes.items():
        setattr(config, field, value)
    db.commit()
    db.refresh(config)
    return config


def list_brackets(db: Session) -> List[LoyaltySpendBracket]:
    return db.query(LoyaltySpendBracket).order_by(LoyaltySpendBracket.min_spent).all()


def validate_brackets(brackets: Sequence[SpendBracketIn]) -> List[SpendBracketIn]:
    """Brackets must be ordered, non-overlapping, and only the last may be unbounded."""
    ordered = sorted(brackets, key=lambda b: b.min_spent)
    for i, bracket in enumerate(ordered):
        is_last = i == len(ordered) - 1
        if bracket.max_spent is None and not is_last:
            raise ValidationError("Only the highest spend bracket may be unbounded")
        if not is_last and ordered[i + 1].min_spent <= bracket.max_spent:
            raise ValidationError(
                f"Spend brackets overlap: {bracket.min_spent}-{bracket.max_spent} "
                f"and {ordered[i + 1].min_spent}-"
            )
    return ordered


def replace_brackets(db: Session, brackets: Iterable[SpendBracketIn]) -> List[LoyaltySpendBracket]:
    ordered = validate_brackets(list(brackets))
    db.query(LoyaltySpendBracket).delete(synchronize_session="fetch")
    created = [
        LoyaltySpendBracket(
            min_spent=to_money(b.min_spent),
            max_spent=to_money(b.max_spent) if b.max_spent is not None else None,
            points=b.points,
        )
        for b in ordered
    ]
    db.add_all(created)
    db.commit()
    return list_brackets(db)


# ---------------------------------------------------------------------------
# Pure rules
# ---------------------------------------------------------------------------


def spend_bonus_points(brackets: Sequence, amount_spent: Decimal) -> int:
    """
    Bonus for a visit: the bracket whose range holds the amount. Ranges are
    inclusive; only a null max_spent is unbounded. An amount between two
    adjacent integer-bounded brackets (e.g. 100.50 between 0-100 and 101-300)
    takes the lower bracket. Amounts in a gap or outside every range earn 0.
    """
    ordered = sorted(brackets, key=lambda b: Decimal(b.min_spent))
    for i, bracket in enumerate(ordered):
        if amount_spent < Decimal(bracket.min_spent):
            break
        if bracket.max_spent is None or amount_spent <= Decimal(bracket.max_spent):
            return bracket.points
        upper = Decimal(bracket.max_spent)
        following = ordered[i + 1] if i + 1 < len(ordered) else None
        if following is not None and Decimal(following.min_spent) - upper <= 1:
            if amount_spent < Decimal(following.min_spent):
                return bracket.points
    return 0


def tier_for(lifetime_points: int, config: LoyaltyConfig) -> str:
    if lifetime_points >= config.platinum_threshold:
        return "platinum"
    if lifetime_points >= config.gold_threshold:
        return "gold"
    if lifetime_points >= config.silver_threshold:
        return "silver"
    return "bronze"


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


def get_member(db: Session, member_id: UUID) -> LoyaltyMember:
    member = db.query(LoyaltyMember).filter(LoyaltyMember.id == member_id).first()
    if not member:
        raise NotFoundError("Loyalty member not found")
    return member


def find_member(db: Session, whatsapp_number: str) -> Optional[LoyaltyMember]:
    return db.query(LoyaltyMember).filter(LoyaltyMember.whatsapp_number == whatsapp_number).first()


def accrue_visit(
    db: Session,
    whatsapp_number: str,
    customer_name: str,
    amount_spent: Decimal,
    now: datetime,
) -> Optional[AccrualResult]:
    """
    Credit a completed visit to the member keyed by contact number.

    Returns None when the programme is disabled. Does not commit; the caller
    commits together with the booking completion.
    """
    config = get_config(db, commit=False)
    if not config.enabled:
        return None

    member = find_member(db, whatsapp_number)
    if member is None:
        member = LoyaltyMember(
            whatsapp_number=whatsapp_number,
            customer_name=customer_name,
            points=0,
            lifetime_points=0,
            tier="bronze",
            total_visits=0,
            total_spent=Decimal("0.00"),
        )
        db.add(member)
        db.flush()

    spent = to_money(amount_spent)
    visit_points = config.points_per_visit
    spend_points = spend_bonus_points(list_brackets(db), spent)
    earned = visit_points + spend_points

    previous_tier = member.tier
    member.points += earned
    member.lifetime_points += earned
    member.total_visits += 1
    member.total_spent = to_money(Decimal(member.total_spent) + spent)
    member.last_visit_at = now
    member.tier = tier_for(member.lifetime_points, config)

    if member.tier != previous_tier:
        logger.info(
            "Loyalty member %s moved from %s to %s", member.whatsapp_number, previous_tier, member.tier
        )

    return AccrualResult(
        member_id=member.id,
        points_earned=earned,
        visit_points=visit_points,
        spend_points=spend_points,
        points=member.points,
        lifetime_points=member.lifetime_points,
        tier=member.tier,
        previous_tier=previous_tier,
    )


def redeem_reward(
    db: Session, member_id: UUID, reward_id: UUID, now: datetime
) -> LoyaltyRedemptionSchema:
    """Spend points on a reward. Leaves the balance untouched when it is too low."""
    member = get_member(db, member_id)
    reward = db.query(LoyaltyReward).filter(LoyaltyReward.id == reward_id).first()
    if not reward:
        raise NotFoundError("Reward not found")
    if not reward.is_active:
        raise ValidationError(f"Reward '{reward.name}' is not available")
    if member.points < reward.points_cost:
        raise ValidationError(
            f"Insufficient points: {member.points} available, {reward.points_cost} required"
        )

    member.points -= reward.points_cost
    redemption = LoyaltyRedemption(
        member_id=member.id,
        reward_id=reward.id,
        points_spent=reward.points_cost,
        redeemed_at=now,
    )
    db.add(redemption)
    db.commit()
    db.refresh(redemption)

    return LoyaltyRedemptionSchema(
        id=redemption.id,
        member_id=member.id,
        reward_id=reward.id,
        points_spent=redemption.points_spent,
        redeemed_at=redemption.redeemed_at,
        remaining_points=member.points,
    )
