from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gamecenter.api.deps import get_clock
from gamecenter.core.clock import Clock
from gamecenter.core.errors import NotFoundError
from gamecenter.db.session import get_db
from gamecenter.models.loyalty import LoyaltyMember, LoyaltyReward
from gamecenter.schemas.loyalty import (
    LoyaltyMember as LoyaltyMemberSchema,
    LoyaltyRedemption,
    LoyaltyReward as LoyaltyRewardSchema,
    RedeemRequest,
)
from gamecenter.services import loyalty as loyalty_service

router = APIRouter(prefix="/loyalty", tags=["Loyalty"])


@router.get("/members", response_model=List[LoyaltyMemberSchema])
def list_members(
    search: Optional[str] = Query(None, description="Match on customer name or contact number"),
    tier: Optional[str] = Query(None, description="bronze, silver, gold or platinum"),
    db: Session = Depends(get_db),
):
    query = db.query(LoyaltyMember)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            LoyaltyMember.customer_name.ilike(pattern) | LoyaltyMember.whatsapp_number.ilike(pattern)
        )
    if tier:
        query = query.filter(LoyaltyMember.tier == tier)
    return query.order_by(LoyaltyMember.lifetime_points.desc()).all()


@router.get("/members/by-number/{whatsapp_number}", response_model=LoyaltyMemberSchema)
def get_member_by_number(whatsapp_number: str, db: Session = Depends(get_db)):
    member = loyalty_service.find_member(db, whatsapp_number)
    if not member:
        raise NotFoundError("Loyalty member not found")
    return member


@router.get("/members/{member_id}", response_model=LoyaltyMemberSchema)
def get_member(member_id: UUID, db: Session = Depends(get_db)):
    return loyalty_service.get_member(db, member_id)


@router.get("/rewards", response_model=List[LoyaltyRewardSchema])
def list_available_rewards(db: Session = Depends(get_db)):
    """Active rewards, cheapest first."""
    return (
        db.query(LoyaltyReward)
        .filter(LoyaltyReward.is_active.is_(True))
        .order_by(LoyaltyReward.points_cost)
        .all()
    )


@router.post("/members/{member_id}/redeem", response_model=LoyaltyRedemption)
def redeem_reward(
    member_id: UUID,
    data: RedeemRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Spend points on a reward. Tier is unaffected; it follows lifetime points."""
    return loyalty_service.redeem_reward(db, member_id, data.reward_id, clock.now())
