from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gamecenter.core.errors import NotFoundError
from gamecenter.db.session import get_db
from gamecenter.models.loyalty import LoyaltyRedemption, LoyaltyReward
from gamecenter.schemas.common import MessageResponse
from gamecenter.schemas.loyalty import (
    LoyaltyConfig as LoyaltyConfigSchema,
    LoyaltyConfigUpdate,
    LoyaltyReward as LoyaltyRewardSchema,
    LoyaltyRewardCreate,
    LoyaltyRewardUpdate,
    SpendBracket,
    SpendBracketsReplace,
)
from gamecenter.services import loyalty as loyalty_service

router = APIRouter(prefix="/admin/loyalty", tags=["Admin - Loyalty"])


def _serialize_config(db: Session) -> LoyaltyConfigSchema:
    config = loyalty_service.get_config(db)
    return LoyaltyConfigSchema(
        enabled=config.enabled,
        points_per_visit=config.points_per_visit,
        silver_threshold=config.silver_threshold,
        gold_threshold=config.gold_threshold,
        platinum_threshold=config.platinum_threshold,
        spend_brackets=[SpendBracket.model_validate(b) for b in loyalty_service.list_brackets(db)],
    )


def _get_reward(db: Session, reward_id: UUID) -> LoyaltyReward:
    reward = db.query(LoyaltyReward).filter(LoyaltyReward.id == reward_id).first()
    if not reward:
        raise NotFoundError("Reward not found")
    return reward


# ---------------------------------------------------------------------------
# Programme configuration
# ---------------------------------------------------------------------------


@router.get("/config", response_model=LoyaltyConfigSchema)
def get_config(db: Session = Depends(get_db)):
    return _serialize_config(db)


@router.patch("/config", response_model=LoyaltyConfigSchema)
def update_config(data: LoyaltyConfigUpdate, db: Session = Depends(get_db)):
    """Tier thresholds must stay strictly ascending (silver < gold < platinum)."""
    loyalty_service.update_config(db, data)
    return _serialize_config(db)


@router.put("/brackets", response_model=List[SpendBracket])
def replace_brackets(data: SpendBracketsReplace, db: Session = Depends(get_db)):
    return loyalty_service.replace_brackets(db, data.brackets)


# ---------------------------------------------------------------------------
# Rewards
# ---------------------------------------------------------------------------


@router.get("/rewards", response_model=List[LoyaltyRewardSchema])
def list_rewards(db: Session = Depends(get_db)):
    return db.query(LoyaltyReward).order_by(LoyaltyReward.points_cost).all()


@router.post("/rewards", response_model=LoyaltyRewardSchema, status_code=status.HTTP_201_CREATED)
def create_reward(data: LoyaltyRewardCreate, db: Session = Depends(get_db)):
    reward = LoyaltyReward(**data.model_dump())
    db.add(reward)
    db.commit()
    db.refresh(reward)
    return reward


@router.patch("/rewards/{reward_id}", response_model=LoyaltyRewardSchema)
def update_reward(reward_id: UUID, data: LoyaltyRewardUpdate, db: Session = Depends(get_db)):
    reward = _get_reward(db, reward_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(reward, field, value)
    db.commit()
    db.refresh(reward)
    return reward


@router.delete("/rewards/{reward_id}", response_model=MessageResponse)
def delete_reward(reward_id: UUID, db: Session = Depends(get_db)):
    """Rewards with past redemptions are deactivated instead of removed."""
    reward = _get_reward(db, reward_id)
    used = db.query(LoyaltyRedemption).filter(LoyaltyRedemption.reward_id == reward.id).first()
    if used:
        reward.is_active = False
        db.commit()
        return MessageResponse(message="Reward has redemptions; deactivated instead")
    db.delete(reward)
    db.commit()
    return MessageResponse(message="Reward deleted")
