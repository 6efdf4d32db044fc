from typing import Optional, List
from pydantic import BaseModel, UUID4, Field, model_validator
from decimal import Decimal
from datetime import datetime


# Loyalty configuration (single row)
class LoyaltyConfigUpdate(BaseModel):
    enabled: Optional[bool] = None
    points_per_visit: Optional[int] = Field(None, ge=0)
    silver_threshold: Optional[int] = Field(None, gt=0)
    gold_threshold: Optional[int] = Field(None, gt=0)
    platinum_threshold: Optional[int] = Field(None, gt=0)


class LoyaltyConfig(BaseModel):
    enabled: bool
    points_per_visit: int
    silver_threshold: int
    gold_threshold: int
    platinum_threshold: int
    spend_brackets: List["SpendBracket"] = []

    class Config:
        from_attributes = True


# Spend brackets — bonus points by amount spent in one visit
class SpendBracketIn(BaseModel):
    min_spent: Decimal = Field(ge=0)
    max_spent: Optional[Decimal] = None
    points: int = Field(ge=0)

    @model_validator(mode="after")
    def check_range(self):
        if self.max_spent is not None and self.max_spent < self.min_spent:
            raise ValueError("max_spent must not be below min_spent")
        return self


class SpendBracket(SpendBracketIn):
    id: UUID4

    class Config:
        from_attributes = True


class SpendBracketsReplace(BaseModel):
    brackets: List[SpendBracketIn]


# Members
class LoyaltyMember(BaseModel):
    id: UUID4
    whatsapp_number: str
    customer_name: str
    points: int
    lifetime_points: int
    tier: str
    total_visits: int
    total_spent: Decimal
    last_visit_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AccrualResult(BaseModel):
    member_id: UUID4
    points_earned: int
    visit_points: int
    spend_points: int
    points: int
    lifetime_points: int
    tier: str
    previous_tier: str

    @property
    def tier_changed(self) -> bool:
        return self.tier != self.previous_tier


# Rewards
class LoyaltyRewardCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    points_cost: int = Field(gt=0)
    is_active: bool = True


class LoyaltyRewardUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    points_cost: Optional[int] = Field(None, gt=0)
    is_active: Optional[bool] = None


class LoyaltyReward(BaseModel):
    id: UUID4
    name: str
    description: Optional[str] = None
    points_cost: int
    is_active: bool

    class Config:
        from_attributes = True


class RedeemRequest(BaseModel):
    reward_id: UUID4


class LoyaltyRedemption(BaseModel):
    id: UUID4
    member_id: UUID4
    reward_id: UUID4
    points_spent: int
    redeemed_at: datetime
    remaining_points: int


LoyaltyConfig.model_rebuild()
