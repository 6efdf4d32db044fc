from typing import Annotated, Optional, Literal, Union
from pydantic import BaseModel, UUID4, Field, model_validator
from decimal import Decimal
from datetime import datetime


class _PromotionWindow(BaseModel):
    start_date: datetime
    end_date: datetime

    @model_validator(mode="after")
    def check_window(self):
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


# Discount promotion — Create / Update / Response
class DiscountPromotionCreate(_PromotionWindow):
    category: str = Field(min_length=1, max_length=50)
    duration: str = Field(min_length=1, max_length=50)
    person_count: int = 1
    discount_percentage: Decimal = Field(gt=0, le=100)
    enabled: bool = True


class DiscountPromotionUpdate(BaseModel):
    discount_percentage: Optional[Decimal] = Field(None, gt=0, le=100)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    enabled: Optional[bool] = None


class DiscountPromotion(BaseModel):
    id: UUID4
    category: str
    duration: str
    person_count: int
    discount_percentage: Decimal
    start_date: datetime
    end_date: datetime
    enabled: bool
    usage_count: int
    total_savings: Decimal

    class Config:
        from_attributes = True


# Bonus hours promotion — Create / Update / Response
class BonusHoursPromotionCreate(_PromotionWindow):
    category: str = Field(min_length=1, max_length=50)
    duration: str = Field(min_length=1, max_length=50)
    person_count: int = 1
    bonus_hours: Decimal = Field(gt=0, le=24)
    enabled: bool = True


class BonusHoursPromotionUpdate(BaseModel):
    bonus_hours: Optional[Decimal] = Field(None, gt=0, le=24)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    enabled: Optional[bool] = None


class BonusHoursPromotion(BaseModel):
    id: UUID4
    category: str
    duration: str
    person_count: int
    bonus_hours: Decimal
    start_date: datetime
    end_date: datetime
    enabled: bool
    usage_count: int
    total_hours_given: Decimal

    class Config:
        from_attributes = True


# What gets stamped on a booking when a promotion is redeemed
class DiscountPromotionDetails(BaseModel):
    kind: Literal["discount"] = "discount"
    promotion_id: UUID4
    discount_percentage: Decimal
    original_price: Decimal
    discount_amount: Decimal
    final_price: Decimal


class BonusHoursPromotionDetails(BaseModel):
    kind: Literal["bonus_hours"] = "bonus_hours"
    promotion_id: UUID4
    bonus_hours: Decimal
    bonus_minutes: int


PromotionDetails = Annotated[
    Union[DiscountPromotionDetails, BonusHoursPromotionDetails],
    Field(discriminator="kind"),
]


# GET /admin/promotions/active
class ActivePromotion(BaseModel):
    kind: Literal["discount", "bonus_hours"]
    discount: Optional[DiscountPromotion] = None
    bonus_hours: Optional[BonusHoursPromotion] = None
