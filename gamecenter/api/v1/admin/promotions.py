from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gamecenter.api.deps import get_clock
from gamecenter.core.clock import Clock
from gamecenter.db.session import get_db
from gamecenter.models.promotion import DiscountPromotion, BonusHoursPromotion
from gamecenter.schemas.common import MessageResponse
from gamecenter.schemas.promotion import (
    ActivePromotion,
    BonusHoursPromotion as BonusHoursPromotionSchema,
    BonusHoursPromotionCreate,
    BonusHoursPromotionUpdate,
    DiscountPromotion as DiscountPromotionSchema,
    DiscountPromotionCreate,
    DiscountPromotionUpdate,
)
from gamecenter.services import promotions as promotion_service

router = APIRouter(prefix="/admin/promotions", tags=["Admin - Promotions"])


@router.get("/active", response_model=ActivePromotion)
def get_active_promotion(
    category: str = Query(...),
    duration: str = Query(...),
    person_count: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    The promotion a booking for this key would get right now.
    404 when none is configured, 409 `promotion_unavailable` when one exists
    but is expired, not started or disabled.
    """
    promo = promotion_service.find_active_promotion(
        db, category, duration, person_count, clock.now(), strict=True
    )
    if isinstance(promo, DiscountPromotion):
        return ActivePromotion(kind="discount", discount=DiscountPromotionSchema.model_validate(promo))
    return ActivePromotion(kind="bonus_hours", bonus_hours=BonusHoursPromotionSchema.model_validate(promo))


# ---------------------------------------------------------------------------
# Discount promotions
# ---------------------------------------------------------------------------


@router.get("/discounts", response_model=List[DiscountPromotionSchema])
def list_discounts(category: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return promotion_service.list_promotions(db, DiscountPromotion, category)


@router.post("/discounts", response_model=DiscountPromotionSchema, status_code=status.HTTP_201_CREATED)
def create_discount(data: DiscountPromotionCreate, db: Session = Depends(get_db)):
    return promotion_service.create_discount(db, data)


@router.get("/discounts/{promo_id}", response_model=DiscountPromotionSchema)
def get_discount(promo_id: UUID, db: Session = Depends(get_db)):
    return promotion_service.get_promotion(db, DiscountPromotion, promo_id)


@router.patch("/discounts/{promo_id}", response_model=DiscountPromotionSchema)
def update_discount(promo_id: UUID, data: DiscountPromotionUpdate, db: Session = Depends(get_db)):
    return promotion_service.update_discount(db, promo_id, data)


@router.delete("/discounts/{promo_id}", response_model=MessageResponse)
def delete_discount(promo_id: UUID, db: Session = Depends(get_db)):
    promotion_service.delete_promotion(db, DiscountPromotion, promo_id)
    return MessageResponse(message="Discount promotion deleted")


# ---------------------------------------------------------------------------
# Bonus hours promotions
# ---------------------------------------------------------------------------


@router.get("/bonus-hours", response_model=List[BonusHoursPromotionSchema])
def list_bonus_hours(category: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return promotion_service.list_promotions(db, BonusHoursPromotion, category)


@router.post("/bonus-hours", response_model=BonusHoursPromotionSchema, status_code=status.HTTP_201_CREATED)
def create_bonus_hours(data: BonusHoursPromotionCreate, db: Session = Depends(get_db)):
    return promotion_service.create_bonus_hours(db, data)


@router.get("/bonus-hours/{promo_id}", response_model=BonusHoursPromotionSchema)
def get_bonus_hours(promo_id: UUID, db: Session = Depends(get_db)):
    return promotion_service.get_promotion(db, BonusHoursPromotion, promo_id)


@router.patch("/bonus-hours/{promo_id}", response_model=BonusHoursPromotionSchema)
def update_bonus_hours(promo_id: UUID, data: BonusHoursPromotionUpdate, db: Session = Depends(get_db)):
    return promotion_service.update_bonus_hours(db, promo_id, data)


@router.delete("/bonus-hours/{promo_id}", response_model=MessageResponse)
def delete_bonus_hours(promo_id: UUID, db: Session = Depends(get_db)):
    promotion_service.delete_promotion(db, BonusHoursPromotion, promo_id)
    return MessageResponse(message="Bonus hours promotion deleted")
