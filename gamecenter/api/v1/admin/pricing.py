from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gamecenter.api.deps import get_clock
from gamecenter.core.clock import Clock, to_local_naive
from gamecenter.core.errors import NotFoundError
from gamecenter.db.session import get_db
from gamecenter.models.pricing import PricingConfig
from gamecenter.schemas.common import MessageResponse
from gamecenter.schemas.pricing import PriceRow, PriceTableReplace, ResolvedPrice
from gamecenter.services import pricing as pricing_service

router = APIRouter(prefix="/admin/pricing", tags=["Admin - Pricing"])


@router.get("/", response_model=List[PriceRow])
def list_pricing(
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    query = db.query(PricingConfig)
    if category:
        query = query.filter(PricingConfig.category == category)
    return query.order_by(PricingConfig.category, PricingConfig.person_count, PricingConfig.price).all()


@router.post("/", response_model=List[PriceRow])
def replace_pricing(data: PriceTableReplace, db: Session = Depends(get_db)):
    """
    Replace the whole regular price table of a category. Rows are unique per
    (duration, person_count); person_count > 1 only for multi-person categories.
    """
    return pricing_service.replace_pricing(db, data.category, data.configs)


@router.get("/resolve", response_model=ResolvedPrice)
def resolve_price(
    category: str = Query(...),
    duration: str = Query(..., description='Duration label, e.g. "1 hour"'),
    person_count: int = Query(1, ge=1),
    at: Optional[datetime] = Query(None, description="Defaults to now"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Price a session key without booking it. Reports whether happy hours applied."""
    pricing_service.validate_person_count(category, person_count)
    when = to_local_naive(at) if at else clock.now()
    return pricing_service.resolve_price(db, category, duration, person_count, at=when)


@router.delete("/{category}", response_model=MessageResponse)
def delete_pricing(category: str, db: Session = Depends(get_db)):
    count = (
        db.query(PricingConfig)
        .filter(PricingConfig.category == category)
        .delete(synchronize_session="fetch")
    )
    if not count:
        raise NotFoundError(f"No pricing configured for category '{category}'")
    db.commit()
    return MessageResponse(message=f"Removed {count} price row(s) for {category}")
