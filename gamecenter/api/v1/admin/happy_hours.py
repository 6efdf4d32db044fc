from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gamecenter.api.deps import get_clock
from gamecenter.core.clock import Clock
from gamecenter.core.errors import NotFoundError
from gamecenter.db.session import get_db
from gamecenter.models.pricing import HappyHoursConfig, HappyHoursPricing
from gamecenter.schemas.common import MessageResponse
from gamecenter.schemas.pricing import (
    HappyHoursStatus,
    HappyHoursWindow,
    HappyHoursWindowsReplace,
    PriceRow,
    PriceTableReplace,
)
from gamecenter.services import pricing as pricing_service

router = APIRouter(prefix="/admin/happy-hours", tags=["Admin - Happy Hours"])


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------


@router.get("/", response_model=List[HappyHoursWindow])
def list_windows(
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    query = db.query(HappyHoursConfig)
    if category:
        query = query.filter(HappyHoursConfig.category == category)
    return query.order_by(HappyHoursConfig.category, HappyHoursConfig.start_time).all()


@router.put("/", response_model=List[HappyHoursWindow])
def replace_windows(data: HappyHoursWindowsReplace, db: Session = Depends(get_db)):
    """Replace every window of a category. A window ending before it starts runs past midnight."""
    return pricing_service.replace_happy_hours_windows(db, data.category, data.windows)


@router.get("/active", response_model=HappyHoursStatus)
def happy_hours_status(
    category: str = Query(...),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    window = pricing_service.active_happy_hours_window(db, category, clock.now())
    return HappyHoursStatus(
        category=category,
        active=window is not None,
        window=HappyHoursWindow.model_validate(window) if window else None,
    )


# ---------------------------------------------------------------------------
# Happy-hours price table
# ---------------------------------------------------------------------------


@router.get("/pricing", response_model=List[PriceRow])
def list_happy_hours_pricing(
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    query = db.query(HappyHoursPricing)
    if category:
        query = query.filter(HappyHoursPricing.category == category)
    return query.order_by(
        HappyHoursPricing.category, HappyHoursPricing.person_count, HappyHoursPricing.price
    ).all()


@router.put("/pricing", response_model=List[PriceRow])
def replace_happy_hours_pricing(data: PriceTableReplace, db: Session = Depends(get_db)):
    return pricing_service.replace_happy_hours_pricing(db, data.category, data.configs)


@router.delete("/pricing/{category}", response_model=MessageResponse)
def delete_happy_hours_pricing(category: str, db: Session = Depends(get_db)):
    count = (
        db.query(HappyHoursPricing)
        .filter(HappyHoursPricing.category == category)
        .delete(synchronize_session="fetch")
    )
    if not count:
        raise NotFoundError(f"No happy-hours pricing configured for category '{category}'")
    db.commit()
    return MessageResponse(message=f"Removed {count} happy-hours price row(s) for {category}")


@router.delete("/{category}", response_model=MessageResponse)
def delete_windows(category: str, db: Session = Depends(get_db)):
    count = (
        db.query(HappyHoursConfig)
        .filter(HappyHoursConfig.category == category)
        .delete(synchronize_session="fetch")
    )
    if not count:
        raise NotFoundError(f"No happy-hours windows configured for category '{category}'")
    db.commit()
    return MessageResponse(message=f"Removed {count} window(s) for {category}")
