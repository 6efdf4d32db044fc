from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gamecenter.core.errors import NotFoundError
from gamecenter.db.session import get_db
from gamecenter.models.food import FoodItem
from gamecenter.schemas.common import MessageResponse
from gamecenter.schemas.food import FoodItem as FoodItemSchema, FoodItemCreate, FoodItemUpdate

router = APIRouter(prefix="/admin/food-items", tags=["Admin - Food"])


def _get_item(db: Session, item_id: UUID) -> FoodItem:
    item = db.query(FoodItem).filter(FoodItem.id == item_id).first()
    if not item:
        raise NotFoundError("Food item not found")
    return item


@router.get("/", response_model=List[FoodItemSchema])
def list_food_items(
    category: Optional[str] = Query(None, description="snacks, drinks, meals, ..."),
    db: Session = Depends(get_db),
):
    query = db.query(FoodItem)
    if category:
        query = query.filter(FoodItem.category == category)
    return query.order_by(FoodItem.category, FoodItem.name).all()


@router.post("/", response_model=FoodItemSchema, status_code=status.HTTP_201_CREATED)
def create_food_item(data: FoodItemCreate, db: Session = Depends(get_db)):
    item = FoodItem(**data.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@router.patch("/{item_id}", response_model=FoodItemSchema)
def update_food_item(item_id: UUID, data: FoodItemUpdate, db: Session = Depends(get_db)):
    item = _get_item(db, item_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(item, field, value)
    db.commit()
    db.refresh(item)
    return item


@router.delete("/{item_id}", response_model=MessageResponse)
def delete_food_item(item_id: UUID, db: Session = Depends(get_db)):
    # Orders already on bookings keep their own name/price copy
    item = _get_item(db, item_id)
    db.delete(item)
    db.commit()
    return MessageResponse(message="Food item deleted")
