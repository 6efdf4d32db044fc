from typing import Optional
from pydantic import BaseModel, UUID4, Field
from decimal import Decimal


class FoodItemBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    price: Decimal = Field(gt=0)
    category: Optional[str] = None
    current_stock: Optional[int] = Field(None, ge=0)  # omit to leave stock untracked


class FoodItemCreate(FoodItemBase):
    pass


class FoodItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(None, gt=0)
    category: Optional[str] = None
    current_stock: Optional[int] = Field(None, ge=0)


class FoodItem(FoodItemBase):
    id: UUID4

    class Config:
        from_attributes = True
