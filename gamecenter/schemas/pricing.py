from typing import Optional, List, Literal
from pydantic import BaseModel, UUID4, Field
from decimal import Decimal
from datetime import time


# Price row — one (duration, person_count) -> price entry inside a category table
class PriceRowIn(BaseModel):
    duration: str = Field(min_length=1, max_length=50)
    person_count: int = 1
    price: Decimal


# Replace a whole category table (POST /admin/pricing, /admin/happy-hours/pricing)
class PriceTableReplace(BaseModel):
    category: str = Field(min_length=1, max_length=50)
    configs: List[PriceRowIn]


class PriceRow(BaseModel):
    id: UUID4
    category: str
    duration: str
    person_count: int
    price: Decimal

    class Config:
        from_attributes = True


# Happy hours windows
class HappyHoursWindowIn(BaseModel):
    start_time: time
    end_time: time
    enabled: bool = True


class HappyHoursWindowsReplace(BaseModel):
    category: str = Field(min_length=1, max_length=50)
    windows: List[HappyHoursWindowIn]


class HappyHoursWindow(BaseModel):
    id: UUID4
    category: str
    start_time: time
    end_time: time
    enabled: bool

    class Config:
        from_attributes = True


class HappyHoursStatus(BaseModel):
    category: str
    active: bool
    window: Optional[HappyHoursWindow] = None


# Output of the pricing resolver
class ResolvedPrice(BaseModel):
    category: str
    duration: str
    person_count: int
    price: Decimal
    source: Literal["regular", "happy_hours"]
    window_start: Optional[time] = None
    window_end: Optional[time] = None
