from typing import List
from pydantic import BaseModel, UUID4, Field, model_validator


class DeviceConfigUpsert(BaseModel):
    category: str = Field(min_length=1, max_length=50)
    count: int = Field(ge=0)
    seats: List[str] = []

    @model_validator(mode="after")
    def default_seat_names(self):
        # "PC" with count 3 and no names -> PC-1, PC-2, PC-3
        if not self.seats:
            self.seats = [f"{self.category}-{i}" for i in range(1, self.count + 1)]
        elif len(self.seats) != self.count:
            raise ValueError("count must match the number of seat names")
        if len(set(self.seats)) != len(self.seats):
            raise ValueError("seat names must be unique")
        return self


class DeviceConfig(BaseModel):
    id: UUID4
    category: str
    count: int
    seats: List[str]

    class Config:
        from_attributes = True
