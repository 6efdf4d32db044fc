from typing import Optional, List, Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


# Paginated response wrapper — used by the larger list endpoints
class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


# Error responses — body of every 4xx/5xx raised by the service layer
class ErrorResponse(BaseModel):
    error: str
    message: str


class MessageResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
