from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from .apartment_schema import ApartmentMinimumResponse


class ReviewCreate(BaseModel):
    title: str
    comment: str
    rating: int = Field(ge=1, le=5)


class ReviewUpdate(BaseModel):
    title: Optional[str] = None
    comment: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)


class ReviewResponse(BaseModel):
    id: int
    tenant_id: int
    reviewer_name: Optional[str] = None
    apartment: Optional[ApartmentMinimumResponse] = None
    title: str
    comment: str
    rating: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
