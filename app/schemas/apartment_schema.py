from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from enums.apartment_status import ApartmentStatus
from enums.apartment_type import ApartmentType
from .building_schema import BuildingMinimumResponse


class ApartmentBase(BaseModel):
    building_id: int
    number: str
    type: ApartmentType
    floor: int
    size: float = Field(gt=0)
    base_rent: float = Field(gt=0)
    description: Optional[str] = None


class ApartmentCreate(ApartmentBase):
    pass


class ApartmentUpdate(BaseModel):
    number: Optional[str] = None
    type: Optional[ApartmentType] = None
    floor: Optional[int] = None
    size: Optional[float] = Field(default=None, gt=0)
    base_rent: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = None


class ApartmentMinimumResponse(BaseModel):
    id: int
    apartment_code: Optional[str] = None
    number: str
    type: ApartmentType
    status: ApartmentStatus
    building: Optional[BuildingMinimumResponse] = None

    model_config = ConfigDict(from_attributes=True)


class ApartmentResponse(ApartmentMinimumResponse):
    floor: int
    size: float
    base_rent: float
    description: Optional[str] = None
    photos: List[str] = []
    created_at: Optional[datetime] = None
