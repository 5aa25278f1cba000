from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class BuildingBase(BaseModel):
    name: str
    address: str
    city: str
    description: Optional[str] = None


class BuildingCreate(BuildingBase):
    pass


class BuildingUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    description: Optional[str] = None


class BuildingMinimumResponse(BaseModel):
    id: int
    name: str
    city: str
    address: str

    model_config = ConfigDict(from_attributes=True)


class BuildingResponse(BuildingMinimumResponse):
    description: Optional[str] = None
    owner_id: int
    apartment_count: int = 0
    created_at: Optional[datetime] = None
