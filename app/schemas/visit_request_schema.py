from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date, datetime, time
from enums.visit_status import VisitStatus
from .auth_schema import UserMinimumResponse
from .apartment_schema import ApartmentMinimumResponse


class VisitRequestCreate(BaseModel):
    apartment_id: int
    requested_date: date
    requested_time: time
    notes: Optional[str] = None


class SuggestTimeRequest(BaseModel):
    suggested_date: date
    suggested_time: time


class RejectVisitRequest(BaseModel):
    reason: Optional[str] = None


class VisitRequestResponse(BaseModel):
    id: int
    user: Optional[UserMinimumResponse] = None
    apartment: Optional[ApartmentMinimumResponse] = None
    requested_date: date
    requested_time: time
    suggested_date: Optional[date] = None
    suggested_time: Optional[time] = None
    status: VisitStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
