from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date, datetime, time
from enums.venue_booking_status import VenueBookingStatus
from enums.venue_type import VenueType


class VenueBookingCreate(BaseModel):
    venue_type: VenueType
    booking_date: date
    booking_time: time
    end_time: Optional[time] = None
    purpose: Optional[str] = None


class VenueBookingApprove(BaseModel):
    cleaning_scheduled: bool = False
    admin_notes: Optional[str] = None


class VenueBookingReject(BaseModel):
    admin_notes: Optional[str] = None


class VenueBookingResponse(BaseModel):
    id: int
    tenant_id: int
    venue_type: VenueType
    booking_date: date
    booking_time: time
    end_time: Optional[time] = None
    purpose: Optional[str] = None
    status: VenueBookingStatus
    cleaning_scheduled: bool
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VenueApprovalResponse(BaseModel):
    booking: VenueBookingResponse
    notice: str
