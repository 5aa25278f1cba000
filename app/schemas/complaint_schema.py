from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date, datetime
from enums.complaint_status import ComplaintStatus


class ComplaintCreate(BaseModel):
    title: str
    description: str
    complaint_date: Optional[date] = None


class ComplaintUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    complaint_date: Optional[date] = None


class ComplaintStatusUpdate(BaseModel):
    status: ComplaintStatus
    admin_response: Optional[str] = None


class ComplaintResponse(BaseModel):
    id: int
    tenant_id: int
    title: str
    description: str
    complaint_date: date
    image_path: Optional[str] = None
    status: ComplaintStatus
    admin_response: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
