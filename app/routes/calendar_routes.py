from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from schemas.calendar_schema import CalendarEvent
from services import calendar_service
from services.tenant_service import TenantService
from utils.clock import Clock, get_clock
from utils.dependencies import owner_required, tenant_required
from responses.success import data_response

router = APIRouter(prefix="/calendar", tags=["Calendar"])

tenant_service = TenantService()


@router.get("/owner")
def owner_calendar(
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    events = calendar_service.owner_events(db, current_user, start, end, clock)
    return data_response([CalendarEvent(**event) for event in events])


@router.get("/tenant")
def tenant_calendar(
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(tenant_required),
    clock: Clock = Depends(get_clock),
):
    tenant = tenant_service.get_tenant_for_user(db, current_user.id, clock)
    events = calendar_service.tenant_events(db, current_user, tenant, start, end, clock)
    return data_response([CalendarEvent(**event) for event in events])
