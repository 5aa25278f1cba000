import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from database.models import Tenant
from database.models.user_model import User
from enums.venue_booking_status import VenueBookingStatus
from schemas.venue_booking_schema import (
    VenueApprovalResponse,
    VenueBookingApprove,
    VenueBookingCreate,
    VenueBookingReject,
    VenueBookingResponse,
)
from services.venue_booking_service import VenueBookingService
from utils.clock import Clock, get_clock
from utils.dependencies import get_current_tenant, owner_required
from utils.errors import ServiceError
from responses.success import created_response, data_response, success_response
from responses.error import internal_server_error, service_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/venue_bookings", tags=["Venue Bookings"])

venue_booking_service = VenueBookingService()


def serialize(booking) -> dict:
    return VenueBookingResponse.model_validate(booking).model_dump(mode="json")


@router.post("/")
def book_venue(
    booking: VenueBookingCreate,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    try:
        created = venue_booking_service.book_venue(db, booking, tenant, clock)
        return created_response(serialize(created), "Booking request submitted.")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to book venue")
        return internal_server_error(str(e))


@router.get("/mine")
def my_bookings(
    tenant: Tenant = Depends(get_current_tenant), db: Session = Depends(get_db)
):
    bookings = venue_booking_service.get_for_tenant(db, tenant.id)
    return data_response([serialize(b) for b in bookings])


@router.get("/")
def list_bookings(
    status: Optional[VenueBookingStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    bookings = venue_booking_service.get_for_owner(db, current_user.id, status)
    return data_response([serialize(b) for b in bookings])


@router.post("/{booking_id}/approve")
def approve_booking(
    booking_id: int,
    approval: VenueBookingApprove,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    try:
        booking, notice = venue_booking_service.approve_booking(
            db,
            booking_id,
            current_user,
            cleaning_scheduled=approval.cleaning_scheduled,
            admin_notes=approval.admin_notes,
        )
        response = VenueApprovalResponse(
            booking=VenueBookingResponse.model_validate(booking), notice=notice
        )
        return success_response("Booking approved.", response.model_dump(mode="json"))
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to approve booking %s", booking_id)
        return internal_server_error(str(e))


@router.post("/{booking_id}/reject")
def reject_booking(
    booking_id: int,
    rejection: VenueBookingReject,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    try:
        booking = venue_booking_service.reject_booking(
            db, booking_id, current_user, rejection.admin_notes
        )
        return success_response("Booking rejected.", serialize(booking))
    except ServiceError as e:
        return service_error_response(e)
