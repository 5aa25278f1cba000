import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.init import get_db
from database.models import Tenant
from database.models.user_model import User
from enums.apartment_type import ApartmentType
from schemas.complaint_schema import ComplaintResponse
from schemas.payment_schema import PaymentResponse
from schemas.tenant_schema import ActiveTenantLookup, TenantUpdate, tenant_response
from schemas.venue_booking_schema import VenueBookingResponse
from services.tenant_service import TenantService
from utils.clock import Clock, get_clock
from utils.dependencies import get_current_tenant, owner_required
from utils.errors import ServiceError
from responses.success import data_response, success_response
from responses.error import internal_server_error, not_found_error, service_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["Tenants"])

tenant_service = TenantService()


@router.get("/")
def list_tenants(
    status: Optional[str] = Query(None, pattern="^(active|expired)$"),
    apartment_type: Optional[ApartmentType] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    try:
        tenants = tenant_service.list_tenants(
            db, current_user.id, status, apartment_type, clock
        )
        today = clock.today()
        return data_response([tenant_response(t, today) for t in tenants])
    except ServiceError as e:
        return service_error_response(e)


@router.get("/me/dashboard")
def tenant_dashboard(
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Recent bills, complaints and upcoming venue bookings of the signed-in tenant"""
    summary = tenant_service.dashboard(db, tenant, clock)
    return data_response(
        {
            "tenant": tenant_response(summary["tenant"], clock.today()),
            "payments": [
                PaymentResponse.model_validate(p).model_dump(mode="json")
                for p in summary["payments"]
            ],
            "complaints": [
                ComplaintResponse.model_validate(c).model_dump(mode="json")
                for c in summary["complaints"]
            ],
            "upcoming_venue_bookings": [
                VenueBookingResponse.model_validate(b).model_dump(mode="json")
                for b in summary["upcoming_venue_bookings"]
            ],
        }
    )


@router.get("/by_apartment/{apartment_id}")
def active_tenant_for_apartment(
    apartment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    """Lookup used by the bill form to find who currently rents an apartment"""
    tenant = tenant_service.get_active_tenant_for_apartment(db, apartment_id, clock)
    if tenant is None or tenant.apartment.building.owner_id != current_user.id:
        return not_found_error("No active tenant found for this apartment.")
    lookup = ActiveTenantLookup(
        tenant_id=tenant.id, tenant_name=tenant.user.name if tenant.user else ""
    )
    return data_response(lookup.model_dump(mode="json"))


@router.get("/{tenant_id}")
def get_tenant(
    tenant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    try:
        tenant = tenant_service.get_owned(db, tenant_id, current_user)
        return data_response(tenant_response(tenant, clock.today()))
    except ServiceError as e:
        return service_error_response(e)


@router.patch("/{tenant_id}")
def update_tenant(
    tenant_id: int,
    tenant_in: TenantUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    try:
        tenant = tenant_service.update_tenant(db, tenant_id, tenant_in, current_user)
        return success_response(
            "Tenant updated successfully.", tenant_response(tenant, clock.today())
        )
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to update tenant %s", tenant_id)
        return internal_server_error(str(e))


@router.delete("/{tenant_id}")
def terminate_tenancy(
    tenant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    """Ends the tenancy; its bills, complaints and bookings are kept"""
    try:
        tenant = tenant_service.terminate_tenancy(db, tenant_id, current_user, clock)
        return success_response(
            "Tenancy terminated.", tenant_response(tenant, clock.today())
        )
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to terminate tenancy %s", tenant_id)
        return internal_server_error(str(e))
