import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from enums.visit_status import VisitStatus
from schemas.tenant_schema import ConversionDefaults, TenantConversionCreate, tenant_response
from schemas.visit_request_schema import (
    RejectVisitRequest,
    SuggestTimeRequest,
    VisitRequestCreate,
    VisitRequestResponse,
)
from services.storage_service import FileStorage, get_storage
from services.visit_request_service import VisitRequestService
from utils.clock import Clock, get_clock
from utils.dependencies import get_current_user, owner_required
from utils.errors import ServiceError
from utils.uploads import read_upload
from responses.success import created_response, data_response, success_response
from responses.error import internal_server_error, service_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/visit_requests", tags=["Visit Requests"])

visit_request_service = VisitRequestService()


def serialize(visit) -> dict:
    return VisitRequestResponse.model_validate(visit).model_dump(mode="json")


@router.post("/")
def request_visit(
    visit: VisitRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    try:
        created = visit_request_service.create_visit_request(db, visit, current_user, clock)
        return created_response(serialize(created), "Visit request submitted.")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to create visit request")
        return internal_server_error(str(e))


@router.get("/mine")
def my_visit_requests(
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    visits = visit_request_service.get_for_user(db, current_user.id)
    return data_response([serialize(v) for v in visits])


@router.get("/")
def list_visit_requests(
    status: Optional[VisitStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    visits = visit_request_service.get_for_owner(db, current_user.id, status)
    return data_response([serialize(v) for v in visits])


@router.post("/{visit_id}/approve")
def approve_visit(
    visit_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    try:
        visit = visit_request_service.approve(db, visit_id, current_user, clock)
        return success_response("Visit request approved.", serialize(visit))
    except ServiceError as e:
        return service_error_response(e)


@router.post("/{visit_id}/suggest")
def suggest_visit_time(
    visit_id: int,
    suggestion: SuggestTimeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    try:
        visit = visit_request_service.suggest_new_time(
            db,
            visit_id,
            suggestion.suggested_date,
            suggestion.suggested_time,
            current_user,
            clock,
        )
        return success_response("New time suggested.", serialize(visit))
    except ServiceError as e:
        return service_error_response(e)


@router.post("/{visit_id}/visited")
def mark_visited(
    visit_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    try:
        visit = visit_request_service.mark_visited(db, visit_id, current_user, clock)
        return success_response("Visit marked as visited.", serialize(visit))
    except ServiceError as e:
        return service_error_response(e)


@router.post("/{visit_id}/reject")
def reject_visit(
    visit_id: int,
    rejection: RejectVisitRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    try:
        visit = visit_request_service.reject(db, visit_id, current_user, rejection.reason, clock)
        return success_response("Visit request rejected.", serialize(visit))
    except ServiceError as e:
        return service_error_response(e)


@router.get("/{visit_id}/conversion")
def conversion_form(
    visit_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    """Defaults for converting a visited request into a tenancy"""
    try:
        defaults = visit_request_service.conversion_defaults(db, visit_id, current_user, clock)
        return data_response(ConversionDefaults.model_validate(defaults, from_attributes=True).model_dump(mode="json"))
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to load conversion defaults for visit request %s", visit_id)
        return internal_server_error(str(e))


@router.post("/{visit_id}/convert")
async def convert_to_tenant(
    visit_id: int,
    contract_start: date = Form(...),
    rent_plan_months: int = Form(12, ge=1),
    monthly_rent: Optional[float] = Form(None, gt=0),
    apartment_id: Optional[int] = Form(None),
    cnic: Optional[str] = Form(None),
    permanent_address: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    agreement: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    storage: FileStorage = Depends(get_storage),
    clock: Clock = Depends(get_clock),
):
    try:
        tenant_in = TenantConversionCreate(
            contract_start=contract_start,
            rent_plan_months=rent_plan_months,
            monthly_rent=monthly_rent,
            apartment_id=apartment_id,
            cnic=cnic,
            permanent_address=permanent_address,
            notes=notes,
        )
        tenant = visit_request_service.convert_to_tenant(
            db,
            visit_id,
            tenant_in,
            current_user,
            storage,
            agreement=await read_upload(agreement),
            clock=clock,
        )
        return created_response(
            tenant_response(tenant, clock.today()), "Tenant created successfully."
        )
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to convert visit request %s", visit_id)
        return internal_server_error(str(e))
