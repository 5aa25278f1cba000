import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from database.init import get_db
from database.models import Tenant
from database.models.user_model import User
from schemas.complaint_schema import (
    ComplaintCreate,
    ComplaintResponse,
    ComplaintStatusUpdate,
    ComplaintUpdate,
)
from services.complaint_service import ComplaintService
from services.storage_service import FileStorage, get_storage
from utils.clock import Clock, get_clock
from utils.dependencies import get_current_tenant, owner_required
from utils.errors import ServiceError
from utils.uploads import read_upload
from responses.success import created_response, data_response, success_response
from responses.error import internal_server_error, service_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/complaints", tags=["Complaints"])

complaint_service = ComplaintService()


def serialize(complaint) -> dict:
    return ComplaintResponse.model_validate(complaint).model_dump(mode="json")


@router.post("/")
async def submit_complaint(
    title: str = Form(...),
    description: str = Form(...),
    complaint_date: Optional[date] = Form(None),
    image: Optional[UploadFile] = File(None),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    clock: Clock = Depends(get_clock),
):
    try:
        complaint_in = ComplaintCreate(
            title=title, description=description, complaint_date=complaint_date
        )
        complaint = complaint_service.submit(
            db, complaint_in, tenant, storage, await read_upload(image), clock
        )
        return created_response(serialize(complaint), "Complaint submitted.")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to submit complaint")
        return internal_server_error(str(e))


@router.get("/mine")
def my_complaints(
    tenant: Tenant = Depends(get_current_tenant), db: Session = Depends(get_db)
):
    complaints = complaint_service.get_for_tenant(db, tenant.id)
    return data_response([serialize(c) for c in complaints])


@router.patch("/{complaint_id}")
async def edit_complaint(
    complaint_id: int,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    complaint_date: Optional[date] = Form(None),
    image: Optional[UploadFile] = File(None),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
):
    try:
        complaint_in = ComplaintUpdate(
            title=title, description=description, complaint_date=complaint_date
        )
        complaint = complaint_service.edit(
            db, complaint_id, complaint_in, tenant, storage, await read_upload(image)
        )
        return success_response("Complaint updated.", serialize(complaint))
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to update complaint %s", complaint_id)
        return internal_server_error(str(e))


@router.delete("/{complaint_id}")
def delete_complaint(
    complaint_id: int,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    try:
        complaint_service.remove(db, complaint_id, tenant)
        return success_response("Complaint deleted.")
    except ServiceError as e:
        return service_error_response(e)


@router.get("/")
def list_complaints(
    db: Session = Depends(get_db), current_user: User = Depends(owner_required)
):
    complaints = complaint_service.get_for_owner(db, current_user.id)
    return data_response([serialize(c) for c in complaints])


@router.patch("/{complaint_id}/status")
def update_complaint_status(
    complaint_id: int,
    update: ComplaintStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    try:
        complaint = complaint_service.update_status(db, complaint_id, update, current_user, clock)
        return success_response("Complaint status updated.", serialize(complaint))
    except ServiceError as e:
        return service_error_response(e)
