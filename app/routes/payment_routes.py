import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from database.init import get_db
from database.models import Tenant
from database.models.user_model import User
from enums.payment_status import PaymentStatus
from enums.payment_type import PaymentType
from schemas.payment_schema import PaymentCreate, PaymentFilter, PaymentResponse, PaymentSubmit
from services.payment_service import PaymentService
from services.storage_service import FileStorage, get_storage
from utils.clock import Clock, get_clock
from utils.dependencies import get_current_tenant, owner_required
from utils.errors import ServiceError
from utils.uploads import read_upload
from responses.success import created_response, data_response, success_response
from responses.error import internal_server_error, service_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])

payment_service = PaymentService()

MONTH_PATTERN = r"^\d{4}-\d{2}$"


def serialize(payment) -> dict:
    return PaymentResponse.model_validate(payment).model_dump(mode="json")


def build_filter(
    apartment_id: Optional[int] = None,
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="YYYY-MM"),
    type: Optional[PaymentType] = None,
    status: Optional[PaymentStatus] = None,
) -> PaymentFilter:
    billing_month = None
    if month:
        year, month_number = month.split("-")
        billing_month = date(int(year), int(month_number), 1)
    return PaymentFilter(
        apartment_id=apartment_id, month=billing_month, type=type, status=status
    )


@router.post("/")
async def create_bill(
    tenant_id: int = Form(...),
    bill_date: date = Form(...),
    due_date: date = Form(...),
    month: date = Form(...),
    type: PaymentType = Form(PaymentType.RENT),
    amount: float = Form(..., gt=0),
    challan: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    storage: FileStorage = Depends(get_storage),
    clock: Clock = Depends(get_clock),
):
    try:
        payment_in = PaymentCreate(
            tenant_id=tenant_id,
            bill_date=bill_date,
            due_date=due_date,
            month=month,
            type=type,
            amount=amount,
        )
        payment = payment_service.create_bill(
            db, payment_in, current_user, storage, await read_upload(challan), clock
        )
        return created_response(serialize(payment), "Bill generated successfully.")
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to generate bill")
        return internal_server_error(str(e))


@router.get("/")
def list_payments(
    filters: PaymentFilter = Depends(build_filter),
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    payments = payment_service.get_for_owner(db, current_user.id, filters)
    return data_response([serialize(p) for p in payments])


@router.get("/mine")
def my_payments(
    filters: PaymentFilter = Depends(build_filter),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    payments = payment_service.get_for_tenant(db, tenant.id, filters)
    return data_response([serialize(p) for p in payments])


@router.post("/{payment_id}/submit")
async def submit_payment(
    payment_id: int,
    payment_method: str = Form(...),
    transaction_id: str = Form(...),
    receipt: Optional[UploadFile] = File(None),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
):
    try:
        submission = PaymentSubmit(payment_method=payment_method, transaction_id=transaction_id)
        payment = payment_service.submit_payment(
            db, payment_id, tenant, submission, storage, await read_upload(receipt)
        )
        return success_response("Payment submitted for verification.", serialize(payment))
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to submit payment %s", payment_id)
        return internal_server_error(str(e))


@router.post("/{payment_id}/verify")
def verify_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
    clock: Clock = Depends(get_clock),
):
    try:
        payment = payment_service.verify(db, payment_id, current_user, clock)
        return success_response("Payment marked as paid.", serialize(payment))
    except ServiceError as e:
        return service_error_response(e)


@router.post("/{payment_id}/unverify")
def unverify_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    try:
        payment = payment_service.unverify(db, payment_id, current_user)
        return success_response("Payment marked as unpaid.", serialize(payment))
    except ServiceError as e:
        return service_error_response(e)
