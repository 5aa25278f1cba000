import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from database.models import Tenant
from schemas.review_schema import ReviewCreate, ReviewResponse, ReviewUpdate
from services.review_service import ReviewService
from utils.clock import Clock, get_clock
from utils.dependencies import get_current_tenant
from utils.errors import ServiceError
from responses.success import data_response, success_response
from responses.error import internal_server_error, service_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])

review_service = ReviewService()


def serialize(review) -> dict:
    return ReviewResponse.model_validate(review).model_dump(mode="json")


@router.get("/")
def list_reviews(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """Public review wall, newest first"""
    reviews = review_service.get_all_public(db, skip, limit)
    return data_response([serialize(r) for r in reviews])


@router.get("/mine")
def my_reviews(tenant: Tenant = Depends(get_current_tenant), db: Session = Depends(get_db)):
    reviews = review_service.get_for_tenant(db, tenant.id)
    return data_response([serialize(r) for r in reviews])


@router.post("/")
def submit_review(
    review: ReviewCreate,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    try:
        saved = review_service.submit(db, review, tenant, clock)
        return success_response("Review saved.", serialize(saved))
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.exception("Failed to save review")
        return internal_server_error(str(e))


@router.patch("/{review_id}")
def edit_review(
    review_id: int,
    review: ReviewUpdate,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    try:
        saved = review_service.edit(db, review_id, review, tenant)
        return success_response("Review updated.", serialize(saved))
    except ServiceError as e:
        return service_error_response(e)


@router.delete("/{review_id}")
def delete_review(
    review_id: int,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    try:
        review_service.remove(db, review_id, tenant)
        return success_response("Review deleted.")
    except ServiceError as e:
        return service_error_response(e)
