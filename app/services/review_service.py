from typing import List

from sqlalchemy.orm import Session, joinedload

from database.models import Apartment, Review, Tenant
from schemas.review_schema import ReviewCreate, ReviewUpdate
from services.base_service import BaseService
from utils.clock import Clock, system_clock
from utils.errors import NotFoundError, ValidationError


class ReviewService(BaseService):
    def __init__(self):
        super().__init__(Review)

    def get_all_public(self, db: Session, skip: int = 0, limit: int = 100) -> List[Review]:
        return (
            db.query(Review)
            .options(
                joinedload(Review.tenant).joinedload(Tenant.user),
                joinedload(Review.apartment).joinedload(Apartment.building),
            )
            .order_by(Review.created_at.desc(), Review.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_for_tenant(self, db: Session, tenant_id: int) -> List[Review]:
        return (
            db.query(Review)
            .filter(Review.tenant_id == tenant_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    def submit(
        self, db: Session, review_in: ReviewCreate, tenant: Tenant, clock: Clock = system_clock
    ) -> Review:
        """One review per tenancy apartment; submitting again edits the existing review"""
        if tenant.apartment is None:
            raise ValidationError("You are not assigned to an apartment.")

        review = (
            db.query(Review)
            .filter(Review.tenant_id == tenant.id, Review.apartment_id == tenant.apartment_id)
            .first()
        )
        if review is None:
            review = Review(
                tenant_id=tenant.id,
                apartment_id=tenant.apartment_id,
                created_at=clock.now(),
            )
            db.add(review)

        review.title = review_in.title
        review.comment = review_in.comment
        review.rating = review_in.rating
        db.commit()
        db.refresh(review)
        return review

    def _get_own(self, db: Session, review_id: int, tenant: Tenant) -> Review:
        review = (
            db.query(Review)
            .filter(Review.id == review_id, Review.tenant_id == tenant.id)
            .first()
        )
        if review is None:
            raise NotFoundError(f"Review with ID {review_id} not found.")
        return review

    def edit(self, db: Session, review_id: int, review_in: ReviewUpdate, tenant: Tenant) -> Review:
        review = self._get_own(db, review_id, tenant)
        for key, value in review_in.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(review, key, value)
        db.commit()
        db.refresh(review)
        return review

    def remove(self, db: Session, review_id: int, tenant: Tenant):
        review = self._get_own(db, review_id, tenant)
        db.delete(review)
        db.commit()
