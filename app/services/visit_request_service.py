import logging
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from database.models import Apartment, Building, Tenant, User, VisitRequest
from enums.apartment_status import ApartmentStatus
from enums.role_name import RoleName
from enums.visit_status import VisitStatus
from schemas.tenant_schema import TenantConversionCreate
from schemas.visit_request_schema import VisitRequestCreate
from services import role_service
from services.base_service import BaseService
from services.storage_service import FileStorage
from utils.clock import Clock, system_clock
from utils.errors import (
    AuthorizationDenied,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

OPEN_STATUSES = (VisitStatus.PENDING, VisitStatus.APPROVED, VisitStatus.RESCHEDULED)

# action -> (statuses the action is allowed from, resulting status)
TRANSITIONS = {
    "approve": ((VisitStatus.PENDING,), VisitStatus.APPROVED),
    "reschedule": ((VisitStatus.PENDING,), VisitStatus.RESCHEDULED),
    "mark as visited": (OPEN_STATUSES, VisitStatus.VISITED),
    "reject": (OPEN_STATUSES, VisitStatus.REJECTED),
    "convert": ((VisitStatus.VISITED,), VisitStatus.COMPLETED),
}

DEFAULT_RENT_PLAN_MONTHS = 12


def contract_end_for(contract_start, rent_plan_months: int):
    return contract_start + relativedelta(months=rent_plan_months)


class VisitRequestService(BaseService):
    def __init__(self):
        super().__init__(VisitRequest, label="Visit request")

    def create_visit_request(
        self,
        db: Session,
        request_in: VisitRequestCreate,
        user: User,
        clock: Clock = system_clock,
    ) -> VisitRequest:
        apartment = db.query(Apartment).filter(Apartment.id == request_in.apartment_id).first()
        if apartment is None:
            raise NotFoundError(f"Apartment with ID {request_in.apartment_id} not found.")
        if apartment.status != ApartmentStatus.AVAILABLE:
            raise ConflictError("This apartment is already rented.")
        if apartment.building and apartment.building.owner_id == user.id:
            raise AuthorizationDenied("Owners cannot request visits to their own apartments.")
        if request_in.requested_date < clock.today():
            raise ValidationError("Visit date cannot be in the past.", field="requested_date")

        existing = (
            db.query(VisitRequest)
            .filter(
                VisitRequest.user_id == user.id,
                VisitRequest.apartment_id == apartment.id,
                VisitRequest.status.in_(OPEN_STATUSES),
            )
            .first()
        )
        if existing:
            raise ConflictError("You already have an open visit request for this apartment.")

        visit = VisitRequest(
            **request_in.model_dump(),
            user_id=user.id,
            status=VisitStatus.PENDING,
            created_at=clock.now(),
        )
        db.add(visit)
        db.commit()
        db.refresh(visit)
        logger.info("User %s requested a visit to apartment %s", user.id, apartment.id)
        return visit

    def get_for_user(self, db: Session, user_id: int) -> List[VisitRequest]:
        return (
            db.query(VisitRequest)
            .filter(VisitRequest.user_id == user_id)
            .order_by(VisitRequest.created_at.desc(), VisitRequest.id.desc())
            .all()
        )

    def get_for_owner(
        self, db: Session, owner_id: int, status: Optional[VisitStatus] = None
    ) -> List[VisitRequest]:
        """Visit requests for apartments in buildings the owner manages, newest first"""
        query = (
            db.query(VisitRequest)
            .join(Apartment, VisitRequest.apartment_id == Apartment.id)
            .join(Building, Apartment.building_id == Building.id)
            .filter(Building.owner_id == owner_id)
        )
        if status:
            query = query.filter(VisitRequest.status == status)
        return query.order_by(VisitRequest.created_at.desc(), VisitRequest.id.desc()).all()

    def _ensure_owner(self, visit: VisitRequest, owner: User):
        building = visit.apartment.building if visit.apartment else None
        if building is None or building.owner_id != owner.id:
            raise AuthorizationDenied("Not authorized to manage this visit request.")

    def _transition(
        self, db: Session, visit: VisitRequest, action: str, clock: Clock
    ) -> VisitRequest:
        allowed, target = TRANSITIONS[action]
        if visit.status not in allowed:
            raise InvalidTransitionError("visit request", visit.status, action)
        visit.status = target
        visit.updated_at = clock.now()
        return visit

    def _apply(self, db: Session, visit_id: int, owner: User, action: str, clock: Clock, **fields):
        visit = self.get_or_404(db, visit_id)
        self._ensure_owner(visit, owner)
        self._transition(db, visit, action, clock)
        for key, value in fields.items():
            setattr(visit, key, value)
        db.commit()
        db.refresh(visit)
        logger.info("Visit request %s: %s -> %s", visit.id, action, visit.status)
        return visit

    def approve(self, db: Session, visit_id: int, owner: User, clock: Clock = system_clock):
        return self._apply(db, visit_id, owner, "approve", clock)

    def suggest_new_time(
        self, db: Session, visit_id: int, suggested_date, suggested_time, owner: User,
        clock: Clock = system_clock,
    ):
        if suggested_date < clock.today():
            raise ValidationError("Suggested date cannot be in the past.", field="suggested_date")
        return self._apply(
            db, visit_id, owner, "reschedule", clock,
            suggested_date=suggested_date, suggested_time=suggested_time,
        )

    def mark_visited(self, db: Session, visit_id: int, owner: User, clock: Clock = system_clock):
        return self._apply(db, visit_id, owner, "mark as visited", clock)

    def reject(
        self, db: Session, visit_id: int, owner: User, reason: Optional[str] = None,
        clock: Clock = system_clock,
    ):
        fields = {"notes": reason} if reason else {}
        return self._apply(db, visit_id, owner, "reject", clock, **fields)

    def _check_access(self, visit: VisitRequest, owner: User):
        if visit.apartment is not None and visit.apartment.building is not None:
            self._ensure_owner(visit, owner)
        if visit.user is None:
            raise ValidationError("The User associated with this request no longer exists.")
        if visit.apartment is None:
            raise ValidationError("The Apartment associated with this request no longer exists.")
        if visit.apartment.building is None:
            raise ValidationError("The Apartment is not assigned to a Building.")

    def _owner_apartments(self, db: Session, owner_id: int) -> List[Apartment]:
        return (
            db.query(Apartment)
            .join(Building)
            .filter(Building.owner_id == owner_id)
            .order_by(Building.name, Apartment.number)
            .all()
        )

    def conversion_defaults(
        self, db: Session, visit_id: int, owner: User, clock: Clock = system_clock
    ) -> dict:
        """Prefill values for the convert-to-tenant form"""
        visit = self.get_or_404(db, visit_id)
        self._check_access(visit, owner)

        start = clock.today()
        available = [
            apartment
            for apartment in self._owner_apartments(db, owner.id)
            if apartment.status == ApartmentStatus.AVAILABLE or apartment.id == visit.apartment_id
        ]
        return {
            "visit_request_id": visit.id,
            "user": visit.user,
            "apartment": visit.apartment,
            "contract_start": start,
            "contract_end": contract_end_for(start, DEFAULT_RENT_PLAN_MONTHS),
            "rent_plan_months": DEFAULT_RENT_PLAN_MONTHS,
            "monthly_rent": visit.apartment.base_rent,
            "available_apartments": available,
        }

    def _target_apartment(
        self, db: Session, visit: VisitRequest, apartment_id: Optional[int], owner: User
    ) -> Apartment:
        target_id = apartment_id or visit.apartment_id
        apartment = (
            db.query(Apartment)
            .filter(Apartment.id == target_id)
            .with_for_update()
            .first()
        )
        if apartment is None:
            raise ValidationError(
                "The Apartment associated with this request no longer exists.",
                field="apartment_id",
            )
        if apartment.building is None or apartment.building.owner_id != owner.id:
            raise AuthorizationDenied("Apartment not found or access denied.")
        if apartment.status == ApartmentStatus.RENTED:
            raise ConflictError(f"Apartment {apartment.number} is already rented.")
        return apartment

    def convert_to_tenant(
        self,
        db: Session,
        visit_id: int,
        tenant_in: TenantConversionCreate,
        owner: User,
        storage: FileStorage,
        agreement: Optional[Tuple[str, bytes]] = None,
        clock: Clock = system_clock,
    ) -> Tenant:
        """
        Turn a visited request into a tenancy.

        The tenant row, the apartment status, the user's Tenant role and the
        visit status are committed together. On any failure the session is
        rolled back and a stored agreement document is removed again.

        Raises:
            NotFoundError: If the visit request does not exist
            ValidationError: If the visit's user, apartment or building is gone
            InvalidTransitionError: If the visit is not in Visited status
            ConflictError: If the apartment is already rented
        """
        visit = self.get_or_404(db, visit_id)
        self._check_access(visit, owner)
        if visit.status not in TRANSITIONS["convert"][0]:
            raise InvalidTransitionError("visit request", visit.status, "convert")

        apartment = self._target_apartment(db, visit, tenant_in.apartment_id, owner)

        agreement_path = None
        try:
            if agreement:
                filename, content = agreement
                agreement_path = storage.store(content, filename, "agreements")

            tenant = Tenant(
                user_id=visit.user_id,
                apartment_id=apartment.id,
                contract_start=tenant_in.contract_start,
                contract_end=contract_end_for(tenant_in.contract_start, tenant_in.rent_plan_months),
                monthly_rent=tenant_in.monthly_rent or apartment.base_rent,
                rent_plan_months=tenant_in.rent_plan_months,
                agreement_document_path=agreement_path,
                cnic=tenant_in.cnic,
                permanent_address=tenant_in.permanent_address,
                notes=tenant_in.notes,
                created_at=clock.now(),
            )
            db.add(tenant)
            apartment.status = ApartmentStatus.RENTED
            role_service.add_role(visit.user, RoleName.TENANT, db)
            self._transition(db, visit, "convert", clock)
            db.commit()
        except Exception:
            db.rollback()
            if agreement_path:
                try:
                    storage.delete(agreement_path)
                except StorageError as cleanup_error:
                    logger.error(
                        "Could not remove agreement %s after failed conversion: %s",
                        agreement_path,
                        cleanup_error.message,
                    )
            raise

        db.refresh(tenant)
        logger.info(
            "Visit request %s converted to tenant %s for apartment %s",
            visit.id,
            tenant.id,
            apartment.id,
        )
        return tenant
