import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from database.models import (
    Apartment,
    Building,
    Complaint,
    Payment,
    Tenant,
    User,
    VenueBooking,
)
from enums.apartment_status import ApartmentStatus
from enums.apartment_type import ApartmentType
from enums.role_name import RoleName
from schemas.tenant_schema import TenantUpdate
from services import role_service
from services.base_service import BaseService
from utils.clock import Clock, system_clock
from utils.errors import AuthorizationDenied, ConflictError, ValidationError

logger = logging.getLogger(__name__)

ACTIVE = "active"
EXPIRED = "expired"


class TenantService(BaseService):
    def __init__(self):
        super().__init__(Tenant)

    def _owner_query(self, db: Session, owner_id: int):
        return (
            db.query(Tenant)
            .join(Apartment, Tenant.apartment_id == Apartment.id)
            .join(Building, Apartment.building_id == Building.id)
            .options(joinedload(Tenant.user), joinedload(Tenant.apartment))
            .filter(Building.owner_id == owner_id)
        )

    def list_tenants(
        self,
        db: Session,
        owner_id: int,
        status: Optional[str] = None,
        apartment_type: Optional[ApartmentType] = None,
        clock: Clock = system_clock,
    ) -> List[Tenant]:
        """
        Tenancies in the owner's buildings, newest first.

        Args:
            status: "active" (contract_end >= today) or "expired"
            apartment_type: Only tenancies of this apartment type
        """
        query = self._owner_query(db, owner_id)
        if apartment_type:
            query = query.filter(Apartment.type == apartment_type)

        today = clock.today()
        if status == ACTIVE:
            query = query.filter(Tenant.contract_end >= today)
        elif status == EXPIRED:
            query = query.filter(Tenant.contract_end < today)
        elif status:
            raise ValidationError(f"Unknown tenant status filter: {status}", field="status")

        return query.order_by(Tenant.created_at.desc(), Tenant.id.desc()).all()

    def get_active_tenants(self, db: Session, owner_id: int, clock: Clock = system_clock) -> List[Tenant]:
        return self.list_tenants(db, owner_id, status=ACTIVE, clock=clock)

    def get_owned(self, db: Session, tenant_id: int, owner: User) -> Tenant:
        tenant = self.get_or_404(db, tenant_id)
        building = tenant.apartment.building if tenant.apartment else None
        if building is None or building.owner_id != owner.id:
            raise AuthorizationDenied("Not authorized to manage this tenant.")
        return tenant

    def get_tenant_for_user(
        self, db: Session, user_id: int, clock: Clock = system_clock
    ) -> Optional[Tenant]:
        """The user's active tenancy, the one ending last when there are several"""
        return (
            db.query(Tenant)
            .filter(Tenant.user_id == user_id, Tenant.contract_end >= clock.today())
            .order_by(Tenant.contract_end.desc(), Tenant.id.desc())
            .first()
        )

    def get_active_tenant_for_apartment(
        self, db: Session, apartment_id: int, clock: Clock = system_clock
    ) -> Optional[Tenant]:
        return (
            db.query(Tenant)
            .filter(
                Tenant.apartment_id == apartment_id,
                Tenant.contract_end >= clock.today(),
            )
            .order_by(Tenant.contract_end.desc())
            .first()
        )

    def update_tenant(
        self, db: Session, tenant_id: int, tenant_in: TenantUpdate, owner: User
    ) -> Tenant:
        tenant = self.get_owned(db, tenant_id, owner)
        data = tenant_in.model_dump(exclude_unset=True)

        for key in ("cnic", "permanent_address", "notes"):
            if key in data:
                setattr(tenant, key, data[key])

        user = tenant.user
        if user is not None:
            if data.get("email") and data["email"].lower() != user.email.lower():
                taken = db.query(User).filter(User.email == data["email"]).first()
                if taken:
                    raise ConflictError(f"Email {data['email']} is already in use")
                user.email = data["email"]
            if data.get("name"):
                user.name = data["name"]
            if "phone" in data:
                user.phone = data["phone"]

        db.commit()
        db.refresh(tenant)
        return tenant

    def terminate_tenancy(
        self, db: Session, tenant_id: int, owner: User, clock: Clock = system_clock
    ) -> Tenant:
        """
        End a tenancy without deleting its history.

        The contract is closed as of yesterday, the user falls back from the
        Tenant role to the base User role unless another tenancy is still
        active, and the apartment becomes Available again once no active
        tenancy remains on it.
        """
        tenant = self.get_owned(db, tenant_id, owner)
        today = clock.today()
        if tenant.contract_end < today:
            raise ConflictError("This tenancy has already ended.")

        tenant.contract_end = today - timedelta(days=1)
        db.flush()

        user = tenant.user
        if user is not None and role_service.has_role(user, RoleName.TENANT):
            still_renting = (
                db.query(Tenant)
                .filter(Tenant.user_id == user.id, Tenant.contract_end >= today)
                .count()
            )
            if not still_renting:
                role_service.remove_role(user, RoleName.TENANT)
                role_service.add_role(user, RoleName.USER, db)

        apartment = tenant.apartment
        if apartment is not None and not self.get_active_tenant_for_apartment(db, apartment.id, clock):
            apartment.status = ApartmentStatus.AVAILABLE

        db.commit()
        db.refresh(tenant)
        logger.info("Tenancy %s terminated by owner %s", tenant.id, owner.id)
        return tenant

    def dashboard(self, db: Session, tenant: Tenant, clock: Clock = system_clock) -> dict:
        payments = (
            db.query(Payment)
            .filter(Payment.tenant_id == tenant.id)
            .order_by(Payment.bill_date.desc())
            .limit(5)
            .all()
        )
        complaints = (
            db.query(Complaint)
            .filter(Complaint.tenant_id == tenant.id)
            .order_by(Complaint.created_at.desc(), Complaint.id.desc())
            .limit(5)
            .all()
        )
        bookings = (
            db.query(VenueBooking)
            .filter(
                VenueBooking.tenant_id == tenant.id,
                VenueBooking.booking_date >= clock.today(),
            )
            .order_by(VenueBooking.booking_date, VenueBooking.booking_time)
            .limit(5)
            .all()
        )
        return {
            "tenant": tenant,
            "payments": payments,
            "complaints": complaints,
            "upcoming_venue_bookings": bookings,
        }
