from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from database.models import Apartment, Building, Complaint, Tenant, User
from enums.complaint_status import ComplaintStatus
from schemas.complaint_schema import ComplaintCreate, ComplaintStatusUpdate, ComplaintUpdate
from services.base_service import BaseService
from services.storage_service import FileStorage
from utils.clock import Clock, system_clock
from utils.errors import AuthorizationDenied, NotFoundError


class ComplaintService(BaseService):
    def __init__(self):
        super().__init__(Complaint)

    def _get_own(self, db: Session, complaint_id: int, tenant: Tenant) -> Complaint:
        complaint = (
            db.query(Complaint)
            .filter(Complaint.id == complaint_id, Complaint.tenant_id == tenant.id)
            .first()
        )
        if complaint is None:
            raise NotFoundError("Complaint not found or permission denied.")
        return complaint

    def submit(
        self,
        db: Session,
        complaint_in: ComplaintCreate,
        tenant: Tenant,
        storage: FileStorage,
        image: Optional[Tuple[str, bytes]] = None,
        clock: Clock = system_clock,
    ) -> Complaint:
        image_path = None
        if image:
            filename, content = image
            image_path = storage.store(content, filename, "complaints")

        complaint = Complaint(
            title=complaint_in.title,
            description=complaint_in.description,
            complaint_date=complaint_in.complaint_date or clock.today(),
            image_path=image_path,
            tenant_id=tenant.id,
            status=ComplaintStatus.PENDING,
            created_at=clock.now(),
        )
        db.add(complaint)
        db.commit()
        db.refresh(complaint)
        return complaint

    def edit(
        self,
        db: Session,
        complaint_id: int,
        complaint_in: ComplaintUpdate,
        tenant: Tenant,
        storage: FileStorage,
        image: Optional[Tuple[str, bytes]] = None,
    ) -> Complaint:
        complaint = self._get_own(db, complaint_id, tenant)
        for key, value in complaint_in.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(complaint, key, value)
        if image:
            filename, content = image
            complaint.image_path = storage.store(content, filename, "complaints")
        db.commit()
        db.refresh(complaint)
        return complaint

    def remove(self, db: Session, complaint_id: int, tenant: Tenant):
        complaint = self._get_own(db, complaint_id, tenant)
        db.delete(complaint)
        db.commit()

    def get_for_tenant(self, db: Session, tenant_id: int) -> List[Complaint]:
        return (
            db.query(Complaint)
            .filter(Complaint.tenant_id == tenant_id)
            .order_by(Complaint.created_at.desc(), Complaint.id.desc())
            .all()
        )

    def get_for_owner(self, db: Session, owner_id: int) -> List[Complaint]:
        return (
            db.query(Complaint)
            .join(Tenant, Complaint.tenant_id == Tenant.id)
            .join(Apartment, Tenant.apartment_id == Apartment.id)
            .join(Building, Apartment.building_id == Building.id)
            .filter(Building.owner_id == owner_id, Tenant.user_id.isnot(None))
            .order_by(Complaint.created_at.desc(), Complaint.id.desc())
            .all()
        )

    def update_status(
        self,
        db: Session,
        complaint_id: int,
        update: ComplaintStatusUpdate,
        owner: User,
        clock: Clock = system_clock,
    ) -> Complaint:
        complaint = self.get_or_404(db, complaint_id)
        apartment = complaint.tenant.apartment if complaint.tenant else None
        if apartment is None or apartment.building is None or apartment.building.owner_id != owner.id:
            raise AuthorizationDenied("Not authorized to manage this complaint.")

        complaint.status = update.status
        complaint.admin_response = update.admin_response
        complaint.resolved_at = clock.now() if update.status == ComplaintStatus.RESOLVED else None
        db.commit()
        db.refresh(complaint)
        return complaint
