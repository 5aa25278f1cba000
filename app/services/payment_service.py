import logging
from typing import List, Optional, Tuple

from sqlalchemy import extract
from sqlalchemy.orm import Session

from database.models import Apartment, Building, Payment, Tenant, User
from enums.payment_status import PaymentStatus
from schemas.payment_schema import PaymentCreate, PaymentFilter, PaymentSubmit
from services.base_service import BaseService
from services.storage_service import FileStorage
from services.tenant_service import TenantService
from utils.clock import Clock, system_clock
from utils.errors import AuthorizationDenied, ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def apply_filters(query, filters: PaymentFilter):
    if filters.apartment_id:
        query = query.filter(Tenant.apartment_id == filters.apartment_id)
    if filters.month:
        query = query.filter(
            extract("month", Payment.month) == filters.month.month,
            extract("year", Payment.month) == filters.month.year,
        )
    if filters.type:
        query = query.filter(Payment.type == filters.type)
    if filters.status:
        query = query.filter(Payment.status == filters.status)
    return query


class PaymentService(BaseService):
    def __init__(self):
        super().__init__(Payment)
        self.tenant_service = TenantService()

    def create_bill(
        self,
        db: Session,
        payment_in: PaymentCreate,
        owner: User,
        storage: FileStorage,
        challan: Optional[Tuple[str, bytes]] = None,
        clock: Clock = system_clock,
    ) -> Payment:
        tenant = self.tenant_service.get_owned(db, payment_in.tenant_id, owner)
        if payment_in.due_date < payment_in.bill_date:
            raise ValidationError("Due date cannot be before the bill date.", field="due_date")

        challan_path = None
        if challan:
            filename, content = challan
            challan_path = storage.store(content, filename, "payments")

        payment = Payment(
            **payment_in.model_dump(),
            status=PaymentStatus.UNPAID,
            challan_path=challan_path,
            created_at=clock.now(),
        )
        db.add(payment)
        db.commit()
        db.refresh(payment)
        logger.info("Bill %s generated for tenant %s", payment.id, tenant.id)
        return payment

    def get_for_owner(self, db: Session, owner_id: int, filters: PaymentFilter) -> List[Payment]:
        query = (
            db.query(Payment)
            .join(Tenant, Payment.tenant_id == Tenant.id)
            .join(Apartment, Tenant.apartment_id == Apartment.id)
            .join(Building, Apartment.building_id == Building.id)
            .filter(Building.owner_id == owner_id)
        )
        query = apply_filters(query, filters)
        return query.order_by(Payment.bill_date.desc(), Payment.id.desc()).all()

    def get_for_tenant(self, db: Session, tenant_id: int, filters: PaymentFilter) -> List[Payment]:
        query = (
            db.query(Payment)
            .join(Tenant, Payment.tenant_id == Tenant.id)
            .filter(Payment.tenant_id == tenant_id)
        )
        query = apply_filters(query, filters)
        return query.order_by(Payment.bill_date.desc(), Payment.id.desc()).all()

    def submit_payment(
        self,
        db: Session,
        payment_id: int,
        tenant: Tenant,
        submission: PaymentSubmit,
        storage: FileStorage,
        receipt: Optional[Tuple[str, bytes]] = None,
    ) -> Payment:
        """Tenant hands in proof of payment; the bill waits for owner verification"""
        payment = (
            db.query(Payment)
            .filter(Payment.id == payment_id, Payment.tenant_id == tenant.id)
            .first()
        )
        if payment is None:
            raise NotFoundError("Payment record not found.")
        if payment.status != PaymentStatus.UNPAID:
            raise ConflictError("This bill is already processing or paid.")

        if receipt:
            filename, content = receipt
            payment.receipt_path = storage.store(content, filename, "receipts")

        payment.payment_method = submission.payment_method
        payment.transaction_id = submission.transaction_id
        payment.status = PaymentStatus.PENDING
        db.commit()
        db.refresh(payment)
        return payment

    def _get_for_owner(self, db: Session, payment_id: int, owner: User) -> Payment:
        payment = self.get_or_404(db, payment_id)
        apartment = payment.tenant.apartment if payment.tenant else None
        if apartment is None or apartment.building is None or apartment.building.owner_id != owner.id:
            raise AuthorizationDenied("Not authorized to manage this payment.")
        return payment

    def verify(self, db: Session, payment_id: int, owner: User, clock: Clock = system_clock) -> Payment:
        payment = self._get_for_owner(db, payment_id, owner)
        payment.status = PaymentStatus.PAID
        payment.paid_at = clock.now()
        db.commit()
        db.refresh(payment)
        return payment

    def unverify(self, db: Session, payment_id: int, owner: User) -> Payment:
        payment = self._get_for_owner(db, payment_id, owner)
        payment.status = PaymentStatus.UNPAID
        payment.paid_at = None
        db.commit()
        db.refresh(payment)
        return payment
