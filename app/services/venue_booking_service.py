import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from config import VENUE_BUFFER_HOURS, VENUE_DEFAULT_DURATION_HOURS
from database.models import Apartment, Building, Tenant, User, VenueBooking
from enums.venue_booking_status import VenueBookingStatus
from schemas.venue_booking_schema import VenueBookingCreate
from services.base_service import BaseService
from utils.clock import Clock, system_clock
from utils.errors import (
    AuthorizationDenied,
    ConflictError,
    InvalidTransitionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = "This time slot is already booked."


def intervals_overlap(
    first_start: datetime, first_end: datetime, second_start: datetime, second_end: datetime
) -> bool:
    """Half-open overlap: [a, b) and [c, d) share time iff a < d and c < b"""
    return first_start < second_end and second_start < first_end


class VenueBookingService(BaseService):
    def __init__(
        self,
        default_duration_hours: int = VENUE_DEFAULT_DURATION_HOURS,
        buffer_hours: int = VENUE_BUFFER_HOURS,
    ):
        super().__init__(VenueBooking, label="Venue booking")
        self.default_duration = timedelta(hours=default_duration_hours)
        self.buffer = timedelta(hours=buffer_hours)

    def occupied_interval(
        self, booking_date: date, booking_time: time, end_time: Optional[time] = None
    ) -> Tuple[datetime, datetime]:
        start = datetime.combine(booking_date, booking_time)
        if end_time is not None:
            return start, datetime.combine(booking_date, end_time)
        return start, start + self.default_duration

    def check_conflict(
        self,
        db: Session,
        candidate,
        exclude_booking_id: Optional[int] = None,
        lock: bool = False,
    ) -> Optional[VenueBooking]:
        """
        Find an approved booking whose time overlaps ``candidate``.

        Args:
            candidate: Anything with venue_type, booking_date, booking_time
                and end_time attributes
            exclude_booking_id: Booking to leave out, so an existing booking
                can be re-validated against the others
            lock: Row-lock every booking of the venue and date until the
                surrounding transaction ends

        Returns:
            The first conflicting booking, or None
        """
        query = db.query(VenueBooking).filter(
            VenueBooking.venue_type == candidate.venue_type,
            VenueBooking.booking_date == candidate.booking_date,
        )
        if lock:
            query = query.with_for_update()

        start, end = self.occupied_interval(
            candidate.booking_date, candidate.booking_time, candidate.end_time
        )
        for existing in query.order_by(VenueBooking.booking_time, VenueBooking.id).all():
            if existing.status != VenueBookingStatus.APPROVED:
                continue
            if exclude_booking_id is not None and existing.id == exclude_booking_id:
                continue
            existing_start, existing_end = self.occupied_interval(
                existing.booking_date, existing.booking_time, existing.end_time
            )
            if intervals_overlap(start, end, existing_start, existing_end):
                return existing
        return None

    def book_venue(
        self,
        db: Session,
        booking_in: VenueBookingCreate,
        tenant: Tenant,
        clock: Clock = system_clock,
    ) -> VenueBooking:
        if booking_in.end_time is not None and booking_in.end_time <= booking_in.booking_time:
            raise ValidationError("End time must be after the start time.", field="end_time")
        if booking_in.booking_date < clock.today():
            raise ValidationError("Booking date cannot be in the past.", field="booking_date")

        conflict = self.check_conflict(db, booking_in)
        if conflict is not None:
            logger.info(
                "Booking request by tenant %s clashes with booking %s",
                tenant.id,
                conflict.id,
            )
            raise ConflictError(SLOT_TAKEN_MESSAGE)

        booking = VenueBooking(
            **booking_in.model_dump(),
            tenant_id=tenant.id,
            status=VenueBookingStatus.PENDING,
            cleaning_scheduled=False,
            created_at=clock.now(),
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    def get_for_tenant(self, db: Session, tenant_id: int) -> List[VenueBooking]:
        return (
            db.query(VenueBooking)
            .filter(VenueBooking.tenant_id == tenant_id)
            .order_by(VenueBooking.booking_date.desc(), VenueBooking.booking_time.desc())
            .all()
        )

    def get_for_owner(
        self, db: Session, owner_id: int, status: Optional[VenueBookingStatus] = None
    ) -> List[VenueBooking]:
        query = (
            db.query(VenueBooking)
            .join(Tenant, VenueBooking.tenant_id == Tenant.id)
            .join(Apartment, Tenant.apartment_id == Apartment.id)
            .join(Building, Apartment.building_id == Building.id)
            .filter(Building.owner_id == owner_id)
        )
        if status:
            query = query.filter(VenueBooking.status == status)
        return query.order_by(VenueBooking.booking_date, VenueBooking.booking_time).all()

    def _get_for_owner(self, db: Session, booking_id: int, owner: User) -> VenueBooking:
        booking = self.get_or_404(db, booking_id)
        apartment = booking.tenant.apartment if booking.tenant else None
        if apartment is None or apartment.building is None or apartment.building.owner_id != owner.id:
            raise AuthorizationDenied("Not authorized to manage this booking.")
        return booking

    def unavailability_notice(self, booking: VenueBooking) -> str:
        start, end = self.occupied_interval(
            booking.booking_date, booking.booking_time, booking.end_time
        )
        blocked_from = start - self.buffer
        blocked_to = end + self.buffer
        return (
            f"NOTICE: The {booking.venue_type.label} is unavailable on "
            f"{booking.booking_date:%b %d} from {blocked_from:%I:%M %p} to "
            f"{blocked_to:%I:%M %p} due to a private event and cleaning."
        )

    def approve_booking(
        self,
        db: Session,
        booking_id: int,
        owner: User,
        cleaning_scheduled: bool = False,
        admin_notes: Optional[str] = None,
    ) -> Tuple[VenueBooking, str]:
        """
        Approve a pending booking and build the unavailability notice.

        Every booking of the same venue and date is row-locked while the
        overlap check runs, so concurrent approvals of clashing slots are
        serialized by the database.

        Raises:
            ConflictError: If the slot overlaps another approved booking
        """
        booking = self._get_for_owner(db, booking_id, owner)
        if booking.status != VenueBookingStatus.PENDING:
            raise InvalidTransitionError("venue booking", booking.status.value, "approve")

        conflict = self.check_conflict(db, booking, exclude_booking_id=booking.id, lock=True)
        if conflict is not None:
            db.rollback()
            raise ConflictError(SLOT_TAKEN_MESSAGE)

        booking.status = VenueBookingStatus.APPROVED
        booking.cleaning_scheduled = cleaning_scheduled
        booking.admin_notes = admin_notes
        notice = self.unavailability_notice(booking)
        db.commit()
        db.refresh(booking)

        logger.info("Venue booking %s approved. %s", booking.id, notice)
        return booking, notice

    def reject_booking(
        self, db: Session, booking_id: int, owner: User, admin_notes: Optional[str] = None
    ) -> VenueBooking:
        booking = self._get_for_owner(db, booking_id, owner)
        if booking.status == VenueBookingStatus.REJECTED:
            raise InvalidTransitionError("venue booking", booking.status.value, "reject")

        booking.status = VenueBookingStatus.REJECTED
        booking.admin_notes = admin_notes
        db.commit()
        db.refresh(booking)
        return booking
