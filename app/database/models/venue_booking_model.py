from sqlalchemy import Column, Integer, String, Text, Boolean, Date, Time, DateTime, ForeignKey, Index, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database.init import Base
from enums.venue_booking_status import VenueBookingStatus
from enums.venue_type import VenueType


class VenueBooking(Base):
    __tablename__ = "venue_bookings"
    __table_args__ = (
        Index("ix_venue_bookings_venue_date", "venue_type", "booking_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(
        Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    venue_type = Column(Enum(VenueType), nullable=False)
    booking_date = Column(Date, nullable=False)
    booking_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=True)
    purpose = Column(String(255), nullable=True)
    status = Column(
        Enum(VenueBookingStatus), default=VenueBookingStatus.PENDING, nullable=False
    )
    cleaning_scheduled = Column(Boolean, default=False, nullable=False)
    admin_notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tenant = relationship("Tenant", back_populates="venue_bookings")
