from sqlalchemy import Column, Integer, Text, Date, Time, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database.init import Base
from enums.visit_status import VisitStatus


class VisitRequest(Base):
    __tablename__ = "visit_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    apartment_id = Column(
        Integer, ForeignKey("apartments.id", ondelete="CASCADE"), nullable=True
    )

    requested_date = Column(Date, nullable=False)
    requested_time = Column(Time, nullable=False)
    suggested_date = Column(Date, nullable=True)
    suggested_time = Column(Time, nullable=True)
    status = Column(Enum(VisitStatus), default=VisitStatus.PENDING, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User")
    apartment = relationship("Apartment", back_populates="visit_requests")
