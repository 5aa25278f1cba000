from datetime import date
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database.init import Base
from utils.id_generator import generate_tenant_code


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    apartment_id = Column(Integer, ForeignKey("apartments.id"), nullable=False)

    contract_start = Column(Date, nullable=False)
    contract_end = Column(Date, nullable=False, index=True)
    monthly_rent = Column(Float, nullable=False)
    rent_plan_months = Column(Integer, nullable=False, default=12)
    agreement_document_path = Column(String(500), nullable=True)

    cnic = Column(String(20), nullable=True)
    permanent_address = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User")
    apartment = relationship("Apartment", back_populates="tenants")
    payments = relationship(
        "Payment", back_populates="tenant", cascade="all, delete-orphan"
    )
    complaints = relationship(
        "Complaint", back_populates="tenant", cascade="all, delete-orphan"
    )
    venue_bookings = relationship(
        "VenueBooking", back_populates="tenant", cascade="all, delete-orphan"
    )

    @property
    def tenant_code(self) -> str:
        return generate_tenant_code(self.id) if self.id else None

    def is_active_on(self, day: date) -> bool:
        return self.contract_end >= day
