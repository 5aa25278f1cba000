from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, JSON, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database.init import Base
from enums.apartment_status import ApartmentStatus
from enums.apartment_type import ApartmentType
from utils.id_generator import generate_apartment_code


class Apartment(Base):
    __tablename__ = "apartments"

    id = Column(Integer, primary_key=True, index=True)
    building_id = Column(
        Integer, ForeignKey("buildings.id", ondelete="CASCADE"), nullable=False
    )
    number = Column(String(20), nullable=False)
    type = Column(Enum(ApartmentType), nullable=False)
    floor = Column(Integer, nullable=False)
    size = Column(Float, nullable=False)
    base_rent = Column(Float, nullable=False)
    status = Column(
        Enum(ApartmentStatus), default=ApartmentStatus.AVAILABLE, nullable=False
    )
    description = Column(String(2000), nullable=True)
    photos = Column(JSON, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    building = relationship("Building", back_populates="apartments")
    visit_requests = relationship(
        "VisitRequest", back_populates="apartment", cascade="all, delete-orphan"
    )
    tenants = relationship("Tenant", back_populates="apartment")
    reviews = relationship(
        "Review", back_populates="apartment", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        building_name = self.building.name if self.building else ""
        return f"{building_name} - Unit {self.number}"

    @property
    def apartment_code(self) -> str:
        return generate_apartment_code(self.id) if self.id else None
