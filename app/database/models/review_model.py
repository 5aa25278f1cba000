from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database.init import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False)
    apartment_id = Column(
        Integer, ForeignKey("apartments.id", ondelete="CASCADE"), nullable=False
    )
    title = Column(String(200), nullable=False)
    comment = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tenant = relationship("Tenant")
    apartment = relationship("Apartment", back_populates="reviews")

    @property
    def reviewer_name(self) -> str:
        if self.tenant and self.tenant.user:
            return self.tenant.user.name
        return None
