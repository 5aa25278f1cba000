from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database.init import Base
from enums.payment_status import PaymentStatus
from enums.payment_type import PaymentType


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(
        Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    bill_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    month = Column(Date, nullable=False)
    type = Column(SQLAlchemyEnum(PaymentType), nullable=False, default=PaymentType.RENT)
    amount = Column(Float, nullable=False)
    status = Column(SQLAlchemyEnum(PaymentStatus), nullable=False, default=PaymentStatus.UNPAID)

    payment_method = Column(String(100), nullable=True)
    transaction_id = Column(String(255), nullable=True)
    receipt_path = Column(String(500), nullable=True)
    challan_path = Column(String(500), nullable=True)
    paid_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tenant = relationship("Tenant", back_populates="payments")
