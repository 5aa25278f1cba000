from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime
from enums.payment_status import PaymentStatus
from enums.payment_type import PaymentType


class PaymentCreate(BaseModel):
    tenant_id: int
    bill_date: date
    due_date: date
    month: date
    type: PaymentType = PaymentType.RENT
    amount: float = Field(gt=0)


class PaymentSubmit(BaseModel):
    payment_method: str
    transaction_id: str


class PaymentFilter(BaseModel):
    apartment_id: Optional[int] = None
    month: Optional[date] = None
    type: Optional[PaymentType] = None
    status: Optional[PaymentStatus] = None


class PaymentResponse(BaseModel):
    id: int
    tenant_id: int
    bill_date: date
    due_date: date
    month: date
    type: PaymentType
    amount: float
    status: PaymentStatus
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    receipt_path: Optional[str] = None
    challan_path: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
