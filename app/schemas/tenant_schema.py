from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import List, Optional
from datetime import date, datetime
from .auth_schema import UserMinimumResponse
from .apartment_schema import ApartmentMinimumResponse


class TenantConversionCreate(BaseModel):
    contract_start: date
    rent_plan_months: int = Field(default=12, ge=1)
    monthly_rent: Optional[float] = Field(default=None, gt=0)
    apartment_id: Optional[int] = None
    cnic: Optional[str] = None
    permanent_address: Optional[str] = None
    notes: Optional[str] = None


class ConversionDefaults(BaseModel):
    visit_request_id: int
    user: UserMinimumResponse
    apartment: ApartmentMinimumResponse
    contract_start: date
    contract_end: date
    rent_plan_months: int
    monthly_rent: float
    available_apartments: List[ApartmentMinimumResponse] = []


class TenantUpdate(BaseModel):
    cnic: Optional[str] = None
    permanent_address: Optional[str] = None
    notes: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None


class TenantResponse(BaseModel):
    id: int
    tenant_code: Optional[str] = None
    user: Optional[UserMinimumResponse] = None
    apartment: Optional[ApartmentMinimumResponse] = None
    contract_start: date
    contract_end: date
    monthly_rent: float
    rent_plan_months: int
    agreement_document_path: Optional[str] = None
    cnic: Optional[str] = None
    permanent_address: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ActiveTenantLookup(BaseModel):
    tenant_id: int
    tenant_name: str


def tenant_response(tenant, today: date) -> dict:
    response = TenantResponse.model_validate(tenant)
    response.is_active = tenant.is_active_on(today)
    return response.model_dump(mode="json")
