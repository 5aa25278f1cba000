from datetime import date, time

import pytest

from database.models import VenueBooking
from enums.apartment_status import ApartmentStatus
from enums.apartment_type import ApartmentType
from enums.role_name import RoleName
from enums.venue_type import VenueType
from schemas.tenant_schema import TenantUpdate
from services import role_service
from services.tenant_service import TenantService
from utils.errors import AuthorizationDenied, ConflictError, ValidationError

service = TenantService()


def test_terminate_ends_contract_and_revokes_role(db, owner, tenant, apartment, clock):
    terminated = service.terminate_tenancy(db, tenant.id, owner, clock)

    assert terminated.contract_end == date(2024, 5, 19)
    assert terminated.contract_end < clock.today()
    assert not role_service.has_role(tenant.user, RoleName.TENANT)
    assert role_service.has_role(tenant.user, RoleName.USER)
    assert apartment.status == ApartmentStatus.AVAILABLE
    assert service.get_active_tenants(db, owner.id, clock) == []
    assert service.get_active_tenant_for_apartment(db, apartment.id, clock) is None


def test_terminate_twice_is_a_conflict(db, owner, tenant, clock):
    service.terminate_tenancy(db, tenant.id, owner, clock)

    with pytest.raises(ConflictError):
        service.terminate_tenancy(db, tenant.id, owner, clock)


def test_terminate_keeps_role_while_another_tenancy_is_active(
    db, owner, tenant, make_apartment, make_tenant, clock
):
    second_home = make_apartment(number="303")
    make_tenant(tenant.user, second_home)

    service.terminate_tenancy(db, tenant.id, owner, clock)

    assert role_service.has_role(tenant.user, RoleName.TENANT)
    assert second_home.status == ApartmentStatus.RENTED


def test_terminate_requires_the_owning_landlord(db, make_user, tenant, clock):
    stranger = make_user("Sam Stranger", "sam@example.com", RoleName.OWNER)

    with pytest.raises(AuthorizationDenied):
        service.terminate_tenancy(db, tenant.id, stranger, clock)


def test_list_filters_by_status_and_type(db, owner, tenant, make_user, make_apartment, make_tenant, clock):
    studio = make_apartment(number="G1", apartment_type=ApartmentType.STUDIO)
    former = make_tenant(make_user("Fred Former", "fred@example.com"), studio)
    service.terminate_tenancy(db, former.id, owner, clock)

    assert [t.id for t in service.list_tenants(db, owner.id, "active", clock=clock)] == [tenant.id]
    assert [t.id for t in service.list_tenants(db, owner.id, "expired", clock=clock)] == [former.id]
    assert [
        t.id for t in service.list_tenants(db, owner.id, apartment_type=ApartmentType.STUDIO, clock=clock)
    ] == [former.id]

    with pytest.raises(ValidationError):
        service.list_tenants(db, owner.id, "archived", clock=clock)


def test_update_tenant_touches_user_details(db, owner, tenant, make_user):
    make_user("Taken", "taken@example.com")

    updated = service.update_tenant(
        db, tenant.id, TenantUpdate(cnic="35202-7654321-9", name="Tara T.", phone="0300-1234567"), owner
    )
    assert updated.cnic == "35202-7654321-9"
    assert updated.user.name == "Tara T."
    assert updated.user.phone == "0300-1234567"

    with pytest.raises(ConflictError):
        service.update_tenant(db, tenant.id, TenantUpdate(email="taken@example.com"), owner)


def test_dashboard_lists_only_upcoming_bookings(db, tenant, clock):
    for day in (date(2024, 5, 1), date(2024, 6, 1)):
        db.add(VenueBooking(tenant_id=tenant.id, venue_type=VenueType.GYM, booking_date=day, booking_time=time(9)))
    db.commit()

    summary = service.dashboard(db, tenant, clock)

    assert [b.booking_date for b in summary["upcoming_venue_bookings"]] == [date(2024, 6, 1)]
    assert summary["payments"] == []
    assert summary["complaints"] == []
