import os
import tempfile
from datetime import datetime

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="uploads-")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from dateutil.relativedelta import relativedelta
from fastapi.testclient import TestClient

from main import app
from database.init import Base, SessionLocal, engine, get_db
from database.models import Apartment, Building, Tenant, User, VisitRequest
from enums.apartment_status import ApartmentStatus
from enums.apartment_type import ApartmentType
from enums.role_name import RoleName
from enums.visit_status import VisitStatus
from services import role_service
from services.storage_service import FileStorage, get_storage
from utils.clock import FixedClock, get_clock
from utils.dependencies import create_access_token, hash_password

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)

NOW = datetime(2024, 5, 20, 10, 0)


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        SessionLocal.remove()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def storage(tmp_path):
    return FileStorage(str(tmp_path))


@pytest.fixture
def client(db, clock, storage):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(name, email, *roles):
        user = User(name=name, email=email, hashed_password=PASSWORD_HASH, is_active=True)
        db.add(user)
        for role in roles or (RoleName.USER,):
            role_service.add_role(user, role, db)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def headers_for():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}

    return _headers


@pytest.fixture
def owner(make_user):
    return make_user("Olivia Owner", "owner@example.com", RoleName.USER, RoleName.OWNER)


@pytest.fixture
def prospect(make_user):
    return make_user("Paul Prospect", "paul@example.com")


@pytest.fixture
def building(db, owner):
    building = Building(name="Maple Court", address="12 Canal Road", city="Lahore", owner_id=owner.id)
    db.add(building)
    db.commit()
    db.refresh(building)
    return building


@pytest.fixture
def make_apartment(db, building):
    def _make(number="101", base_rent=50000, apartment_type=ApartmentType.TWO_BEDROOM, **extra):
        apartment = Apartment(
            building_id=extra.pop("building_id", building.id),
            number=number,
            type=apartment_type,
            floor=1,
            size=950,
            base_rent=base_rent,
            status=extra.pop("status", ApartmentStatus.AVAILABLE),
            photos=[],
            **extra,
        )
        db.add(apartment)
        db.commit()
        db.refresh(apartment)
        return apartment

    return _make


@pytest.fixture
def apartment(make_apartment):
    return make_apartment()


@pytest.fixture
def make_visit(db, clock):
    def _make(user, apartment, status=VisitStatus.PENDING):
        visit = VisitRequest(
            user_id=user.id,
            apartment_id=apartment.id,
            requested_date=clock.today() + relativedelta(days=3),
            requested_time=datetime(2024, 1, 1, 11, 0).time(),
            status=status,
            created_at=clock.now(),
        )
        db.add(visit)
        db.commit()
        db.refresh(visit)
        return visit

    return _make


@pytest.fixture
def make_tenant(db, clock):
    def _make(user, apartment, months=12):
        start = clock.today()
        tenant = Tenant(
            user_id=user.id,
            apartment_id=apartment.id,
            contract_start=start,
            contract_end=start + relativedelta(months=months),
            monthly_rent=apartment.base_rent,
            rent_plan_months=months,
            created_at=clock.now(),
        )
        db.add(tenant)
        apartment.status = ApartmentStatus.RENTED
        role_service.add_role(user, RoleName.TENANT, db)
        db.commit()
        db.refresh(tenant)
        return tenant

    return _make


@pytest.fixture
def tenant(make_user, make_tenant, apartment):
    user = make_user("Tara Tenant", "tara@example.com")
    return make_tenant(user, apartment)
