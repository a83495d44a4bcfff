import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from carwash.core.config import settings
from carwash.core.security import create_access_token
from carwash.database import Base, get_db
from carwash.main import app
from carwash.models import Branch, BranchStatus, Service, ServiceCategory


@pytest.fixture
def db_session():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(db_session):
    """Public client with the database dependency overridden."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token():
    return create_access_token(data={"username": settings.ADMIN_USERNAME})


@pytest.fixture
def admin_client(client, admin_token):
    """Client carrying an admin bearer token."""
    with TestClient(app, headers={"Authorization": f"Bearer {admin_token}"}) as c:
        yield c


@pytest.fixture
def service(db_session):
    service = Service(
        name="Cuci Mobil Kecil Hidrolik",
        category=ServiceCategory.CAR_PREMIUM,
        price=45000,
        pickup_fee=0,
        supports_pickup=False,
        duration=60,
        features=["Gratis 1 Minuman"],
        is_active=True,
    )
    db_session.add(service)
    db_session.commit()
    db_session.refresh(service)
    return service


@pytest.fixture
def pickup_service(db_session):
    service = Service(
        name="Cuci Mobil Sedang/Besar Hidrolik",
        category=ServiceCategory.CAR_PREMIUM,
        price=50000,
        pickup_fee=25000,
        supports_pickup=True,
        duration=75,
        features=[],
        is_active=True,
    )
    db_session.add(service)
    db_session.commit()
    db_session.refresh(service)
    return service


@pytest.fixture
def branch(db_session):
    branch = Branch(
        name="Cabang Utama",
        address="Jl. Jend. Sudirman No. 1, Bekasi Barat",
        phone="021-000001",
        bank_name="BCA",
        bank_account_number="0000000001",
        bank_account_name="Car Wash Utama",
        pickup_coverage_radius=10,
        staff_count=8,
        status=BranchStatus.ACTIVE,
    )
    db_session.add(branch)
    db_session.commit()
    db_session.refresh(branch)
    return branch


@pytest.fixture
def booking_payload(service, branch):
    """Factory for a valid public booking body."""

    def make(**overrides):
        payload = {
            "customer_name": "Budi Santoso",
            "customer_phone": "081234567890",
            "customer_email": "budi@example.com",
            "service_id": service.id,
            "branch_id": branch.id,
            "booking_date": "2026-11-02",
            "booking_time": "09:30",
            "total_price": service.price,
            "is_pickup_service": False,
            "vehicle_plate_number": "B 1234 XYZ",
            "payment_method": "transfer",
        }
        payload.update(overrides)
        return payload

    return make
