import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import date, datetime, time, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.core.security import create_access_token, hash_password
from marketplace.db.base import Base, get_db
from marketplace.db.models.provider import ServiceProvider
from marketplace.db.models.service import Service
from marketplace.db.models.user import User
from marketplace.domain.pricing import is_public_holiday, local_now
from marketplace.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# hashed once; bcrypt is slow
PASSWORD = "secret-password"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(db, email, role="client", name=None, status="active"):
    user = User(
        email=email,
        name=name or email.split("@")[0].title(),
        password_hash=PASSWORD_HASH,
        role=role,
        status=status,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


def next_workday(min_days_ahead=1, weekday=0):
    """Next date on ``weekday`` at least ``min_days_ahead`` out that is not a public holiday."""
    day = local_now().date() + timedelta(days=min_days_ahead)
    while day.weekday() != weekday or is_public_holiday(day):
        day += timedelta(days=1)
    return day


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute))


@pytest.fixture
def client_user(db):
    return make_user(db, "alice@example.com")


@pytest.fixture
def other_client(db):
    return make_user(db, "bob@example.com")


@pytest.fixture
def admin_user(db):
    return make_user(db, "admin@example.com", role="admin")


@pytest.fixture
def provider_user(db):
    return make_user(db, "carol@example.com", role="provider", name="Carol Cleaner")


@pytest.fixture
def provider(db, provider_user):
    profile = ServiceProvider(
        user_id=provider_user.id,
        category="cleaning",
        description="Home cleaning",
        hourly_rate=25,
        availability=["mon", "tue", "wed", "thu", "fri"],
        work_day_start=time(8, 0),
        work_day_end=time(18, 0),
        status="active",
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture
def service(db):
    svc = Service(
        category="cleaning",
        description="Standard home cleaning",
        base_rate=25,
        availability=["mon", "tue", "wed", "thu", "fri"],
        min_hours=1,
        max_hours=8,
        status="active",
    )
    db.add(svc)
    db.commit()
    db.refresh(svc)
    return svc


@pytest.fixture
def booking_payload(provider, service):
    day = next_workday(min_days_ahead=2)
    return {
        "provider_id": provider.id,
        "service_id": service.id,
        "start_time": at(day, 9).isoformat(),
        "end_time": at(day, 11).isoformat(),
        "location": "12 Long Street, Cape Town",
        "access_instructions": "Gate code 1234",
    }
