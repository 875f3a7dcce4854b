"""Pytest fixtures for service and API tests.

Loads `.env.test` before any app module reads settings, initializes a clean
SQLite schema for the session, and provides factories for principals with
their role assignments plus an `AsyncClient` bound to the ASGI app.
"""
import os
import pathlib
import uuid

import pytest
from dotenv import load_dotenv

ROOT = pathlib.Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=str(ROOT / ".env.test"), override=True)
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_medtrust.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("RATE_LIMIT_ENABLED", "False")

STRONG_PASSWORD = "StrongPassw0rd!"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="session")
def prepare_database():
    """Create clean schema for the test session."""
    from app.core.database import engine, Base

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    yield

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(prepare_database):
    """Yield a SQLAlchemy session for direct DB access in tests."""
    from app.core.database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture
def make_user(db_session):
    """Create a principal; pass role=None for an account without a role assignment."""
    from app.models.user import User, RoleAssignment

    def factory(role="patient", full_name="Test User"):
        user = User(
            email=f"{role or 'norole'}-{uuid.uuid4().hex[:8]}@example.com",
            full_name=full_name,
        )
        db_session.add(user)
        db_session.flush()
        if role:
            db_session.add(RoleAssignment(user_id=user.id, role=role))
        db_session.commit()
        return user

    return factory


@pytest.fixture
def make_doctor(db_session, make_user):
    """Create a doctor principal with a profile in the given approval state."""
    from app.models.doctor import Doctor

    def factory(approval_status="pending", full_name="Dr Test"):
        user = make_user("doctor", full_name=full_name)
        doctor = Doctor(
            user_id=user.id,
            specialization="Cardiology",
            license_number=f"LIC-{uuid.uuid4().hex[:10]}",
            approval_status=approval_status,
        )
        db_session.add(doctor)
        db_session.commit()
        return doctor, user

    return factory


@pytest.fixture
def admin(make_user):
    return make_user("admin", full_name="Admin User")


@pytest.fixture
def patient(make_user):
    return make_user("patient", full_name="Jane Doe")


@pytest.fixture
def pending_kyc(db_session, patient):
    from app.services.kyc_service import KycService

    return KycService.submit(db_session, patient.id, "nin", "12345678901", "Jane Doe", "1990-01-01")


@pytest.fixture
def auth_headers(db_session):
    """Issue a tracked access token for a principal and return request headers."""
    from app.core.security import create_access_token
    from app.models.session import UserSession

    def factory(user):
        token, jti, expires_at = create_access_token(user.id)
        db_session.add(UserSession(user_id=user.id, token_jti=jti, expires_at=expires_at.replace(tzinfo=None)))
        db_session.commit()
        return {"Authorization": f"Bearer {token}"}

    return factory


@pytest.fixture
async def async_client(prepare_database):
    """Provide an httpx AsyncClient configured with the FastAPI app."""
    from httpx import AsyncClient, ASGITransport
    from app.main import create_app

    app = create_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest.fixture
def register_and_login(async_client):
    """Register through the API, log in, and return (user_id, headers)."""

    async def factory(role="patient", **extra):
        email = f"{role}-{uuid.uuid4().hex[:8]}@example.com"
        payload = {
            "email": email,
            "password": STRONG_PASSWORD,
            "full_name": "Test Person",
            "role": role,
            **extra,
        }
        if role == "doctor":
            payload.setdefault("specialization", "Cardiology")
            payload.setdefault("license_number", f"LIC-{uuid.uuid4().hex[:10]}")

        r = await async_client.post("/auth/register", json=payload)
        assert r.status_code == 201, r.text

        r = await async_client.post("/auth/login", json={"email": email, "password": STRONG_PASSWORD})
        assert r.status_code == 200, r.text
        body = r.json()
        return body["user_id"], {"Authorization": f"Bearer {body['access_token']}"}

    return factory
