"""Integration tests for authentication routes.

These tests run against the FastAPI app using the SQLite database
configured by `.env.test`.
"""
import uuid
from datetime import timedelta

from app.core.config import settings
from app.core.security import create_access_token
from app.dependencies.rate_limit import reset_buckets
from app.models.session import UserSession
from app.models.user import RoleAssignment, User
from app.utils.helpers import utcnow


async def test_register_login_logout(async_client, db_session):
    payload = {
        "email": f"testuser-{uuid.uuid4().hex[:8]}@example.com",
        "password": "StrongPassw0rd!",
        "full_name": "Test User",
        "role": "patient",
    }

    r = await async_client.post("/auth/register", json=payload)
    assert r.status_code == 201
    body = r.json()
    assert body.get("success") is True
    user_id = body["data"]["user_id"]

    user = db_session.query(User).filter(User.id == user_id).first()
    assert user is not None
    assert user.password_hash != payload["password"]
    assignment = db_session.query(RoleAssignment).filter(RoleAssignment.user_id == user_id).one()
    assert assignment.role == "patient"

    r = await async_client.post("/auth/login", json={"email": payload["email"], "password": payload["password"]})
    assert r.status_code == 200
    tokens = r.json()
    assert tokens["token_type"] == "bearer"
    assert tokens["user_id"] == user_id
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    r = await async_client.get("/users/me", headers=headers)
    assert r.status_code == 200

    r = await async_client.post("/auth/logout", headers=headers)
    assert r.status_code == 200

    r = await async_client.get("/users/me", headers=headers)
    assert r.status_code == 401


async def test_token_carries_identity_only(register_and_login):
    from jose import jwt

    _, headers = await register_and_login("patient")
    token = headers["Authorization"].split(" ", 1)[1]
    claims = jwt.get_unverified_claims(token)
    assert set(claims) == {"sub", "exp", "jti", "type"}


async def test_duplicate_email_conflict(async_client):
    payload = {
        "email": f"dup-{uuid.uuid4().hex[:8]}@example.com",
        "password": "StrongPassw0rd!",
        "full_name": "Dup User",
        "role": "patient",
    }
    r = await async_client.post("/auth/register", json=payload)
    assert r.status_code == 201
    r = await async_client.post("/auth/register", json=payload)
    assert r.status_code == 409


async def test_admin_cannot_self_register(async_client):
    payload = {
        "email": f"admin-{uuid.uuid4().hex[:8]}@example.com",
        "password": "StrongPassw0rd!",
        "full_name": "Wannabe Admin",
        "role": "admin",
    }
    r = await async_client.post("/auth/register", json=payload)
    assert r.status_code == 422
    assert r.json()["code"] == "InvalidRegistration"
    assert r.json()["field"] == "role"


async def test_doctor_registration_requires_license(async_client):
    payload = {
        "email": f"doc-{uuid.uuid4().hex[:8]}@example.com",
        "password": "StrongPassw0rd!",
        "full_name": "Dr Nolicense",
        "role": "doctor",
        "specialization": "Dermatology",
    }
    r = await async_client.post("/auth/register", json=payload)
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "InvalidRegistration"
    assert body["field"] == "license_number"


async def test_weak_password_rejected(async_client):
    payload = {
        "email": f"weak-{uuid.uuid4().hex[:8]}@example.com",
        "password": "password",
        "full_name": "Weak Password",
        "role": "patient",
    }
    r = await async_client.post("/auth/register", json=payload)
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "InvalidRequest"
    assert body["field"] == "password"
    assert "input" not in body


async def test_login_invalid_credentials(async_client):
    r = await async_client.post("/auth/login", json={"email": "nobody@example.com", "password": "StrongPassw0rd!"})
    assert r.status_code == 401


async def test_missing_and_garbage_tokens(async_client):
    r = await async_client.get("/users/me")
    assert r.status_code == 401
    r = await async_client.get("/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


async def test_untracked_token_rejected(async_client, patient):
    token, _, _ = create_access_token(patient.id)
    r = await async_client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


async def test_expired_session_rejected(async_client, db_session, patient):
    token, jti, _ = create_access_token(patient.id)
    db_session.add(UserSession(user_id=patient.id, token_jti=jti, expires_at=utcnow() - timedelta(minutes=1)))
    db_session.commit()
    r = await async_client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


async def test_login_rate_limited(async_client, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(settings, "RATE_LIMIT_REQUESTS", 2)
    reset_buckets()
    try:
        body = {"email": "ratelimit@example.com", "password": "wrong"}
        statuses = [(await async_client.post("/auth/login", json=body)).status_code for _ in range(3)]
        assert statuses == [401, 401, 429]
    finally:
        reset_buckets()
