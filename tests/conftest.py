"""Pytest fixtures."""

import os
import uuid

# Configure before the app (and its settings singleton) is imported
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["MODERATOR_EMAILS"] = '["mod@test.com", "mod2@test.com"]'

import pytest
from fastapi.testclient import TestClient

from sif_safety.db.base import Base
from sif_safety.db.session import SessionLocal, engine
from sif_safety.main import app
from sif_safety.models import (  # noqa: F401 - register for create_all
    BlockedUser,
    ModeratorAction,
    Report,
    Sif,
    User,
    UserSuspension,
    UserWarning,
)
from sif_safety.services.block_service import blocked_cache


@pytest.fixture
def setup_db():
    """Fresh tables for every test so ids and queues start empty."""
    Base.metadata.create_all(bind=engine)
    blocked_cache.clear()
    yield
    blocked_cache.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(setup_db):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(setup_db):
    """Plain session for service-level tests."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def register(client):
    """Register + login helper. Returns {"id", "token", "headers", "email"}."""

    def _register(email: str | None = None, full_name: str = "Test") -> dict:
        email = email or f"user_{uuid.uuid4().hex[:8]}@test.com"
        client.post("/auth/register", json={"email": email, "password": "pass", "full_name": full_name})
        token = client.post("/auth/login", json={"email": email, "password": "pass"}).json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}
        me = client.get("/auth/me", headers=headers).json()
        return {"id": me["id"], "token": token, "headers": headers, "email": email}

    return _register


@pytest.fixture
def moderator(register):
    return register("mod@test.com", full_name="Moderator")


@pytest.fixture
def post_sif(client):
    """Create a SIF as the given user and return its JSON."""

    def _post(user: dict, subject: str = "Thank you", message: str = "Paying it forward") -> dict:
        r = client.post("/sifs", headers=user["headers"], json={"subject": subject, "message": message})
        assert r.status_code == 201, r.json()
        return r.json()

    return _post
