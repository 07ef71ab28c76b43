import os
os.environ["TESTING"] = "1"
os.environ.setdefault("JWT_SECRET", "test-secret-with-enough-length-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import sys
from pathlib import Path

import uuid

sys.path.append(str(Path(__file__).resolve().parents[2]))

from app.main import app
from app.database import Base, get_db

SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"]
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 30},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base.metadata.drop_all(bind=engine)
Base.metadata.create_all(bind=engine)

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4()}@example.com"


def ensure_access_token(client, *, email: str | None = None, password: str = "secret1", role: str = "user"):
    """Sign up (or log in, when the account exists) and return ``(token, email)``."""

    normalized_email = (email or unique_email()).strip().lower()
    payload = {"email": normalized_email, "password": password, "role": role}
    resp = client.post("/api/auth/signup", json=payload)
    if resp.status_code == 201:
        data = resp.json()
    elif resp.status_code == 409:
        login_resp = client.post("/api/auth/login", json={"email": normalized_email, "password": password})
        assert login_resp.status_code == 200, f"Login failed for existing user {normalized_email}: {login_resp.text}"
        data = login_resp.json()
    else:
        raise AssertionError(f"Unexpected auth bootstrap failure for {normalized_email}: {resp.status_code} {resp.text}")
    token = data.get("access_token")
    if not token:
        raise AssertionError(f"Authentication response missing token for {normalized_email}: {data}")
    return token, normalized_email


def ensure_auth_headers(client, *, email: str | None = None, password: str = "secret1", role: str = "user"):
    token, normalized_email = ensure_access_token(client, email=email, password=password, role=role)
    return {"Authorization": f"Bearer {token}"}, normalized_email


@pytest.fixture
def user_headers(client):
    headers, _ = ensure_auth_headers(client)
    return headers


@pytest.fixture
def admin_headers(client):
    headers, _ = ensure_auth_headers(client, email=unique_email("admin"), role="admin")
    return headers
