"""Fixtures compartidos: app con SQLite en memoria, sesiones y tokens."""

import hashlib
import os

import pytest

REFERRAL_CODE = "JOINUS2026"
REFERRAL_SALT = "test-salt"

# Config de test ANTES de importar nada de statuspage
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-statuspage"
os.environ["REFERRAL_CODE_SALT"] = REFERRAL_SALT
os.environ["REFERRAL_CODE_HASH"] = hashlib.sha256(f"{REFERRAL_SALT}{REFERRAL_CODE}".encode("utf-8")).hexdigest()
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402

from statuspage import models  # noqa: F401,E402
from statuspage.core.security import create_access_token, hash_password  # noqa: E402
from statuspage.db import Base, build_engine, build_session_factory  # noqa: E402
from statuspage.main import create_app  # noqa: E402
from statuspage.models.user import User  # noqa: E402


@pytest.fixture
def engine():
    eng = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    app = create_app(engine=engine)
    with TestClient(app) as c:
        yield c


def _make_user(session_factory, email: str, role: str) -> int:
    session = session_factory()
    try:
        user = User(email=email, name=email.split("@")[0], hashed_password=hash_password("secret123"), role=role)
        session.add(user)
        session.commit()
        return int(user.id)
    finally:
        session.close()


def _bearer(user_id: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user_id)})}"}


@pytest.fixture
def admin_headers(session_factory):
    return _bearer(_make_user(session_factory, "admin@example.com", "admin"))


@pytest.fixture
def viewer_headers(session_factory):
    # rol sin capacidades: sesión válida pero 403 en escrituras
    return _bearer(_make_user(session_factory, "viewer@example.com", "viewer"))
