"""Registro con código, login OAuth2 y /auth/me."""

from conftest import REFERRAL_CODE

from statuspage.core.bootstrap import seed_admin_user
from statuspage.core.security import hash_referral_code, normalize_email, verify_referral_code
from statuspage.models import User


def _register(client, **overrides):
    body = {
        "name": "Ops",
        "email": "ops@example.com",
        "password": "hunter22",
        "referralCode": REFERRAL_CODE,
    }
    body.update(overrides)
    return client.post("/auth/register", json=body)


def test_referral_code_check():
    assert verify_referral_code(REFERRAL_CODE)
    assert not verify_referral_code("WRONGCODE")
    # fuera de rango de longitud, aunque coincidiera el hash
    assert not verify_referral_code("short")
    assert not verify_referral_code("x" * 17)
    assert hash_referral_code("abc", salt="s") == hash_referral_code("abc", salt="s")
    assert hash_referral_code("abc", salt="s") != hash_referral_code("abc", salt="t")
    assert normalize_email("  Ops@Example.COM ") == "ops@example.com"


def test_register_creates_admin(client):
    resp = _register(client)
    assert resp.status_code == 201, resp.text
    user = resp.json()
    assert user["email"] == "ops@example.com"
    assert user["role"] == "admin"
    assert "hashedPassword" not in user and "password" not in user


def test_register_wrong_code_is_401(client):
    resp = _register(client, referralCode="NOTTHECODE")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid referral code"}


def test_register_duplicate_email_is_400(client):
    assert _register(client).status_code == 201
    resp = _register(client, name="Other")
    assert resp.status_code == 400


def test_register_validates_body(client):
    resp = _register(client, password="123", email="not-an-email")
    assert resp.status_code == 400
    paths = {i["path"] for i in resp.json()["error"]}
    assert paths == {"password", "email"}


def test_login_and_me(client):
    _register(client)

    resp = client.post("/auth/login", data={"username": "ops@example.com", "password": "hunter22"})
    assert resp.status_code == 200
    token = resp.json()
    assert token["token_type"] == "bearer"
    assert token["expires_in"] > 0

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token['access_token']}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Ops"

    # el token recién emitido abre las escrituras
    resp = client.post(
        "/services",
        json={"name": "API"},
        headers={"Authorization": f"Bearer {token['access_token']}"},
    )
    assert resp.status_code == 201


def test_login_bad_password(client):
    _register(client)
    resp = client.post("/auth/login", data={"username": "ops@example.com", "password": "nope-nope"})
    assert resp.status_code == 401
    assert client.get("/auth/me").status_code == 401


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_duplicate_email_wins_over_bad_code(client):
    assert _register(client).status_code == 201
    resp = _register(client, referralCode="NOTTHECODE")
    assert resp.status_code == 400


def test_email_case_is_normalized(client):
    resp = _register(client, email="Ops@Example.COM")
    assert resp.status_code == 201
    assert resp.json()["email"] == "ops@example.com"

    assert _register(client, email="OPS@example.com").status_code == 400

    resp = client.post("/auth/login", data={"username": "Ops@Example.COM", "password": "hunter22"})
    assert resp.status_code == 200
    resp = client.post("/auth/login", data={"username": "ops@example.com", "password": "hunter22"})
    assert resp.status_code == 200


def test_seeded_admin_email_is_normalized(session_factory):
    session = session_factory()
    try:
        seed_admin_user(session, "Root@Example.com", "secret123")
        seed_admin_user(session, "root@example.com", "other-pass")
        users = session.query(User).filter(User.email == "root@example.com").all()
        assert len(users) == 1
    finally:
        session.close()
