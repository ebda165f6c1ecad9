import pytest
from sqlmodel import select

from storefront import wiring
from storefront.models.user import User

API = "/api/v1"


@pytest.fixture
def outbox(monkeypatch):
    sent = []

    def fake_sender(**kwargs):
        sent.append(kwargs)

    monkeypatch.setattr(wiring.notification_service, "sender", fake_sender)
    return sent


def _signup(client, email="dana@example.com", password="hunter22"):
    return client.post(
        f"{API}/auth/signup",
        json={"email": email, "password": password, "confirm_password": password},
    )


def test_signup_login_and_me(client, outbox):
    r = _signup(client)
    assert r.status_code == 201
    assert r.json()["role"] == "user"
    assert r.json()["name"] == "dana"
    assert [m["subject"] for m in outbox] == ["Regarding Signup"]

    r = client.post(f"{API}/auth/login", json={"email": "dana@example.com", "password": "hunter22"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    me = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "dana@example.com"


def test_signup_duplicate_email(client, outbox):
    _signup(client)
    r = _signup(client, email="DANA@example.com")
    assert r.status_code == 422
    assert "exists already" in r.json()["detail"]


def test_signup_password_mismatch(client, outbox):
    r = client.post(
        f"{API}/auth/signup",
        json={"email": "eve@example.com", "password": "abcde", "confirm_password": "abcdf"},
    )
    assert r.status_code == 422
    assert outbox == []


def test_signup_succeeds_when_mail_fails(client, monkeypatch):
    def broken_sender(**kwargs):
        raise RuntimeError("SMTP is not configured")

    monkeypatch.setattr(wiring.notification_service, "sender", broken_sender)

    assert _signup(client).status_code == 201


def test_login_wrong_password(client, outbox):
    _signup(client)
    r = client.post(f"{API}/auth/login", json={"email": "dana@example.com", "password": "nope!"})
    assert r.status_code == 401


def test_invalid_token(client):
    r = client.get(f"{API}/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_password_reset_flow(client, session, outbox):
    _signup(client)

    r = client.post(f"{API}/auth/reset", json={"email": "dana@example.com"})
    assert r.status_code == 200
    reset_mail = outbox[-1]
    assert reset_mail["subject"] == "Password Reset"

    user = session.exec(select(User).where(User.email == "dana@example.com")).one()
    token = user.reset_token
    assert token in reset_mail["html_body"]

    r = client.get(f"{API}/auth/reset/{token}")
    assert r.status_code == 200
    assert r.json()["user_id"] == str(user.id)

    r = client.post(
        f"{API}/auth/new-password",
        json={"user_id": str(user.id), "token": token, "password": "brandnew"},
    )
    assert r.status_code == 200

    # Single use.
    assert client.get(f"{API}/auth/reset/{token}").status_code == 404

    r = client.post(f"{API}/auth/login", json={"email": "dana@example.com", "password": "brandnew"})
    assert r.status_code == 200


def test_reset_unknown_email(client, outbox):
    r = client.post(f"{API}/auth/reset", json={"email": "ghost@example.com"})
    assert r.status_code == 404
    assert outbox == []


def test_admin_changes_role(client, make_user, auth_headers):
    admin = make_user("admin@example.com", role="admin")
    target = make_user("frank@example.com")

    r = client.patch(
        f"{API}/users/{target.id}/role",
        json={"role": "admin"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 200
    assert r.json()["role"] == "admin"

    r = client.patch(
        f"{API}/users/{target.id}/role",
        json={"role": "user"},
        headers=auth_headers(make_user("gina@example.com")),
    )
    assert r.status_code == 403
