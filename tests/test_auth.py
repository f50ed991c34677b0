"""
Tests for session verification, user sync, role guards and identity boot.
"""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from portal.core.config import RATE_LIMIT_MAX_REQUESTS
from portal.core.errors import IdentityInitError
from portal.core.identity import IdentityConfig, init_identity
from portal.core.security import create_access_token
from portal.db.models.enums import AuthMethod, UserRole
from portal.db.models.user import User
from portal.main import create_app

from helpers import auth_headers, make_user


def token_for(sub, email, auth_method="passwordless", **extra):
    return {"Authorization": f"Bearer {create_access_token({'sub': sub, 'email': email, 'auth_method': auth_method, **extra})}"}


def test_first_request_syncs_new_hacker(client, db_session):
    response = client.get("/auth/me", headers=token_for("st-new", "new@example.com"))
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "new@example.com"
    assert data["role"] == "hacker"
    assert data["auth_method"] == "passwordless"

    assert db_session.query(User).filter(User.identity_user_id == "st-new").count() == 1

    # Second request reuses the same row
    client.get("/auth/me", headers=token_for("st-new", "new@example.com"))
    assert db_session.query(User).count() == 1


def test_auth_method_mismatch(client, db_session):
    make_user(db_session, "ada@example.com", auth_method=AuthMethod.PASSWORDLESS)

    response = client.get("/auth/me", headers=token_for("google-ada", "ada@example.com", auth_method="google"))
    assert response.status_code == 409
    assert response.json() == {
        "error": "This email is registered with magic link sign-in. Please use the email option instead."
    }


def test_google_picture_refreshed(client, db_session):
    user = make_user(db_session, "g@example.com", auth_method=AuthMethod.GOOGLE)

    response = client.get("/auth/me", headers=auth_headers(user, picture="https://img.example.com/a.png"))
    assert response.json()["profile_picture_url"] == "https://img.example.com/a.png"

    response = client.get("/auth/me", headers=auth_headers(user, picture="https://img.example.com/b.png"))
    assert response.json()["profile_picture_url"] == "https://img.example.com/b.png"


def test_invalid_and_expired_tokens(client, hacker):
    response = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid session"}

    expired = create_access_token(
        {"sub": hacker.identity_user_id, "email": hacker.email, "auth_method": "passwordless"},
        expires_delta=timedelta(minutes=-5),
    )
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401

    missing_claims = create_access_token({"sub": "st-x"})
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {missing_claims}"})
    assert response.status_code == 401


def test_check_email(client, db_session):
    make_user(db_session, "g@example.com", auth_method=AuthMethod.GOOGLE)

    response = client.get("/auth/check-email", params={"email": "G@example.com"})
    assert response.json() == {"exists": True, "auth_method": "google"}

    response = client.get("/auth/check-email", params={"email": "nobody@example.com"})
    assert response.json() == {"exists": False, "auth_method": None}

    response = client.get("/auth/check-email", params={"email": "not-an-email"})
    assert response.status_code == 400


def test_check_email_rate_limited(client):
    for _ in range(RATE_LIMIT_MAX_REQUESTS):
        assert client.get("/auth/check-email", params={"email": "a@example.com"}).status_code == 200

    response = client.get("/auth/check-email", params={"email": "a@example.com"})
    assert response.status_code == 429
    assert response.json()["error"].startswith("Rate limit exceeded")


@pytest.mark.parametrize("role,path,expected", [
    (UserRole.HACKER, "/v1/applications/me", 200),
    (UserRole.HACKER, "/v1/admin/applications/stats", 403),
    (UserRole.ADMIN, "/v1/admin/applications/stats", 200),
    (UserRole.ADMIN, "/v1/superadmin/settings/tabs", 403),
    (UserRole.SUPER_ADMIN, "/v1/superadmin/settings/tabs", 200),
    (UserRole.SUPER_ADMIN, "/v1/applications/me", 200),
])
def test_role_levels(client, db_session, role, path, expected):
    user = make_user(db_session, f"{role.value}@example.com", role=role)
    assert client.get(path, headers=auth_headers(user)).status_code == expected


def valid_identity(**overrides):
    data = {
        "app_name": "Hackathon Portal",
        "api_domain": "http://localhost:8080",
        "website_domain": "http://localhost:5173",
        "connection_uri": "http://localhost:3567",
    }
    data.update(overrides)
    return IdentityConfig(**data)


def test_init_identity_accepts_valid_config():
    assert init_identity(valid_identity()).app_name == "Hackathon Portal"


@pytest.mark.parametrize("overrides", [
    {"app_name": " "},
    {"connection_uri": "localhost:3567"},
    {"api_domain": ""},
    {"api_base_path": "auth"},
])
def test_init_identity_rejects_bad_config(overrides):
    with pytest.raises(IdentityInitError):
        init_identity(valid_identity(**overrides))


def test_bad_identity_config_aborts_boot(monkeypatch):
    monkeypatch.setattr("portal.main.setup_logging", lambda *args, **kwargs: None)
    app = create_app(identity_settings=valid_identity(connection_uri="not a url"))

    with pytest.raises(IdentityInitError):
        with TestClient(app):
            pass
