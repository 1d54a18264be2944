from datetime import timedelta

import pytest

from bistro.core.config import AdminCredentials
from bistro.core.exceptions import DuplicateUser, Unauthorized
from bistro.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from bistro.models import UserRole
from bistro.schemas import LoginRequest, RegisterRequest
from bistro.services.identity import IdentityService

from conftest import ADMIN_MOBILE, ADMIN_PASSWORD, bearer, make_user, register

CREDS = AdminCredentials(mobile_number="9000000009", password="letmein")


# =============================================================================
# SECURITY PRIMITIVES
# =============================================================================

def test_password_hash_round_trip():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_against_garbage_hash():
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_token_carries_user_and_role():
    claims = decode_access_token(create_access_token(7, "admin"))
    assert claims.user_id == 7
    assert claims.role == "admin"


def test_expired_token_rejected():
    token = create_access_token(7, "user", expires_delta=timedelta(seconds=-5))
    with pytest.raises(Unauthorized, match="expired"):
        decode_access_token(token)


def test_tampered_token_rejected():
    token = create_access_token(7, "user")
    with pytest.raises(Unauthorized):
        decode_access_token(token[:-2] + "xx")


def test_admin_credentials_matching():
    assert CREDS.matches("9000000009", "letmein")
    assert not CREDS.matches("9000000009", "nope")
    assert not AdminCredentials(None, None).matches("", "")
    assert not CREDS.matches("9000000009", "letmein2")
    assert not CREDS.matches("9000000009", "l\u00e9tmein")


# =============================================================================
# IDENTITY SERVICE
# =============================================================================

async def test_register_then_login(db):
    service = IdentityService(db, CREDS)
    user = await service.register(
        RegisterRequest(full_name="Asha", mobile_number="9876543210", password="secret123")
    )

    assert user.role == UserRole.USER
    assert user.password_hash != "secret123"

    logged_in = await service.login(LoginRequest(mobile_number="9876543210", password="secret123"))
    assert logged_in.id == user.id

    with pytest.raises(Unauthorized):
        await service.login(LoginRequest(mobile_number="9876543210", password="wrong"))
    with pytest.raises(Unauthorized):
        await service.login(LoginRequest(mobile_number="9999999999", password="secret123"))


async def test_duplicate_registration(db):
    service = IdentityService(db, CREDS)
    payload = RegisterRequest(full_name="Asha", mobile_number="9876543210", password="secret123")
    await service.register(payload)

    with pytest.raises(DuplicateUser):
        await service.register(payload)


async def test_admin_is_provisioned_once(db):
    service = IdentityService(db, CREDS)
    payload = LoginRequest(mobile_number="9000000009", password="letmein")

    first = await service.admin_login(payload)
    second = await service.admin_login(payload)

    assert first.role == UserRole.ADMIN
    assert first.full_name == "Admin"
    assert second.id == first.id


async def test_admin_login_rejects_other_credentials(db):
    service = IdentityService(db, CREDS)
    with pytest.raises(Unauthorized):
        await service.admin_login(LoginRequest(mobile_number="9000000009", password="guess"))


async def test_admin_login_disabled_without_configuration(db):
    service = IdentityService(db, AdminCredentials(None, None))
    with pytest.raises(Unauthorized):
        await service.admin_login(LoginRequest(mobile_number="9000000009", password="letmein"))


async def test_admin_mobile_is_reserved_for_registration(db):
    service = IdentityService(db, CREDS)
    with pytest.raises(DuplicateUser):
        await service.register(
            RegisterRequest(full_name="Owner", mobile_number="9000000009", password="secret123")
        )


async def test_promoted_account_loses_its_own_password(db):
    # Account created before the admin pair was configured
    legacy = await make_user(db, mobile="9000000009", name="Owner")
    service = IdentityService(db, CREDS)

    admin = await service.admin_login(LoginRequest(mobile_number="9000000009", password="letmein"))

    assert admin.id == legacy.id
    assert admin.role == UserRole.ADMIN
    assert admin.full_name == "Admin"
    with pytest.raises(Unauthorized):
        await service.login(LoginRequest(mobile_number="9000000009", password="secret123"))
    assert (await service.login(LoginRequest(mobile_number="9000000009", password="letmein"))).id == admin.id


# =============================================================================
# HTTP
# =============================================================================

async def test_register_over_http(client):
    data = await register(client)

    assert data["user"]["fullName"] == "Asha Rao"
    assert data["user"]["role"] == "user"
    assert "password" not in data["user"]
    assert "passwordHash" not in data["user"]
    assert data["token"]


async def test_duplicate_registration_over_http(client):
    await register(client)
    response = await client.post(
        "/api/auth/register",
        json={"fullName": "Someone", "mobileNumber": "9876543210", "password": "secret123"},
    )

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "User with this mobile number already exists",
    }


async def test_register_missing_fields(client):
    response = await client.post("/api/auth/register", json={"mobileNumber": "9876543210"})
    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_login_sets_httponly_cookie(client):
    await register(client)
    response = await client.post(
        "/api/auth/login", json={"mobileNumber": "9876543210", "password": "secret123"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    cookie = response.headers["set-cookie"]
    assert cookie.startswith(f"token={body['data']['token']}")
    assert "httponly" in cookie.lower()


async def test_login_with_wrong_password(client):
    await register(client)
    response = await client.post(
        "/api/auth/login", json={"mobileNumber": "9876543210", "password": "nope123"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


async def test_me_accepts_cookie_or_bearer(client):
    token = (await register(client))["token"]

    via_cookie = await client.get("/api/auth/me", headers={"Cookie": f"token={token}"})
    via_bearer = await client.get("/api/auth/me", headers=bearer(token))

    assert via_cookie.status_code == 200
    assert via_bearer.status_code == 200
    assert via_cookie.json()["data"]["mobileNumber"] == "9876543210"


async def test_me_without_or_with_bad_token(client):
    assert (await client.get("/api/auth/me")).status_code == 401
    assert (await client.get("/api/auth/me", headers=bearer("garbage"))).status_code == 401

    ghost = create_access_token(4242, "user")
    assert (await client.get("/api/auth/me", headers=bearer(ghost))).status_code == 401


async def test_admin_login_over_http(client):
    response = await client.post(
        "/api/auth/admin-login",
        json={"mobileNumber": ADMIN_MOBILE, "password": ADMIN_PASSWORD},
    )

    assert response.status_code == 200
    assert response.json()["data"]["user"]["role"] == "admin"
    assert "set-cookie" in response.headers

    rejected = await client.post(
        "/api/auth/admin-login", json={"mobileNumber": ADMIN_MOBILE, "password": "wrong"}
    )
    assert rejected.status_code == 401
    assert rejected.json()["message"] == "Invalid admin credentials"


async def test_logout_clears_cookie(client):
    token = (await register(client))["token"]

    assert (await client.post("/api/auth/logout")).status_code == 401

    response = await client.post("/api/auth/logout", headers=bearer(token))
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logged out successfully"}
    cookie = response.headers["set-cookie"].lower()
    assert cookie.startswith('token=""') or cookie.startswith("token=;")
    assert "max-age=0" in cookie


async def test_admin_mobile_cannot_be_claimed_over_http(client):
    claim = await client.post(
        "/api/auth/register",
        json={"fullName": "Impostor", "mobileNumber": ADMIN_MOBILE, "password": "attacker-pw"},
    )
    assert claim.status_code == 400

    admin = await client.post(
        "/api/auth/admin-login",
        json={"mobileNumber": ADMIN_MOBILE, "password": ADMIN_PASSWORD},
    )
    assert admin.status_code == 200
    client.cookies.clear()

    attempt = await client.post(
        "/api/auth/login", json={"mobileNumber": ADMIN_MOBILE, "password": "attacker-pw"}
    )
    assert attempt.status_code == 401
