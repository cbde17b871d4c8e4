from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient, ASGITransport
from noisesentinel.main import app

from conftest import PASSWORD


@pytest.mark.asyncio
async def test_login_valid_credentials():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/auth/login",
            json={"username": "OFFICER1", "password": PASSWORD},
        )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert data["data"]["token_type"] == "Bearer"
    assert data["data"]["token"]
    assert data["data"]["user"]["username"] == "officer1"
    assert data["data"]["user"]["role"] == "Police Officer"


@pytest.mark.asyncio
async def test_login_invalid_password():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/auth/login",
            json={"username": "officer1", "password": "Wrong@1234"},
        )

    assert response.status_code == 400
    data = response.json()
    assert data["status"] == "error"
    assert data["message"] == "Invalid username or password."


@pytest.mark.asyncio
async def test_login_nonexistent_user():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/auth/login",
            json={"username": "nobody", "password": PASSWORD},
        )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid username or password."


@pytest.mark.asyncio
async def test_login_token_grants_access():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        login = await client.post("/api/auth/login", json={"username": "judge1", "password": PASSWORD})
        token = login.json()["data"]["token"]
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == "Judge"
    assert data["judge"]["court_name"] == "Civil Court Lahore"
    assert data["officer"] is None


@pytest.mark.asyncio
async def test_me_requires_token():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        missing = await client.get("/api/auth/me")
        invalid = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert missing.status_code == 401
    assert missing.json()["status"] == "error"
    assert invalid.status_code == 401
    assert invalid.json()["message"] == "Invalid or expired token."


@pytest.mark.asyncio
async def test_register_admin_only_once():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/auth/register-admin",
            json={
                "username": "second_admin",
                "email": "second_admin@noisesentinel.pk",
                "full_name": "Second Admin",
                "password": PASSWORD,
            },
        )

    assert response.status_code == 400
    assert "administrator already exists" in response.json()["message"]


@pytest.mark.asyncio
async def test_weak_password_returns_field_errors(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/auth/create/court-authority",
            json={
                "username": "weak_user",
                "email": "weak_user@noisesentinel.pk",
                "full_name": "Weak Password",
                "password": "password",
            },
            headers=actors["headers"]["admin"],
        )

    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Validation failed."
    assert any(error.startswith("password:") for error in data["errors"])


@pytest.mark.asyncio
async def test_create_station_authority_requires_admin(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/auth/create/station-authority",
            json={
                "username": "sneaky",
                "email": "sneaky@noisesentinel.pk",
                "full_name": "Sneaky Officer",
                "password": PASSWORD,
            },
            headers=actors["headers"]["officer"],
        )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_station_authority_creates_officer(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/auth/create/police-officer",
            json={
                "username": "officer2",
                "email": "officer2@noisesentinel.pk",
                "full_name": "Sana Iqbal",
                "password": PASSWORD,
                "station_id": actors["station_id"],
                "cnic": "35202-3333333-3",
                "badge_number": "LHR-1002",
            },
            headers=actors["headers"]["station_authority"],
        )
        duplicate = await client.post(
            "/api/auth/create/police-officer",
            json={
                "username": "officer3",
                "email": "officer3@noisesentinel.pk",
                "full_name": "Duplicate Badge",
                "password": PASSWORD,
                "station_id": actors["station_id"],
                "cnic": "35202-4444444-4",
                "badge_number": "lhr-1002",
            },
            headers=actors["headers"]["station_authority"],
        )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["station_name"] == "Gulberg Traffic Police Station"
    assert data["posting_date"] is not None
    assert duplicate.status_code == 400
    assert "already assigned" in duplicate.json()["message"]


@pytest.mark.asyncio
async def test_create_judge_for_unknown_court(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/auth/create/judge",
            json={
                "username": "judge_nowhere",
                "email": "judge_nowhere@noisesentinel.pk",
                "full_name": "Judge Nowhere",
                "password": PASSWORD,
                "court_id": 9999,
                "cnic": "35202-6666666-6",
            },
            headers=actors["headers"]["court_authority"],
        )

    assert response.status_code == 404
    assert response.json()["message"] == "Court not found."


@pytest.mark.asyncio
async def test_change_password_and_forgot_password_flow(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        created = await client.post(
            "/api/auth/create/court-authority",
            json={
                "username": "reset_user",
                "email": "reset_user@noisesentinel.pk",
                "full_name": "Reset User",
                "password": PASSWORD,
            },
            headers=actors["headers"]["admin"],
        )
        assert created.status_code == 201

        login = await client.post("/api/auth/login", json={"username": "reset_user", "password": PASSWORD})
        headers = {"Authorization": f"Bearer {login.json()['data']['token']}"}
        same = await client.post(
            "/api/auth/change-password",
            json={"current_password": PASSWORD, "new_password": PASSWORD},
            headers=headers,
        )
        assert same.status_code == 400

        with patch("noisesentinel.services.auth.send_password_reset_otp", new_callable=AsyncMock) as mock_send:
            forgot = await client.post("/api/auth/forgot-password", json={"email": "reset_user@noisesentinel.pk"})
        assert forgot.status_code == 200
        otp = mock_send.await_args.args[2]

        wrong = await client.post(
            "/api/auth/verify-reset-otp",
            json={"email": "reset_user@noisesentinel.pk", "otp": "000000" if otp != "000000" else "111111"},
        )
        assert wrong.status_code == 400
        assert wrong.json()["message"] == "Invalid OTP."

        reset = await client.post(
            "/api/auth/reset-password",
            json={"email": "reset_user@noisesentinel.pk", "otp": otp, "new_password": "N3wSecret@99"},
        )
        assert reset.status_code == 200

        old_login = await client.post("/api/auth/login", json={"username": "reset_user", "password": PASSWORD})
        new_login = await client.post("/api/auth/login", json={"username": "reset_user", "password": "N3wSecret@99"})
        reused = await client.post(
            "/api/auth/reset-password",
            json={"email": "reset_user@noisesentinel.pk", "otp": otp, "new_password": "An0ther@Pass"},
        )

    assert old_login.status_code == 400
    assert new_login.status_code == 200
    assert reused.status_code == 400


@pytest.mark.asyncio
async def test_forgot_password_unknown_email_is_silent():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        with patch("noisesentinel.services.auth.send_password_reset_otp", new_callable=AsyncMock) as mock_send:
            response = await client.post("/api/auth/forgot-password", json={"email": "ghost@noisesentinel.pk"})

    assert response.status_code == 200
    mock_send.assert_not_awaited()
