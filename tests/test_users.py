import pytest
from httpx import AsyncClient, ASGITransport

from noisesentinel.main import app

from conftest import PASSWORD
from helpers import EXHAUST_NOISE, issue_challan


@pytest.mark.asyncio
async def test_list_and_count_users(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        headers = actors["headers"]["admin"]
        judges = await client.get("/api/users", params={"role": "Judge"}, headers=headers)
        search = await client.get("/api/users", params={"search": "ali raza"}, headers=headers)
        unknown_role = await client.get("/api/users", params={"role": "Mayor"}, headers=headers)
        counts = await client.get("/api/users/counts", headers=headers)
        forbidden = await client.get("/api/users", headers=actors["headers"]["court_authority"])

    assert all(u["role"] == "Judge" for u in judges.json()["data"])
    assert "judge1" in [u["username"] for u in judges.json()["data"]]
    assert [u["username"] for u in search.json()["data"]] == ["officer1"]
    assert unknown_role.status_code == 400
    data = counts.json()["data"]
    assert data["total"] == data["active"] + data["inactive"]
    assert data["by_role"]["Admin"] >= 1
    assert data["by_role"]["Police Officer"] >= 1
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_deactivate_and_delete_user(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        headers = actors["headers"]["admin"]
        created = await client.post(
            "/api/auth/create/station-authority",
            json={
                "username": "temp_station",
                "email": "temp_station@noisesentinel.pk",
                "full_name": "Temporary Station Authority",
                "password": PASSWORD,
            },
            headers=headers,
        )
        user_id = created.json()["data"]["user_id"]

        renamed = await client.put(f"/api/users/{user_id}", json={"full_name": "Temp Station"}, headers=headers)
        taken_email = await client.put(
            f"/api/users/{user_id}", json={"email": "admin@noisesentinel.pk"}, headers=headers
        )
        deactivated = await client.put(f"/api/users/{user_id}/deactivate", headers=headers)
        login = await client.post("/api/auth/login", json={"username": "temp_station", "password": PASSWORD})
        deleted = await client.delete(f"/api/users/{user_id}", headers=headers)
        gone = await client.get(f"/api/users/{user_id}", headers=headers)

    assert created.status_code == 201
    assert renamed.json()["data"]["full_name"] == "Temp Station"
    assert taken_email.status_code == 400
    assert deactivated.json()["data"]["is_active"] is False
    assert login.status_code == 400
    assert login.json()["message"] == "User account is deactivated."
    assert deleted.status_code == 200
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_admin_cannot_remove_self(actors):
    admin_id = actors["user_ids"]["admin"]
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        headers = actors["headers"]["admin"]
        deactivate = await client.put(f"/api/users/{admin_id}/deactivate", headers=headers)
        delete = await client.delete(f"/api/users/{admin_id}", headers=headers)

    assert deactivate.json()["message"] == "You cannot deactivate your own account."
    assert delete.json()["message"] == "You cannot delete your own account."


@pytest.mark.asyncio
async def test_officer_with_challans_cannot_be_deleted(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await issue_challan(client, actors["headers"]["officer"], actors["violations"][EXHAUST_NOISE])
        response = await client.delete(
            f"/api/users/{actors['user_ids']['officer']}", headers=actors["headers"]["admin"]
        )

    assert response.status_code == 400
    assert "Deactivate the account instead." in response.json()["message"]


@pytest.mark.asyncio
async def test_station_authority_updates_officer(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        headers = actors["headers"]["station_authority"]
        created = await client.post(
            "/api/auth/create/police-officer",
            json={
                "username": "officer4",
                "email": "officer4@noisesentinel.pk",
                "full_name": "Hamza Sheikh",
                "password": PASSWORD,
                "station_id": actors["station_id"],
                "cnic": "35202-7777777-7",
                "badge_number": "LHR-1004",
            },
            headers=headers,
        )
        officer_id = created.json()["data"]["officer_id"]

        updated = await client.put(
            f"/api/users/officers/{officer_id}",
            json={
                "full_name": "Hamza Ali Sheikh",
                "email": "hamza.sheikh@noisesentinel.pk",
                "contact_no": "0300-1234567",
                "rank": "Sub-Inspector",
                "badge_number": "lhr-1004",
                "is_investigation_officer": True,
            },
            headers=headers,
        )
        taken_badge = await client.put(
            f"/api/users/officers/{officer_id}", json={"badge_number": "lhr-1001"}, headers=headers
        )
        taken_cnic = await client.put(
            f"/api/users/officers/{officer_id}", json={"cnic": "35202-1111111-1"}, headers=headers
        )
        missing = await client.put("/api/users/officers/9999", json={"rank": "Inspector"}, headers=headers)
        listed = await client.get("/api/users/police-officers", headers=headers)
        court_side = await client.put(
            f"/api/users/officers/{officer_id}", json={"rank": "Inspector"}, headers=actors["headers"]["court_authority"]
        )
        officer_side = await client.get("/api/users/police-officers", headers=actors["headers"]["officer"])

    assert created.status_code == 201
    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["full_name"] == "Hamza Ali Sheikh"
    assert data["email"] == "hamza.sheikh@noisesentinel.pk"
    assert data["contact_no"] == "0300-1234567"
    assert data["rank"] == "Sub-Inspector"
    assert data["badge_number"] == "lhr-1004"
    assert data["is_investigation_officer"] is True
    assert data["cnic"] == "35202-7777777-7"
    assert taken_badge.status_code == 400
    assert taken_badge.json()["message"] == "Badge number lhr-1001 is already assigned."
    assert taken_cnic.status_code == 400
    assert taken_cnic.json()["message"] == "An officer with CNIC 35202-1111111-1 already exists."
    assert missing.status_code == 404
    officers = {o["officer_id"]: o for o in listed.json()["data"]}
    assert officers[officer_id]["rank"] == "Sub-Inspector"
    assert officers[actors["officer_id"]]["badge_number"] == "LHR-1001"
    assert court_side.status_code == 403
    assert officer_side.status_code == 403


@pytest.mark.asyncio
async def test_court_authority_updates_judge(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        headers = actors["headers"]["court_authority"]
        created = await client.post(
            "/api/auth/create/judge",
            json={
                "username": "judge3",
                "email": "judge3@noisesentinel.pk",
                "full_name": "Justice Farah Naz",
                "password": PASSWORD,
                "court_id": actors["court_id"],
                "cnic": "35202-8888888-8",
            },
            headers=headers,
        )
        judge_id = created.json()["data"]["judge_id"]

        updated = await client.put(
            f"/api/users/judges/{judge_id}",
            json={"rank": "Senior Civil Judge", "contact_no": "042-99203344", "cnic": "35202-8888888-9"},
            headers=headers,
        )
        taken_cnic = await client.put(
            f"/api/users/judges/{judge_id}", json={"cnic": "35202-2222222-2"}, headers=headers
        )
        taken_email = await client.put(
            f"/api/users/judges/{judge_id}", json={"email": "judge1@noisesentinel.pk"}, headers=headers
        )
        listed = await client.get("/api/users/judges", headers=headers)
        station_side = await client.get("/api/users/judges", headers=actors["headers"]["station_authority"])
        judge_side = await client.put(
            f"/api/users/judges/{judge_id}", json={"rank": "District Judge"}, headers=actors["headers"]["judge"]
        )

    assert created.status_code == 201
    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["rank"] == "Senior Civil Judge"
    assert data["contact_no"] == "042-99203344"
    assert data["cnic"] == "35202-8888888-9"
    assert data["full_name"] == "Justice Farah Naz"
    assert data["court_name"] == "Civil Court Lahore"
    assert taken_cnic.status_code == 400
    assert taken_cnic.json()["message"] == "A judge with CNIC 35202-2222222-2 already exists."
    assert taken_email.status_code == 400
    judges = {j["judge_id"]: j for j in listed.json()["data"]}
    assert judges[judge_id]["rank"] == "Senior Civil Judge"
    assert judges[actors["judge_id"]]["full_name"] == "Justice Ayesha Khan"
    assert station_side.status_code == 403
    assert judge_side.status_code == 403
