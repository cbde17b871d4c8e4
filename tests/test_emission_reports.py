from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import update

from noisesentinel.database import async_session
from noisesentinel.main import app
from noisesentinel.models.emission_report import EmissionReport

from helpers import EXHAUST_NOISE, create_report, issue_challan, next_reading_time


@pytest.mark.asyncio
async def test_create_report_flags_violation(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/emissionreport/create",
            json={
                "device_id": actors["device_id"],
                "co": 1.234,
                "sound_level_dba": 96.456,
                "test_datetime": next_reading_time(),
                "ml_classification": "Modified exhaust",
            },
            headers=actors["headers"]["officer"],
        )

    assert response.status_code == 201
    body = response.json()
    assert body["message"].startswith("VIOLATION DETECTED! Sound level 96.46 dBA exceeds legal limit of 85 dBA.")
    assert "Ready to create Challan." in body["message"]
    data = body["data"]
    assert data["is_violation"] is True
    assert data["device_name"] == "NS-DEVICE-001"
    assert data["co2"] is None
    assert data["digital_signature_value"]


@pytest.mark.asyncio
async def test_create_report_within_limit(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        data = await create_report(client, actors["headers"]["officer"], actors["device_id"], sound_level_dba=72)
        listed = await client.get("/api/emissionreport/violations", headers=actors["headers"]["judge"])

    assert data["is_violation"] is False
    assert data["emission_report_id"] not in [r["emission_report_id"] for r in listed.json()["data"]]


@pytest.mark.asyncio
async def test_future_reading_rejected(actors):
    future = datetime.now(timezone.utc) + timedelta(hours=1)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/emissionreport/create",
            json={"device_id": actors["device_id"], "sound_level_dba": 90, "test_datetime": future.isoformat()},
            headers=actors["headers"]["officer"],
        )

    assert response.status_code == 400
    assert response.json()["message"] == "Test date/time cannot be in the future."


@pytest.mark.asyncio
async def test_duplicate_reading_rejected(actors):
    first_time = datetime.fromisoformat(next_reading_time())
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        first = await client.post(
            "/api/emissionreport/create",
            json={"device_id": actors["device_id"], "sound_level_dba": 91, "test_datetime": first_time.isoformat()},
            headers=actors["headers"]["officer"],
        )
        second = await client.post(
            "/api/emissionreport/create",
            json={
                "device_id": actors["device_id"],
                "sound_level_dba": 93,
                "test_datetime": (first_time + timedelta(minutes=2)).isoformat(),
            },
            headers=actors["headers"]["officer"],
        )

    assert first.status_code == 201
    assert second.status_code == 400
    assert "Possible duplicate detected" in second.json()["message"]


@pytest.mark.asyncio
async def test_only_officers_submit_reports(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/emissionreport/create",
            json={"device_id": actors["device_id"], "sound_level_dba": 90, "test_datetime": next_reading_time()},
            headers=actors["headers"]["station_authority"],
        )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unknown_device_returns_404(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/emissionreport/create",
            json={"device_id": 9999, "sound_level_dba": 90, "test_datetime": next_reading_time()},
            headers=actors["headers"]["officer"],
        )

    assert response.status_code == 404
    assert response.json()["message"] == "IoT device not found."


@pytest.mark.asyncio
async def test_verify_detects_tampering(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        report = await create_report(client, actors["headers"]["officer"], actors["device_id"], sound_level_dba=99.1)
        report_id = report["emission_report_id"]

        intact = await client.get(f"/api/emissionreport/{report_id}/verify", headers=actors["headers"]["judge"])

        async with async_session() as db:
            await db.execute(
                update(EmissionReport).where(EmissionReport.id == report_id).values(sound_level_dba=80)
            )
            await db.commit()

        tampered = await client.get(f"/api/emissionreport/{report_id}/verify", headers=actors["headers"]["judge"])

    assert intact.status_code == 200
    assert intact.json()["data"]["is_authentic"] is True
    assert intact.json()["data"]["data_integrity"] == "Intact - No tampering detected"

    data = tampered.json()["data"]
    assert data["is_authentic"] is False
    assert data["admissible_in_court"] is False
    assert data["data_integrity"] == "COMPROMISED - Data has been modified"
    assert data["stored_signature"] != data["computed_signature"]


@pytest.mark.asyncio
async def test_pending_challans_excludes_cited_reports(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        headers = actors["headers"]["officer"]
        cited = await create_report(client, headers, actors["device_id"])
        pending = await create_report(client, headers, actors["device_id"])
        await issue_challan(
            client, headers, actors["violations"][EXHAUST_NOISE], report_id=cited["emission_report_id"]
        )
        response = await client.get("/api/emissionreport/pending-challans", headers=headers)

    ids = [r["emission_report_id"] for r in response.json()["data"]]
    assert pending["emission_report_id"] in ids
    assert cited["emission_report_id"] not in ids


@pytest.mark.asyncio
async def test_list_reports_by_device_and_bad_date_range(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        by_device = await client.get(
            f"/api/emissionreport/device/{actors['device_id']}", headers=actors["headers"]["officer"]
        )
        bad_range = await client.get(
            "/api/emissionreport/daterange",
            params={"start": "2026-02-01T00:00:00", "end": "2026-01-01T00:00:00"},
            headers=actors["headers"]["officer"],
        )

    assert by_device.status_code == 200
    assert all(r["device_id"] == actors["device_id"] for r in by_device.json()["data"])
    assert bad_range.status_code == 400
    assert bad_range.json()["message"] == "Start date must be before end date."


@pytest.mark.asyncio
async def test_out_of_range_gas_reading_rejected(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        huge = await client.post(
            "/api/emissionreport/create",
            json={"device_id": actors["device_id"], "co": 1e30, "sound_level_dba": 90,
                  "test_datetime": next_reading_time()},
            headers=actors["headers"]["officer"],
        )
        too_wide = await client.post(
            "/api/emissionreport/create",
            json={"device_id": actors["device_id"], "nox": "12345678901234567.89", "sound_level_dba": 90,
                  "test_datetime": next_reading_time()},
            headers=actors["headers"]["officer"],
        )

    assert huge.status_code == 400
    assert any(error.startswith("co:") for error in huge.json()["errors"])
    assert too_wide.status_code == 400
    assert any(error.startswith("nox:") for error in too_wide.json()["errors"])


@pytest.mark.asyncio
async def test_largest_gas_reading_still_verifies(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/emissionreport/create",
            json={
                "device_id": actors["device_id"],
                "co": "99999999.99",
                "co2": "0.005",
                "sound_level_dba": 88,
                "test_datetime": next_reading_time(),
            },
            headers=actors["headers"]["officer"],
        )
        report_id = response.json()["data"]["emission_report_id"]
        verified = await client.get(f"/api/emissionreport/{report_id}/verify", headers=actors["headers"]["judge"])

    assert response.status_code == 201
    assert verified.json()["data"]["is_authentic"] is True
