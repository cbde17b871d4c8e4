from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient, ASGITransport

from noisesentinel.main import app
from noisesentinel.services.public_status import mask_email

from helpers import EXHAUST_NOISE, create_report, issue_challan, open_case, unique_cnic, unique_plate


def test_mask_email():
    assert mask_email("usman.tariq@gmail.com") == "u***q@gmail.com"
    assert mask_email("ab@gmail.com") == "ab***@gmail.com"


async def _verified_token(client, plate, cnic, email) -> str:
    lookup = {"vehicle_no": plate, "cnic": cnic, "email": email}
    with patch("noisesentinel.services.public_status.send_status_otp", new_callable=AsyncMock) as mock_send:
        requested = await client.post("/api/public/request-status-otp", json=lookup)
    assert requested.status_code == 200, requested.text
    otp = mock_send.await_args.args[2]

    verified = await client.post("/api/public/verify-status-otp", json={**lookup, "otp": otp})
    assert verified.status_code == 200, verified.text
    return verified.json()["data"]["access_token"]


@pytest.mark.asyncio
async def test_case_status_flow(actors):
    email = "nadia.hussain@gmail.com"
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        case = await open_case(client, actors, email=email)
        plate, cnic = case["vehicle_plate_number"], case["accused_cnic"]

        with patch("noisesentinel.services.public_status.send_status_otp", new_callable=AsyncMock) as mock_send:
            requested = await client.post(
                "/api/public/request-status-otp",
                json={"vehicle_no": plate.replace("-", " ").lower(), "cnic": cnic, "email": email.upper()},
            )
        assert requested.status_code == 200
        assert requested.json()["data"]["masked_email"] == "n***n@gmail.com"
        assert requested.json()["message"] == "Verification code sent to n***n@gmail.com."
        mock_send.assert_awaited_once()

        token = await _verified_token(client, plate, cnic, email)
        response = await client.get("/api/public/case-status", headers={"X-Access-Token": token})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["accused"]["cnic"] == cnic
    assert data["vehicle"]["plate_number"] == plate
    assert data["summary"]["total_challans"] == 1
    assert data["summary"]["unpaid_challans"] == 1
    assert data["summary"]["total_firs"] == 1
    assert data["summary"]["active_cases"] == 1
    assert data["summary"]["total_penalty"] == 5000
    assert data["challans"][0]["fir_no"] == case["fir_no"]
    assert data["challans"][0]["case_no"] == case["case_no"]
    assert data["firs"][0]["fir_no"] == case["fir_no"]
    assert data["cases"][0]["case_no"] == case["case_no"]
    assert data["cases"][0]["statements"] == []


@pytest.mark.asyncio
async def test_wrong_otp_and_single_use(actors):
    email = "kamran.ali@gmail.com"
    plate, cnic = unique_plate(), unique_cnic()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await issue_challan(
            client, actors["headers"]["officer"], actors["violations"][EXHAUST_NOISE],
            plate=plate, cnic=cnic, email=email,
        )
        lookup = {"vehicle_no": plate, "cnic": cnic, "email": email}
        with patch("noisesentinel.services.public_status.send_status_otp", new_callable=AsyncMock) as mock_send:
            await client.post("/api/public/request-status-otp", json=lookup)
        otp = mock_send.await_args.args[2]

        wrong = await client.post(
            "/api/public/verify-status-otp",
            json={**lookup, "otp": "000000" if otp != "000000" else "111111"},
        )
        right = await client.post("/api/public/verify-status-otp", json={**lookup, "otp": otp})
        reused = await client.post("/api/public/verify-status-otp", json={**lookup, "otp": otp})

    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Invalid OTP."
    assert right.status_code == 200
    assert right.json()["data"]["access_token"]
    assert reused.status_code == 400


@pytest.mark.asyncio
async def test_unknown_citizen_gets_404(actors):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        with patch("noisesentinel.services.public_status.send_status_otp", new_callable=AsyncMock) as mock_send:
            response = await client.post(
                "/api/public/request-status-otp",
                json={"vehicle_no": "ZZZ-999", "cnic": "35202-9999999-9", "email": "nobody@gmail.com"},
            )

    assert response.status_code == 404
    assert response.json()["message"] == "No record found for the provided vehicle number, CNIC and email."
    mock_send.assert_not_awaited()


@pytest.mark.asyncio
async def test_case_status_requires_valid_token():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        missing = await client.get("/api/public/case-status")
        invalid = await client.get("/api/public/case-status", headers={"X-Access-Token": "forged-token"})

    assert missing.status_code == 401
    assert invalid.status_code == 401
    assert invalid.json()["message"] == "Invalid or expired access token. Please verify again."


@pytest.mark.asyncio
async def test_public_challan_search(actors):
    plate, cnic = unique_plate(), unique_cnic()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        report = await create_report(client, actors["headers"]["officer"], actors["device_id"])
        challan = await issue_challan(
            client, actors["headers"]["officer"], actors["violations"][EXHAUST_NOISE],
            report_id=report["emission_report_id"], plate=plate, cnic=cnic,
        )
        found = await client.post(
            "/api/public/challan-search",
            json={"vehicle_no": plate.replace("-", "").lower(), "cnic": cnic},
        )
        wrong_cnic = await client.post(
            "/api/public/challan-search",
            json={"vehicle_no": plate, "cnic": unique_cnic()},
        )

    assert found.status_code == 200
    assert [c["challan_id"] for c in found.json()["data"]] == [challan["challan_id"]]
    assert found.json()["message"] == "Found 1 challan(s)."
    assert wrong_cnic.status_code == 404
