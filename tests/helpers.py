import itertools
from datetime import datetime, timedelta, timezone

_reading_offsets = itertools.count(start=60, step=15)
_cnic_numbers = itertools.count(start=3000001)
_plate_numbers = itertools.count(start=101)

EXHAUST_NOISE = "Excessive Exhaust Noise"
MODIFIED_SILENCER = "Modified Silencer"


def next_reading_time() -> str:
    """A past timestamp far enough from every other reading to avoid duplicate detection."""
    moment = datetime.now(timezone.utc) - timedelta(minutes=next(_reading_offsets))
    return moment.isoformat()


def unique_cnic() -> str:
    return f"35202-{next(_cnic_numbers)}-7"


def unique_plate() -> str:
    return f"LEB-{next(_plate_numbers)}"


def accused_input(cnic: str, email: str | None = None) -> dict:
    return {
        "full_name": "Usman Tariq",
        "cnic": cnic,
        "city": "Lahore",
        "province": "Punjab",
        "address": "House 12, Street 4, Model Town",
        "contact": "0321-7654321",
        "email": email,
    }


def vehicle_input(plate: str) -> dict:
    return {"plate_number": plate, "make": "Honda CD-70", "color": "Red", "reg_year": 2019}


async def create_report(client, headers, device_id, sound_level_dba=92.5) -> dict:
    response = await client.post(
        "/api/emissionreport/create",
        json={
            "device_id": device_id,
            "co": 1.2,
            "co2": 13.5,
            "hc": 0.3,
            "nox": 0.05,
            "sound_level_dba": sound_level_dba,
            "test_datetime": next_reading_time(),
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def issue_challan(client, headers, violation_id, report_id=None, plate=None, cnic=None, email=None) -> dict:
    response = await client.post(
        "/api/challan/create",
        json={
            "violation_id": violation_id,
            "emission_report_id": report_id,
            "vehicle_input": vehicle_input(plate or unique_plate()),
            "accused_input": accused_input(cnic or unique_cnic(), email),
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def file_fir(client, actors, email=None) -> dict:
    challan = await issue_challan(
        client, actors["headers"]["officer"], actors["violations"][MODIFIED_SILENCER], email=email
    )
    response = await client.post(
        "/api/fir/create",
        json={"challan_id": challan["challan_id"]},
        headers=actors["headers"]["station_authority"],
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def open_case(client, actors, email=None) -> dict:
    fir = await file_fir(client, actors, email=email)
    response = await client.post(
        "/api/case/create",
        json={"fir_id": fir["fir_id"], "judge_id": actors["judge_id"]},
        headers=actors["headers"]["court_authority"],
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
