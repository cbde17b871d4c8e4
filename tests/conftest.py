import os

import pytest

TEST_DB_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), ".noisesentinel_test.sqlite3")

# settings are read at import time
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SMTP_HOST"] = ""

PASSWORD = "Passw0rd@123"


@pytest.fixture(autouse=True, scope="session")
def actors():
    """Fresh database with one account per role, a station, a court and a device."""
    import asyncio

    from sqlalchemy import select

    from noisesentinel.database import create_tables, async_session
    from noisesentinel.models.court import Courttype
    from noisesentinel.models.user import COURT_AUTHORITY, STATION_AUTHORITY
    from noisesentinel.models.violation import Violation
    from noisesentinel.schemas.auth import CreateJudgeRequest, CreateOfficerRequest, RegisterUserRequest
    from noisesentinel.schemas.court import CourtCreate
    from noisesentinel.schemas.device import DeviceRegister
    from noisesentinel.schemas.station import StationCreate
    from noisesentinel.seed import seed_data
    from noisesentinel.services import auth as auth_service
    from noisesentinel.services import courts as court_service
    from noisesentinel.services import devices as device_service
    from noisesentinel.services import stations as station_service
    from noisesentinel.utils.security import create_access_token

    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)

    def account(username: str, full_name: str) -> dict:
        return {
            "username": username,
            "email": f"{username}@noisesentinel.pk",
            "full_name": full_name,
            "password": PASSWORD,
        }

    async def _setup() -> dict:
        await create_tables()
        async with async_session() as db:
            await seed_data(db)

            admin = await auth_service.register_admin(db, RegisterUserRequest(**account("admin", "System Administrator")))
            station_authority = await auth_service.create_user(
                db, RegisterUserRequest(**account("station_auth", "Station Authority")), STATION_AUTHORITY
            )
            court_authority = await auth_service.create_user(
                db, RegisterUserRequest(**account("court_auth", "Court Authority")), COURT_AUTHORITY
            )

            station = await station_service.create_station(db, StationCreate(
                station_name="Gulberg Traffic Police Station",
                station_code="LHR-GLB-01",
                location="Gulberg III",
                district="Lahore",
                province="Punjab",
                contact="042-35761234",
            ))
            civil_court = await db.scalar(select(Courttype).where(Courttype.court_type_name == "Civil Court"))
            court = await court_service.create_court(db, CourtCreate(
                court_name="Civil Court Lahore",
                court_type_id=civil_court.id,
                location="Lower Mall",
                district="Lahore",
                province="Punjab",
            ))

            officer = await auth_service.create_officer(db, CreateOfficerRequest(
                **account("officer1", "Ali Raza"),
                station_id=station.id,
                cnic="35202-1111111-1",
                contact_no="0300-1234567",
                badge_number="LHR-1001",
                rank="Sub-Inspector",
            ))
            judge = await auth_service.create_judge(db, CreateJudgeRequest(
                **account("judge1", "Justice Ayesha Khan"),
                court_id=court.id,
                cnic="35202-2222222-2",
                rank="Civil Judge",
            ))
            device = await device_service.register_device(db, DeviceRegister(
                device_name="NS-DEVICE-001",
                firmware_version="1.4.2",
                calibration_certificate_no="CAL-2026-001",
            ))

            violations = (await db.execute(select(Violation))).scalars().all()

            users = {
                "admin": admin,
                "station_authority": station_authority,
                "court_authority": court_authority,
                "officer": officer.user,
                "judge": judge.user,
            }
            headers = {}
            for key, user in users.items():
                token, _ = create_access_token(user.id, user.username, user.email, user.role.name)
                headers[key] = {"Authorization": f"Bearer {token}"}

            return {
                "headers": headers,
                "user_ids": {key: user.id for key, user in users.items()},
                "station_id": station.id,
                "court_id": court.id,
                "officer_id": officer.id,
                "judge_id": judge.id,
                "device_id": device.id,
                "violations": {v.violation_type: v.id for v in violations},
            }

    return asyncio.run(_setup())
