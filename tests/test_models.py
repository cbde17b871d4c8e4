from datetime import datetime, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from noisesentinel.database import Base
from noisesentinel.models import (
    Accused, Case, Casestatement, Challan, Court, Courttype, EmissionReport, Fir, Iotdevice,
    Judge, Policeofficer, Policestation, Role, User, Vehicle, Violation,
)


@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
    await engine.dispose()


async def _officer(db_session) -> Policeofficer:
    role = Role(name="Police Officer")
    station = Policestation(station_name="Saddar Police Station", station_code="KHI-SDR", province="Sindh")
    db_session.add_all([role, station])
    await db_session.flush()
    user = User(
        username="officer", email="officer@noisesentinel.pk", full_name="Bilal Ahmed",
        password_hash="hashed", role_id=role.id,
    )
    db_session.add(user)
    await db_session.flush()
    officer = Policeofficer(user_id=user.id, station_id=station.id, cnic="42101-1234567-1", badge_number="KHI-77")
    db_session.add(officer)
    await db_session.commit()
    return officer


@pytest.mark.asyncio
async def test_create_user_defaults(db_session):
    role = Role(name="Admin")
    db_session.add(role)
    await db_session.flush()
    db_session.add(User(
        username="admin", email="admin@noisesentinel.pk", full_name="Admin", password_hash="hashed", role_id=role.id,
    ))
    await db_session.commit()

    result = await db_session.get(User, 1)
    assert result is not None
    assert result.is_active is True
    assert result.created_at is not None
    assert result.reset_otp is None


@pytest.mark.asyncio
async def test_create_device_defaults(db_session):
    db_session.add(Iotdevice(device_name="NS-001"))
    await db_session.commit()

    result = await db_session.get(Iotdevice, 1)
    assert result.calibration_status == "Calibrated"
    assert result.is_active is True
    assert result.paired_officer_id is None


@pytest.mark.asyncio
async def test_evidence_chain(db_session):
    officer = await _officer(db_session)
    device = Iotdevice(device_name="NS-002")
    accused = Accused(
        full_name="Hamza Ali", cnic="42101-7654321-3", city="Karachi", province="Sindh", address="Clifton Block 5",
    )
    violation = Violation(violation_type="Modified Silencer", penalty_amount=Decimal("5000.00"), is_cognizable=True)
    db_session.add_all([device, accused, violation])
    await db_session.flush()

    vehicle = Vehicle(plate_number="KHI-4455", make="Suzuki Mehran", owner_id=accused.id)
    report = EmissionReport(
        device_id=device.id, sound_level_dba=Decimal("96.40"), test_datetime=datetime(2026, 5, 1, 10, 0),
        digital_signature_value="sig",
    )
    db_session.add_all([vehicle, report])
    await db_session.flush()

    issued = datetime(2026, 5, 1, 10, 5)
    challan = Challan(
        officer_id=officer.id, accused_id=accused.id, vehicle_id=vehicle.id, violation_id=violation.id,
        emission_report_id=report.id, issue_datetime=issued, due_datetime=issued + timedelta(days=30),
    )
    db_session.add(challan)
    await db_session.flush()

    fir = Fir(fir_no="FIR-KHISDR-2026-0001", station_id=officer.station_id, challan_id=challan.id, date_filed=issued)
    db_session.add(fir)
    await db_session.flush()

    court_type = Courttype(court_type_name="Sessions Court")
    db_session.add(court_type)
    await db_session.flush()
    court = Court(court_name="Sessions Court Karachi South", court_type_id=court_type.id, province="Sindh")
    db_session.add(court)
    await db_session.flush()

    case = Case(case_no="CASE-SESS-KHI-2026-0001", fir_id=fir.id)
    db_session.add(case)
    await db_session.flush()
    db_session.add(Casestatement(case_id=case.id, statement_by="Prosecution", statement_text="Evidence submitted."))
    await db_session.commit()

    saved_challan = await db_session.get(Challan, challan.id)
    assert saved_challan.status == "Unpaid"
    saved_fir = await db_session.get(Fir, fir.id)
    assert saved_fir.fir_status == "Filed"
    saved_case = await db_session.get(Case, case.id)
    assert saved_case.case_status == "Pending"
    assert saved_case.case_type == "Traffic Violation"
    assert saved_case.judge_id is None


@pytest.mark.asyncio
async def test_judge_links_to_court(db_session):
    role = Role(name="Judge")
    court_type = Courttype(court_type_name="High Court")
    db_session.add_all([role, court_type])
    await db_session.flush()
    court = Court(court_name="Lahore High Court", court_type_id=court_type.id, province="Punjab")
    user = User(username="judge", email="judge@noisesentinel.pk", full_name="Judge", password_hash="x", role_id=role.id)
    db_session.add_all([court, user])
    await db_session.flush()
    db_session.add(Judge(user_id=user.id, court_id=court.id, cnic="35202-5555555-5"))
    await db_session.commit()

    judge = await db_session.get(Judge, 1)
    assert judge.service_status == "Active"
    assert judge.court_id == court.id
