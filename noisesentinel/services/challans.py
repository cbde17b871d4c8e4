"""Challan issue and lookup.

Issuing a challan may create the vehicle and the accused on the fly. All
rows are staged in the request session and committed together, so a
failure at any step leaves nothing behind.
"""
import logging
import re
from datetime import datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from noisesentinel.config import settings
from noisesentinel.database import reload
from noisesentinel.models.accused import Accused
from noisesentinel.models.challan import UNPAID, Challan
from noisesentinel.models.emission_report import EmissionReport
from noisesentinel.models.police import Policeofficer
from noisesentinel.models.user import User
from noisesentinel.models.vehicle import Vehicle
from noisesentinel.schemas.challan import ChallanCreate
from noisesentinel.services.accused import get_accused, get_or_create_accused
from noisesentinel.services.emission_reports import check_date_range
from noisesentinel.services.evidence import compress_evidence
from noisesentinel.services.signature import compute_report_signature, signatures_match
from noisesentinel.services.stations import get_officer_profile
from noisesentinel.services.vehicles import get_or_create_vehicle, get_vehicle
from noisesentinel.services.violations import get_violation
from noisesentinel.utils.dates import utcnow
from noisesentinel.utils.exceptions import AppException, NotFoundError

logger = logging.getLogger(__name__)

CHALLAN_OPTIONS = (selectinload(Challan.firs),)


def normalize_plate(plate: str) -> str:
    return re.sub(r"[\s-]", "", plate).upper()


async def _select_challans(db: AsyncSession, *criteria, order_by=None) -> list[Challan]:
    query = (
        select(Challan)
        .options(*CHALLAN_OPTIONS)
        .where(*criteria)
        .order_by(order_by if order_by is not None else Challan.issue_datetime.desc())
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_challan(db: AsyncSession, challan_id: int) -> Challan:
    challans = await _select_challans(db, Challan.id == challan_id)
    if not challans:
        raise NotFoundError("Challan not found.")
    return challans[0]


async def _resolve_vehicle(db: AsyncSession, payload: ChallanCreate) -> Vehicle:
    if payload.vehicle_id is not None:
        return await get_vehicle(db, payload.vehicle_id)
    if payload.vehicle_input is not None:
        return await get_or_create_vehicle(db, payload.vehicle_input)
    raise AppException("Either VehicleId or VehicleInput must be provided.")


async def _resolve_accused(db: AsyncSession, payload: ChallanCreate) -> Accused:
    if payload.accused_id is not None:
        return await get_accused(db, payload.accused_id)
    if payload.accused_input is not None:
        return await get_or_create_accused(db, payload.accused_input)
    raise AppException("Either AccusedId or AccusedInput must be provided.")


async def create_challan(db: AsyncSession, user: User, payload: ChallanCreate) -> tuple[Challan, str]:
    officer = await get_officer_profile(db, user)
    try:
        violation = await get_violation(db, payload.violation_id)

        signature = None
        if payload.emission_report_id is not None:
            report = await db.get(EmissionReport, payload.emission_report_id)
            if report is None:
                raise NotFoundError("Emission report not found.")
            existing = await db.scalar(select(Challan.id).where(Challan.emission_report_id == report.id))
            if existing is not None:
                raise AppException(f"Emission report #{report.id} already has challan #{existing}.")
            signature = report.digital_signature_value

        vehicle = await _resolve_vehicle(db, payload)
        accused = await _resolve_accused(db, payload)
        if vehicle.owner_id is None:
            vehicle.owner_id = accused.id

        evidence = compress_evidence(payload.evidence_image) if payload.evidence_image else None
        now = utcnow()
        challan = Challan(
            officer_id=officer.id,
            accused_id=accused.id,
            vehicle_id=vehicle.id,
            violation_id=violation.id,
            emission_report_id=payload.emission_report_id,
            evidence_path=evidence,
            issue_datetime=now,
            due_datetime=now + timedelta(days=settings.challan_due_days),
            status=UNPAID,
            bank_details=payload.bank_details or settings.default_bank_details,
            digital_signature_value=signature,
        )
        db.add(challan)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    challan = await reload(db, challan, *CHALLAN_OPTIONS)
    logger.info(
        "Challan %s issued by officer %s to %s for vehicle %s",
        challan.id, officer.badge_number, accused.cnic, vehicle.plate_number,
    )

    if violation.is_cognizable:
        message = (
            f"COGNIZABLE VIOLATION - Challan #{challan.id} created successfully. This violation is "
            "cognizable and eligible for FIR filing by Station Authority."
        )
    else:
        message = (
            f"Challan #{challan.id} created successfully. "
            f"Due date: {challan.due_datetime.strftime('%Y-%m-%d')}."
        )
    return challan, message


async def list_challans(db: AsyncSession) -> list[Challan]:
    return await _select_challans(db)


async def list_officer_challans(db: AsyncSession, user: User) -> list[Challan]:
    officer = await get_officer_profile(db, user)
    return await _select_challans(db, Challan.officer_id == officer.id)


async def list_station_challans(db: AsyncSession, station_id: int) -> list[Challan]:
    officer_ids = select(Policeofficer.id).where(Policeofficer.station_id == station_id)
    return await _select_challans(db, Challan.officer_id.in_(officer_ids))


async def list_vehicle_challans(db: AsyncSession, vehicle_id: int) -> list[Challan]:
    await get_vehicle(db, vehicle_id)
    return await _select_challans(db, Challan.vehicle_id == vehicle_id)


async def list_accused_challans(db: AsyncSession, accused_id: int) -> list[Challan]:
    await get_accused(db, accused_id)
    return await _select_challans(db, Challan.accused_id == accused_id)


async def list_challans_by_status(db: AsyncSession, status: str) -> list[Challan]:
    return await _select_challans(db, func.lower(Challan.status) == status.lower())


async def list_challans_by_date_range(db: AsyncSession, start: datetime, end: datetime) -> list[Challan]:
    start, end = check_date_range(start, end)
    return await _select_challans(db, Challan.issue_datetime >= start, Challan.issue_datetime <= end)


async def list_overdue_challans(db: AsyncSession) -> list[Challan]:
    return await _select_challans(
        db,
        Challan.due_datetime < utcnow(),
        func.lower(Challan.status) == UNPAID.lower(),
        order_by=Challan.due_datetime,
    )


async def search_by_plate_and_cnic(db: AsyncSession, vehicle_no: str, cnic: str) -> list[Challan]:
    if not vehicle_no.strip() or not cnic.strip():
        raise AppException("Both vehicle number and CNIC are required.")
    candidates = await _select_challans(
        db,
        Challan.accused_id == select(Accused.id).where(Accused.cnic == cnic.strip()).scalar_subquery(),
    )
    plate = normalize_plate(vehicle_no)
    challans = [c for c in candidates if normalize_plate(c.vehicle.plate_number) == plate]
    if not challans:
        raise NotFoundError("No challans found for the provided vehicle number and CNIC.")
    return challans


async def verify_challan(db: AsyncSession, challan_id: int) -> dict:
    challan = await get_challan(db, challan_id)
    report = challan.emission_report
    if report is None:
        return {
            "challan_id": challan.id,
            "emission_report_id": None,
            "has_signed_evidence": False,
            "is_authentic": False,
            "challan_signature_match": False,
            "report_signature_match": False,
            "verified_at": utcnow(),
            "verification_message": "Challan was issued without an emission report. No signed evidence to verify.",
        }

    computed = compute_report_signature(report)
    challan_match = signatures_match(challan.digital_signature_value, computed)
    report_match = signatures_match(report.digital_signature_value, computed)
    authentic = challan_match and report_match
    if not authentic:
        logger.warning("Challan %s evidence failed signature verification", challan.id)
    return {
        "challan_id": challan.id,
        "emission_report_id": report.id,
        "has_signed_evidence": True,
        "is_authentic": authentic,
        "challan_signature_match": challan_match,
        "report_signature_match": report_match,
        "stored_signature": challan.digital_signature_value,
        "computed_signature": computed,
        "data_integrity": "Intact - No tampering detected" if authentic else "COMPROMISED - Data has been modified",
        "verified_at": utcnow(),
        "verification_message": (
            "Challan evidence is authentic and admissible in court."
            if authentic else
            "Challan evidence does not match the signed emission report. Not admissible."
        ),
    }
