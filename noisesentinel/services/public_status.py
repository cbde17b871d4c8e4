"""Citizen-facing case status lookup.

A citizen proves who they are with vehicle number, CNIC and the email on
record, receives a one-time code, and exchanges it for a short-lived
access token that unlocks a read-only summary.
"""
import hmac
import logging
import smtplib
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from noisesentinel.config import settings
from noisesentinel.models.accused import Accused
from noisesentinel.models.case import Case
from noisesentinel.models.challan import UNPAID, Challan
from noisesentinel.models.fir import Fir
from noisesentinel.models.public_status import PublicStatusOtp
from noisesentinel.models.vehicle import Vehicle
from noisesentinel.schemas.public import StatusOtpRequest, VerifyStatusOtpRequest
from noisesentinel.services.cases import is_active_case
from noisesentinel.services.challans import normalize_plate
from noisesentinel.services.email_service import send_status_otp
from noisesentinel.services.serializers import (
    accused_to_dict,
    case_to_dict,
    is_challan_overdue,
    statement_to_dict,
    vehicle_to_dict,
)
from noisesentinel.utils.dates import utcnow
from noisesentinel.utils.exceptions import AppException, NotFoundError
from noisesentinel.utils.security import generate_access_token, generate_otp

logger = logging.getLogger(__name__)

NO_RECORD = "No record found for the provided vehicle number, CNIC and email."


def mask_email(email: str) -> str:
    local, _, domain = email.partition("@")
    if len(local) <= 2:
        return f"{local}***@{domain}"
    return f"{local[0]}***{local[-1]}@{domain}"


async def _find_accused_vehicle(db: AsyncSession, vehicle_no: str, cnic: str, email: str) -> tuple[Accused, Vehicle]:
    accused = await db.scalar(
        select(Accused).where(Accused.cnic == cnic, func.lower(Accused.email) == email.lower())
    )
    if accused is None:
        raise NotFoundError(NO_RECORD)

    owned = await db.execute(select(Vehicle).where(Vehicle.owner_id == accused.id))
    cited = await db.execute(
        select(Vehicle).join(Challan, Challan.vehicle_id == Vehicle.id).where(Challan.accused_id == accused.id)
    )
    plate = normalize_plate(vehicle_no)
    for vehicle in [*owned.scalars().all(), *cited.scalars().all()]:
        if normalize_plate(vehicle.plate_number) == plate:
            return accused, vehicle
    raise NotFoundError(NO_RECORD)


async def request_status_otp(db: AsyncSession, payload: StatusOtpRequest) -> dict:
    accused, vehicle = await _find_accused_vehicle(db, payload.vehicle_no, payload.cnic, payload.email)
    plate = normalize_plate(payload.vehicle_no)
    email = payload.email.lower()

    await db.execute(
        delete(PublicStatusOtp).where(
            PublicStatusOtp.vehicle_no == plate,
            PublicStatusOtp.cnic == payload.cnic,
            PublicStatusOtp.email == email,
            PublicStatusOtp.is_verified.is_(False),
        )
    )
    otp = generate_otp()
    record = PublicStatusOtp(
        vehicle_no=plate,
        cnic=payload.cnic,
        email=email,
        otp_code=otp,
        created_at=utcnow(),
        expires_at=utcnow() + timedelta(minutes=settings.otp_expiry_minutes),
    )
    db.add(record)
    await db.commit()

    try:
        await send_status_otp(accused.email, accused.full_name, otp)
    except (smtplib.SMTPException, OSError):
        logger.exception("Status OTP email to accused %s failed", accused.cnic)
        raise AppException("Unable to send the verification code right now. Please try again later.", status_code=503)
    logger.info("Status OTP issued for vehicle %s", vehicle.plate_number)
    return {"masked_email": mask_email(accused.email), "expires_at": record.expires_at}


async def verify_status_otp(db: AsyncSession, payload: VerifyStatusOtpRequest) -> dict:
    record = await db.scalar(
        select(PublicStatusOtp)
        .where(
            PublicStatusOtp.vehicle_no == normalize_plate(payload.vehicle_no),
            PublicStatusOtp.cnic == payload.cnic,
            PublicStatusOtp.email == payload.email.lower(),
            PublicStatusOtp.is_verified.is_(False),
        )
        .order_by(PublicStatusOtp.created_at.desc())
        .limit(1)
    )
    if record is None or not hmac.compare_digest(record.otp_code, payload.otp):
        raise AppException("Invalid OTP.")
    if record.expires_at < utcnow():
        raise AppException("OTP has expired. Please request a new one.")

    record.is_verified = True
    record.access_token = generate_access_token()
    record.access_token_expires_at = utcnow() + timedelta(hours=settings.public_access_token_hours)
    await db.commit()
    return {"access_token": record.access_token, "expires_at": record.access_token_expires_at}


def _case_summary(case: Case) -> dict:
    data = case_to_dict(case)
    statements = sorted(case.statements, key=lambda s: (s.statement_date, s.id), reverse=True)
    data["statements"] = [statement_to_dict(s) for s in statements]
    return data


def _challan_summary(challan: Challan) -> dict:
    fir = challan.firs[0] if challan.firs else None
    return {
        "challan_id": challan.id,
        "violation_type": challan.violation.violation_type,
        "penalty_amount": challan.violation.penalty_amount,
        "is_cognizable": challan.violation.is_cognizable,
        "issue_datetime": challan.issue_datetime,
        "due_datetime": challan.due_datetime,
        "status": challan.status,
        "is_overdue": is_challan_overdue(challan),
        "bank_details": challan.bank_details,
        "officer_name": challan.officer.user.full_name,
        "station_name": challan.officer.station.station_name if challan.officer.station else None,
        "sound_level_dba": challan.emission_report.sound_level_dba if challan.emission_report else None,
        "fir_no": fir.fir_no if fir else None,
        "case_no": fir.cases[0].case_no if fir and fir.cases else None,
    }


async def get_case_status(db: AsyncSession, access_token: str | None) -> dict:
    if not access_token:
        raise AppException("Access token is required.", status_code=401)
    record = await db.scalar(select(PublicStatusOtp).where(PublicStatusOtp.access_token == access_token))
    if record is None or record.access_token_expires_at is None or record.access_token_expires_at < utcnow():
        raise AppException("Invalid or expired access token. Please verify again.", status_code=401)

    accused, vehicle = await _find_accused_vehicle(db, record.vehicle_no, record.cnic, record.email)
    result = await db.execute(
        select(Challan)
        .options(selectinload(Challan.firs).selectinload(Fir.cases).selectinload(Case.statements))
        .where(Challan.accused_id == accused.id, Challan.vehicle_id == vehicle.id)
        .order_by(Challan.issue_datetime.desc())
    )
    challans = list(result.scalars().all())
    firs = sorted((fir for c in challans for fir in c.firs), key=lambda f: f.date_filed, reverse=True)
    cases = sorted((case for fir in firs for case in fir.cases), key=lambda c: c.created_at, reverse=True)

    unpaid = [c for c in challans if c.status.lower() == UNPAID.lower()]
    summary = {
        "total_challans": len(challans),
        "unpaid_challans": len(unpaid),
        "total_firs": len(firs),
        "active_cases": len([c for c in cases if is_active_case(c)]),
        "total_penalty": sum((c.violation.penalty_amount for c in challans), Decimal("0")),
        "unpaid_penalty": sum((c.violation.penalty_amount for c in unpaid), Decimal("0")),
    }
    return {
        "accused": accused_to_dict(accused),
        "vehicle": vehicle_to_dict(vehicle),
        "summary": summary,
        "challans": [_challan_summary(c) for c in challans],
        "firs": [
            {
                "fir_id": fir.id,
                "fir_no": fir.fir_no,
                "challan_id": fir.challan_id,
                "station_name": fir.station.station_name,
                "date_filed": fir.date_filed,
                "fir_status": fir.fir_status,
                "fir_description": fir.fir_description,
            }
            for fir in firs
        ],
        "cases": [_case_summary(c) for c in cases],
    }
