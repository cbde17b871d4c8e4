import logging
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.config import settings
from noisesentinel.database import reload
from noisesentinel.models.challan import Challan
from noisesentinel.models.emission_report import EmissionReport
from noisesentinel.models.user import User
from noisesentinel.schemas.emission_report import EmissionReportCreate
from noisesentinel.services.devices import get_device, is_device_usable
from noisesentinel.services.serializers import legal_limit
from noisesentinel.services.signature import (
    compute_report_signature,
    compute_signature,
    quantize_reading,
    signatures_match,
)
from noisesentinel.services.stations import get_officer_profile
from noisesentinel.utils.dates import to_naive_utc, utcnow
from noisesentinel.utils.exceptions import AppException, NotFoundError

logger = logging.getLogger(__name__)


def check_date_range(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    start, end = to_naive_utc(start), to_naive_utc(end)
    if start > end:
        raise AppException("Start date must be before end date.")
    return start, end


async def get_report(db: AsyncSession, report_id: int) -> EmissionReport:
    report = await db.get(EmissionReport, report_id)
    if report is None:
        raise NotFoundError("Emission report not found.")
    return report


async def create_report(db: AsyncSession, user: User, payload: EmissionReportCreate) -> tuple[EmissionReport, str]:
    officer = await get_officer_profile(db, user)
    device = await get_device(db, payload.device_id)
    if not is_device_usable(device):
        raise AppException("IoT device must be active and calibrated to submit readings.")

    test_datetime = to_naive_utc(payload.test_datetime)
    if test_datetime > utcnow():
        raise AppException("Test date/time cannot be in the future.")

    window = timedelta(minutes=settings.duplicate_report_window_minutes)
    duplicate = await db.scalar(
        select(EmissionReport.id).where(
            EmissionReport.device_id == device.id,
            EmissionReport.test_datetime >= test_datetime - window,
            EmissionReport.test_datetime <= test_datetime + window,
        ).limit(1)
    )
    if duplicate is not None:
        raise AppException(
            f"A similar emission report was created less than {settings.duplicate_report_window_minutes} "
            "minutes ago. Possible duplicate detected."
        )

    readings = {
        field: quantize_reading(getattr(payload, field))
        for field in ("co", "co2", "hc", "nox", "sound_level_dba")
    }
    signature = compute_signature(device.id, test_datetime=test_datetime, **readings)

    report = EmissionReport(
        device_id=device.id,
        test_datetime=test_datetime,
        ml_classification=payload.ml_classification,
        digital_signature_value=signature,
        **readings,
    )
    db.add(report)
    await db.commit()
    report = await reload(db, report)
    logger.info(
        "Emission report %s captured by officer %s on device %s (%s dBA)",
        report.id, officer.badge_number, device.device_name, report.sound_level_dba,
    )

    limit = legal_limit()
    if report.sound_level_dba > limit:
        message = (
            f"VIOLATION DETECTED! Sound level {report.sound_level_dba} dBA exceeds legal limit of "
            f"{settings.legal_sound_limit_dba:g} dBA. Emission Report #{report.id} created successfully. "
            "Ready to create Challan."
        )
    else:
        message = (
            f"Emission Report #{report.id} created successfully. Sound level {report.sound_level_dba} dBA "
            "is within the legal limit."
        )
    return report, message


async def list_reports(
    db: AsyncSession,
    device_id: int | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[EmissionReport]:
    query = select(EmissionReport).order_by(EmissionReport.test_datetime.desc())
    if device_id is not None:
        await get_device(db, device_id)
        query = query.where(EmissionReport.device_id == device_id)
    if start is not None and end is not None:
        start, end = check_date_range(start, end)
        query = query.where(EmissionReport.test_datetime >= start, EmissionReport.test_datetime <= end)
    result = await db.execute(query)
    return list(result.scalars().all())


async def list_violations(db: AsyncSession, threshold: Decimal | None = None) -> list[EmissionReport]:
    limit = threshold if threshold is not None else legal_limit()
    result = await db.execute(
        select(EmissionReport)
        .where(EmissionReport.sound_level_dba > limit)
        .order_by(EmissionReport.test_datetime.desc())
    )
    return list(result.scalars().all())


async def list_pending_challans(db: AsyncSession) -> list[EmissionReport]:
    """Violating reports that no challan has been issued against yet."""
    has_challan = exists().where(Challan.emission_report_id == EmissionReport.id)
    result = await db.execute(
        select(EmissionReport)
        .where(EmissionReport.sound_level_dba > legal_limit(), ~has_challan)
        .order_by(EmissionReport.test_datetime.desc())
    )
    return list(result.scalars().all())


async def verify_report(db: AsyncSession, report_id: int) -> dict:
    report = await get_report(db, report_id)
    computed = compute_report_signature(report)
    match = signatures_match(report.digital_signature_value, computed)
    if match:
        logger.info("Emission report %s signature verified", report.id)
        message = "Digital signature verified. Emission report data is authentic and admissible as evidence."
    else:
        logger.warning("Emission report %s failed signature verification", report.id)
        message = "Digital signature mismatch. Emission report data has been altered and is not admissible."
    return {
        "emission_report_id": report.id,
        "is_authentic": match,
        "digital_signature_match": match,
        "data_integrity": "Intact - No tampering detected" if match else "COMPROMISED - Data has been modified",
        "stored_signature": report.digital_signature_value,
        "computed_signature": computed,
        "verified_at": utcnow(),
        "admissible_in_court": match,
        "verification_message": message,
    }
