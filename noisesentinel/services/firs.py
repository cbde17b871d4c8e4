import logging
from datetime import datetime

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from noisesentinel.database import reload
from noisesentinel.models.challan import Challan
from noisesentinel.models.fir import Fir
from noisesentinel.models.police import Policestation
from noisesentinel.models.violation import Violation
from noisesentinel.schemas.fir import FirCreate, FirUpdate
from noisesentinel.services.challans import CHALLAN_OPTIONS, get_challan
from noisesentinel.services.emission_reports import check_date_range
from noisesentinel.services.stations import get_station
from noisesentinel.utils.dates import utcnow
from noisesentinel.utils.exceptions import AppException, NotFoundError

logger = logging.getLogger(__name__)

FILED = "Filed"
FIR_OPTIONS = (selectinload(Fir.cases),)


def year_bounds(moment: datetime) -> tuple[datetime, datetime]:
    return datetime(moment.year, 1, 1), datetime(moment.year + 1, 1, 1)


async def _next_fir_number(db: AsyncSession, station: Policestation, filed_at: datetime) -> str:
    start, end = year_bounds(filed_at)
    filed_this_year = await db.scalar(
        select(func.count(Fir.id)).where(
            Fir.station_id == station.id,
            Fir.date_filed >= start,
            Fir.date_filed < end,
        )
    )
    code = station.station_code.replace("-", "").upper()
    sequence = (filed_this_year or 0) + 1
    while True:
        fir_no = f"FIR-{code}-{filed_at.year}-{sequence:04d}"
        if await db.scalar(select(Fir.id).where(Fir.fir_no == fir_no)) is None:
            return fir_no
        sequence += 1


async def _select_firs(db: AsyncSession, *criteria) -> list[Fir]:
    result = await db.execute(
        select(Fir).options(*FIR_OPTIONS).where(*criteria).order_by(Fir.date_filed.desc())
    )
    return list(result.scalars().all())


async def get_fir(db: AsyncSession, fir_id: int) -> Fir:
    firs = await _select_firs(db, Fir.id == fir_id)
    if not firs:
        raise NotFoundError("FIR not found.")
    return firs[0]


async def get_fir_by_number(db: AsyncSession, fir_no: str) -> Fir:
    firs = await _select_firs(db, func.upper(Fir.fir_no) == fir_no.upper())
    if not firs:
        raise NotFoundError("FIR not found.")
    return firs[0]


async def create_fir(db: AsyncSession, payload: FirCreate) -> tuple[Fir, str]:
    challan = await get_challan(db, payload.challan_id)
    if not challan.violation.is_cognizable:
        raise AppException("FIR can only be filed for cognizable violations.")
    if challan.firs:
        raise AppException(
            f"FIR {challan.firs[0].fir_no} already exists for this challan. Each challan can only have one FIR."
        )

    station_id = payload.station_id or challan.officer.station_id
    if station_id is None:
        raise AppException("The issuing officer is not assigned to a police station.")
    station = await get_station(db, station_id)

    now = utcnow()
    fir_no = await _next_fir_number(db, station, now)
    description = payload.fir_description or (
        f"FIR filed against {challan.accused.full_name} (CNIC {challan.accused.cnic}) for "
        f"{challan.violation.violation_type} with vehicle {challan.vehicle.plate_number} "
        f"under challan #{challan.id}."
    )
    fir = Fir(
        fir_no=fir_no,
        station_id=station.id,
        challan_id=challan.id,
        date_filed=now,
        fir_description=description,
        fir_status=FILED,
        informant_id=challan.officer_id,
    )
    db.add(fir)
    await db.commit()
    fir = await reload(db, fir, *FIR_OPTIONS)
    logger.info("FIR %s filed at station %s for challan %s", fir.fir_no, station.station_code, challan.id)
    return fir, f"FIR {fir.fir_no} filed successfully. Case can now be created by Court Authority."


async def list_firs(db: AsyncSession) -> list[Fir]:
    return await _select_firs(db)


async def list_station_firs(db: AsyncSession, station_id: int) -> list[Fir]:
    return await _select_firs(db, Fir.station_id == station_id)


async def list_informant_firs(db: AsyncSession, officer_id: int) -> list[Fir]:
    return await _select_firs(db, Fir.informant_id == officer_id)


async def list_firs_by_status(db: AsyncSession, status: str) -> list[Fir]:
    return await _select_firs(db, func.lower(Fir.fir_status) == status.lower())


async def list_firs_by_date_range(db: AsyncSession, start: datetime, end: datetime) -> list[Fir]:
    start, end = check_date_range(start, end)
    return await _select_firs(db, Fir.date_filed >= start, Fir.date_filed <= end)


async def list_cognizable_challans_without_fir(db: AsyncSession) -> list[Challan]:
    has_fir = exists().where(Fir.challan_id == Challan.id)
    result = await db.execute(
        select(Challan)
        .options(*CHALLAN_OPTIONS)
        .join(Violation, Challan.violation_id == Violation.id)
        .where(Violation.is_cognizable.is_(True), ~has_fir)
        .order_by(Challan.issue_datetime.desc())
    )
    return list(result.scalars().all())


async def update_fir(db: AsyncSession, fir_id: int, payload: FirUpdate) -> Fir:
    fir = await get_fir(db, fir_id)
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(fir, field, value)
    await db.commit()
    logger.info("FIR %s updated, status %s", fir.fir_no, fir.fir_status)
    return fir
