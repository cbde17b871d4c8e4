import logging
import re
from datetime import datetime, timedelta

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.config import settings
from noisesentinel.database import reload
from noisesentinel.models.accused import Accused
from noisesentinel.models.case import Case
from noisesentinel.models.challan import Challan
from noisesentinel.models.court import Court, Judge
from noisesentinel.models.fir import Fir
from noisesentinel.models.user import JUDGE, User
from noisesentinel.models.vehicle import Vehicle
from noisesentinel.schemas.case import CaseCreate, CaseSearch, CaseUpdate
from noisesentinel.services.courts import get_court, get_judge, get_judge_profile
from noisesentinel.services.emission_reports import check_date_range
from noisesentinel.services.firs import FIR_OPTIONS, get_fir, year_bounds
from noisesentinel.utils.dates import to_naive_utc, utcnow
from noisesentinel.utils.exceptions import AppException, NotFoundError

logger = logging.getLogger(__name__)

PENDING = "Pending"
ACTIVE_STATUSES = ("pending", "in progress")
DEFAULT_CASE_TYPE = "Traffic Violation"

COURT_TYPE_ABBREVIATIONS = {
    "supreme court": "SC",
    "high court": "HC",
    "district court": "DC",
    "civil court": "CC",
    "sessions court": "SESS",
}

CITY_ABBREVIATIONS = {
    "lahore": "LHR",
    "karachi": "KHI",
    "islamabad": "ISB",
    "rawalpindi": "RWP",
    "faisalabad": "FSD",
    "multan": "MUL",
    "peshawar": "PSH",
    "quetta": "QTA",
}


def court_type_abbreviation(court_type_name: str) -> str:
    return COURT_TYPE_ABBREVIATIONS.get(court_type_name.strip().lower(), "COURT")


def city_abbreviation(city: str | None) -> str:
    city = (city or "").strip()
    if city.lower() in CITY_ABBREVIATIONS:
        return CITY_ABBREVIATIONS[city.lower()]
    letters = re.sub(r"[^A-Za-z]", "", city)
    return letters[:3].upper() or "GEN"


def status_from_verdict(verdict: str) -> str:
    text = verdict.lower()
    # "not guilty" contains "guilty"
    if "not guilty" in text or "acquit" in text:
        return "Acquitted"
    if "guilty" in text or "convict" in text:
        return "Convicted"
    if "dismiss" in text:
        return "Dismissed"
    return "Closed"


async def _next_case_number(db: AsyncSession, court: Court, created_at: datetime) -> str:
    start, end = year_bounds(created_at)
    filed_this_year = await db.scalar(
        select(func.count(Case.id))
        .join(Judge, Case.judge_id == Judge.id)
        .where(Judge.court_id == court.id, Case.created_at >= start, Case.created_at < end)
    )
    prefix = (
        f"CASE-{court_type_abbreviation(court.court_type.court_type_name)}-"
        f"{city_abbreviation(court.district or court.location)}-{created_at.year}"
    )
    sequence = (filed_this_year or 0) + 1
    while True:
        case_no = f"{prefix}-{sequence:04d}"
        if await db.scalar(select(Case.id).where(Case.case_no == case_no)) is None:
            return case_no
        sequence += 1


async def _select_cases(db: AsyncSession, *criteria, order_by=None) -> list[Case]:
    result = await db.execute(
        select(Case).where(*criteria).order_by(order_by if order_by is not None else Case.created_at.desc())
    )
    return list(result.scalars().all())


async def get_case(db: AsyncSession, case_id: int) -> Case:
    case = await db.get(Case, case_id)
    if case is None:
        raise NotFoundError("Case not found.")
    return case


async def get_case_by_number(db: AsyncSession, case_no: str) -> Case:
    cases = await _select_cases(db, func.upper(Case.case_no) == case_no.upper())
    if not cases:
        raise NotFoundError("Case not found.")
    return cases[0]


async def create_case(db: AsyncSession, payload: CaseCreate) -> tuple[Case, str]:
    fir = await get_fir(db, payload.fir_id)
    if fir.cases:
        raise AppException(f"Case {fir.cases[0].case_no} already exists for this FIR.")
    judge = await get_judge(db, payload.judge_id)
    if judge.court is None:
        raise AppException("The selected judge is not assigned to a court.")

    now = utcnow()
    hearing_date = to_naive_utc(payload.hearing_date) or now + timedelta(days=settings.default_hearing_days)
    if hearing_date < now:
        raise AppException("Hearing date cannot be in the past.")

    case = Case(
        case_no=await _next_case_number(db, judge.court, now),
        fir_id=fir.id,
        judge_id=judge.id,
        case_type=payload.case_type or DEFAULT_CASE_TYPE,
        case_status=PENDING,
        hearing_date=hearing_date,
        created_at=now,
    )
    db.add(case)
    await db.commit()
    case = await reload(db, case)
    logger.info("Case %s created from FIR %s, judge %s", case.case_no, fir.fir_no, judge.id)
    message = (
        f"Case {case.case_no} created successfully and assigned to Judge {judge.user.full_name}. "
        f"Hearing scheduled for {hearing_date.strftime('%Y-%m-%d')}."
    )
    return case, message


async def update_case(db: AsyncSession, user: User, case_id: int, payload: CaseUpdate) -> Case:
    case = await get_case(db, case_id)
    if user.role.name == JUDGE:
        judge = await get_judge_profile(db, user)
        if case.judge_id != judge.id:
            raise AppException("You can only update cases assigned to you.", status_code=403)

    if payload.case_status:
        case.case_status = payload.case_status
    elif payload.verdict:
        case.case_status = status_from_verdict(payload.verdict)
    if payload.verdict is not None:
        case.verdict = payload.verdict
    if payload.hearing_date is not None:
        case.hearing_date = to_naive_utc(payload.hearing_date)

    await db.commit()
    logger.info("Case %s updated by %s, status %s", case.case_no, user.username, case.case_status)
    return case


async def assign_judge(db: AsyncSession, case_id: int, judge_id: int) -> Case:
    case = await get_case(db, case_id)
    judge = await get_judge(db, judge_id)
    if judge.court is None:
        raise AppException("The selected judge is not assigned to a court.")
    case.judge_id = judge.id
    await db.commit()
    logger.info("Case %s assigned to judge %s", case.case_no, judge.id)
    return await reload(db, case)


async def list_cases(db: AsyncSession) -> list[Case]:
    return await _select_cases(db)


async def list_judge_cases(db: AsyncSession, user: User) -> list[Case]:
    judge = await get_judge_profile(db, user)
    return await _select_cases(db, Case.judge_id == judge.id, order_by=Case.hearing_date)


async def list_court_cases(db: AsyncSession, court_id: int) -> list[Case]:
    await get_court(db, court_id)
    judge_ids = select(Judge.id).where(Judge.court_id == court_id)
    return await _select_cases(db, Case.judge_id.in_(judge_ids))


async def list_cases_by_status(db: AsyncSession, status: str) -> list[Case]:
    return await _select_cases(db, func.lower(Case.case_status) == status.lower())


async def list_hearings(db: AsyncSession, start: datetime, end: datetime) -> list[Case]:
    start, end = check_date_range(start, end)
    return await _select_cases(
        db, Case.hearing_date >= start, Case.hearing_date <= end, order_by=Case.hearing_date
    )


async def list_firs_without_cases(db: AsyncSession) -> list[Fir]:
    has_case = exists().where(Case.fir_id == Fir.id)
    result = await db.execute(
        select(Fir).options(*FIR_OPTIONS).where(~has_case).order_by(Fir.date_filed.desc())
    )
    return list(result.scalars().all())


async def search_cases(db: AsyncSession, criteria: CaseSearch) -> list[Case]:
    query = (
        select(Case)
        .join(Fir, Case.fir_id == Fir.id)
        .join(Challan, Fir.challan_id == Challan.id)
        .join(Vehicle, Challan.vehicle_id == Vehicle.id)
        .join(Accused, Challan.accused_id == Accused.id)
        .order_by(Case.created_at.desc())
    )
    if criteria.case_no:
        query = query.where(func.upper(Case.case_no).like(f"%{criteria.case_no.upper()}%"))
    if criteria.fir_no:
        query = query.where(func.upper(Fir.fir_no).like(f"%{criteria.fir_no.upper()}%"))
    if criteria.vehicle_plate:
        query = query.where(func.upper(Vehicle.plate_number).like(f"%{criteria.vehicle_plate.upper()}%"))
    if criteria.accused_cnic:
        query = query.where(Accused.cnic == criteria.accused_cnic)
    if criteria.accused_name:
        query = query.where(func.lower(Accused.full_name).like(f"%{criteria.accused_name.lower()}%"))
    if criteria.case_status:
        query = query.where(func.lower(Case.case_status) == criteria.case_status.lower())
    if criteria.case_type:
        query = query.where(func.lower(Case.case_type) == criteria.case_type.lower())
    if criteria.judge_id is not None:
        query = query.where(Case.judge_id == criteria.judge_id)
    if criteria.hearing_from is not None:
        query = query.where(Case.hearing_date >= to_naive_utc(criteria.hearing_from))
    if criteria.hearing_to is not None:
        query = query.where(Case.hearing_date <= to_naive_utc(criteria.hearing_to))

    result = await db.execute(query)
    cases = list(result.scalars().all())
    if not cases:
        raise NotFoundError("No cases found matching the search criteria.")
    return cases


def is_active_case(case: Case) -> bool:
    return case.case_status.lower() in ACTIVE_STATUSES
