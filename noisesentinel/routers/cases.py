from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import (
    any_user,
    court_authority_only,
    court_roles,
    judge_only,
    require_roles,
)
from noisesentinel.models.user import COURT_AUTHORITY, JUDGE, User
from noisesentinel.schemas.case import AssignJudge, CaseCreate, CaseSearch, CaseUpdate
from noisesentinel.services import cases as case_service
from noisesentinel.services.serializers import case_to_dict, fir_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/case", tags=["cases"])


def _dump_all(cases) -> list[dict]:
    return [case_to_dict(c) for c in cases]


@router.post("/create", status_code=201, dependencies=[Depends(court_authority_only)])
async def create_case(payload: CaseCreate, db: AsyncSession = Depends(get_db)):
    case, message = await case_service.create_case(db, payload)
    return success_response(data=case_to_dict(case), message=message)


@router.get("", dependencies=[Depends(court_roles)])
async def list_cases(db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await case_service.list_cases(db)))


@router.get("/my-cases")
async def list_my_cases(db: AsyncSession = Depends(get_db), user: User = Depends(judge_only)):
    return success_response(data=_dump_all(await case_service.list_judge_cases(db, user)))


@router.get("/firs-without-cases", dependencies=[Depends(court_authority_only)])
async def list_firs_without_cases(db: AsyncSession = Depends(get_db)):
    firs = await case_service.list_firs_without_cases(db)
    return success_response(data=[fir_to_dict(f) for f in firs])


@router.get("/hearings", dependencies=[Depends(court_roles)])
async def list_hearings(start: datetime, end: datetime, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await case_service.list_hearings(db, start, end)))


@router.post("/search", dependencies=[Depends(any_user)])
async def search_cases(criteria: CaseSearch, db: AsyncSession = Depends(get_db)):
    cases = await case_service.search_cases(db, criteria)
    return success_response(data=_dump_all(cases), message=f"Found {len(cases)} case(s).")


@router.get("/number/{case_no}", dependencies=[Depends(any_user)])
async def get_case_by_number(case_no: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=case_to_dict(await case_service.get_case_by_number(db, case_no)))


@router.get("/court/{court_id}", dependencies=[Depends(court_roles)])
async def list_court_cases(court_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await case_service.list_court_cases(db, court_id)))


@router.get("/status/{status}", dependencies=[Depends(court_roles)])
async def list_cases_by_status(status: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await case_service.list_cases_by_status(db, status)))


@router.get("/{case_id}", dependencies=[Depends(any_user)])
async def get_case(case_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=case_to_dict(await case_service.get_case(db, case_id)))


@router.put("/{case_id}")
async def update_case(
    case_id: int,
    payload: CaseUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_roles(COURT_AUTHORITY, JUDGE)),
):
    case = await case_service.update_case(db, user, case_id, payload)
    return success_response(data=case_to_dict(case), message=f"Case {case.case_no} updated successfully.")


@router.put("/{case_id}/assign-judge", dependencies=[Depends(court_authority_only)])
async def assign_judge(case_id: int, payload: AssignJudge, db: AsyncSession = Depends(get_db)):
    case = await case_service.assign_judge(db, case_id, payload.judge_id)
    return success_response(data=case_to_dict(case), message=f"Case {case.case_no} assigned successfully.")
