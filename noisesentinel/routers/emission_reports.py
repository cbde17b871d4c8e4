from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import any_user, police_officer_only
from noisesentinel.models.user import User
from noisesentinel.schemas.emission_report import EmissionReportCreate
from noisesentinel.services import emission_reports as report_service
from noisesentinel.services.serializers import emission_report_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/emissionreport", tags=["emission reports"])


def _dump_all(reports) -> list[dict]:
    return [emission_report_to_dict(r) for r in reports]


@router.post("/create", status_code=201)
async def create_report(
    payload: EmissionReportCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(police_officer_only),
):
    report, message = await report_service.create_report(db, user, payload)
    return success_response(data=emission_report_to_dict(report), message=message)


@router.get("", dependencies=[Depends(any_user)])
async def list_reports(db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await report_service.list_reports(db)))


@router.get("/device/{device_id}", dependencies=[Depends(any_user)])
async def list_device_reports(device_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await report_service.list_reports(db, device_id=device_id)))


@router.get("/daterange", dependencies=[Depends(any_user)])
async def list_reports_by_date_range(start: datetime, end: datetime, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await report_service.list_reports(db, start=start, end=end)))


@router.get("/violations", dependencies=[Depends(any_user)])
async def list_violating_reports(threshold: Decimal | None = None, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await report_service.list_violations(db, threshold)))


@router.get("/pending-challans", dependencies=[Depends(any_user)])
async def list_reports_pending_challans(db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await report_service.list_pending_challans(db)))


@router.get("/{report_id}", dependencies=[Depends(any_user)])
async def get_report(report_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=emission_report_to_dict(await report_service.get_report(db, report_id)))


@router.get("/{report_id}/verify", dependencies=[Depends(any_user)])
async def verify_report(report_id: int, db: AsyncSession = Depends(get_db)):
    result = await report_service.verify_report(db, report_id)
    return success_response(data=result, message=result["verification_message"])
