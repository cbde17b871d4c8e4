from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import any_user, authority_roles, police_officer_only
from noisesentinel.models.user import User
from noisesentinel.schemas.challan import ChallanCreate
from noisesentinel.services import challans as challan_service
from noisesentinel.services.serializers import challan_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/challan", tags=["challans"])


def _dump_all(challans) -> list[dict]:
    return [challan_to_dict(c) for c in challans]


@router.post("/create", status_code=201)
async def create_challan(
    payload: ChallanCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(police_officer_only),
):
    challan, message = await challan_service.create_challan(db, user, payload)
    return success_response(data=challan_to_dict(challan, include_evidence=True), message=message)


@router.get("/my-challans")
async def list_my_challans(db: AsyncSession = Depends(get_db), user: User = Depends(police_officer_only)):
    return success_response(data=_dump_all(await challan_service.list_officer_challans(db, user)))


@router.get("", dependencies=[Depends(authority_roles)])
async def list_challans(db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await challan_service.list_challans(db)))


@router.get("/station/{station_id}", dependencies=[Depends(any_user)])
async def list_station_challans(station_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await challan_service.list_station_challans(db, station_id)))


@router.get("/vehicle/{vehicle_id}", dependencies=[Depends(any_user)])
async def list_vehicle_challans(vehicle_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await challan_service.list_vehicle_challans(db, vehicle_id)))


@router.get("/accused/{accused_id}", dependencies=[Depends(any_user)])
async def list_accused_challans(accused_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await challan_service.list_accused_challans(db, accused_id)))


@router.get("/status/{status}", dependencies=[Depends(any_user)])
async def list_challans_by_status(status: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await challan_service.list_challans_by_status(db, status)))


@router.get("/daterange", dependencies=[Depends(any_user)])
async def list_challans_by_date_range(start: datetime, end: datetime, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await challan_service.list_challans_by_date_range(db, start, end)))


@router.get("/overdue", dependencies=[Depends(any_user)])
async def list_overdue_challans(db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await challan_service.list_overdue_challans(db)))


@router.get("/{challan_id}", dependencies=[Depends(any_user)])
async def get_challan(challan_id: int, db: AsyncSession = Depends(get_db)):
    challan = await challan_service.get_challan(db, challan_id)
    return success_response(data=challan_to_dict(challan, include_evidence=True))


@router.get("/{challan_id}/verify", dependencies=[Depends(any_user)])
async def verify_challan(challan_id: int, db: AsyncSession = Depends(get_db)):
    result = await challan_service.verify_challan(db, challan_id)
    return success_response(data=result, message=result["verification_message"])
