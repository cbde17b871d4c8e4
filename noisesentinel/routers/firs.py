from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import any_user, station_authority_only
from noisesentinel.schemas.fir import FirCreate, FirUpdate
from noisesentinel.services import firs as fir_service
from noisesentinel.services.serializers import challan_to_dict, fir_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/fir", tags=["firs"])


def _dump_all(firs) -> list[dict]:
    return [fir_to_dict(f) for f in firs]


@router.post("/create", status_code=201, dependencies=[Depends(station_authority_only)])
async def create_fir(payload: FirCreate, db: AsyncSession = Depends(get_db)):
    fir, message = await fir_service.create_fir(db, payload)
    return success_response(data=fir_to_dict(fir), message=message)


@router.get("", dependencies=[Depends(any_user)])
async def list_firs(db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await fir_service.list_firs(db)))


@router.get("/cognizable-challans", dependencies=[Depends(station_authority_only)])
async def list_cognizable_challans(db: AsyncSession = Depends(get_db)):
    challans = await fir_service.list_cognizable_challans_without_fir(db)
    return success_response(data=[challan_to_dict(c) for c in challans])


@router.get("/number/{fir_no}", dependencies=[Depends(any_user)])
async def get_fir_by_number(fir_no: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=fir_to_dict(await fir_service.get_fir_by_number(db, fir_no)))


@router.get("/station/{station_id}", dependencies=[Depends(any_user)])
async def list_station_firs(station_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await fir_service.list_station_firs(db, station_id)))


@router.get("/informant/{officer_id}", dependencies=[Depends(any_user)])
async def list_informant_firs(officer_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await fir_service.list_informant_firs(db, officer_id)))


@router.get("/status/{status}", dependencies=[Depends(any_user)])
async def list_firs_by_status(status: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await fir_service.list_firs_by_status(db, status)))


@router.get("/daterange", dependencies=[Depends(any_user)])
async def list_firs_by_date_range(start: datetime, end: datetime, db: AsyncSession = Depends(get_db)):
    return success_response(data=_dump_all(await fir_service.list_firs_by_date_range(db, start, end)))


@router.get("/{fir_id}", dependencies=[Depends(any_user)])
async def get_fir(fir_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=fir_to_dict(await fir_service.get_fir(db, fir_id)))


@router.put("/{fir_id}", dependencies=[Depends(station_authority_only)])
async def update_fir(fir_id: int, payload: FirUpdate, db: AsyncSession = Depends(get_db)):
    fir = await fir_service.update_fir(db, fir_id, payload)
    return success_response(data=fir_to_dict(fir), message=f"FIR {fir.fir_no} updated successfully.")
