from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import admin_only, authority_roles, require_roles
from noisesentinel.models.user import ADMIN, STATION_AUTHORITY
from noisesentinel.schemas.station import StationCreate, StationUpdate
from noisesentinel.services import stations as station_service
from noisesentinel.services.serializers import officer_to_dict, station_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/policestation", tags=["police stations"])

_station_managers = require_roles(ADMIN, STATION_AUTHORITY)


@router.post("", status_code=201, dependencies=[Depends(_station_managers)])
async def create_station(payload: StationCreate, db: AsyncSession = Depends(get_db)):
    station = await station_service.create_station(db, payload)
    return success_response(data=station_to_dict(station), message="Police station created successfully.")


@router.get("", dependencies=[Depends(authority_roles)])
async def list_stations(db: AsyncSession = Depends(get_db)):
    stations = await station_service.list_stations(db)
    return success_response(data=[station_to_dict(s) for s in stations])


@router.get("/{station_id}", dependencies=[Depends(authority_roles)])
async def get_station(station_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=station_to_dict(await station_service.get_station(db, station_id)))


@router.get("/{station_id}/officers", dependencies=[Depends(authority_roles)])
async def list_station_officers(station_id: int, db: AsyncSession = Depends(get_db)):
    officers = await station_service.list_station_officers(db, station_id)
    return success_response(data=[officer_to_dict(o) for o in officers])


@router.put("/{station_id}", dependencies=[Depends(_station_managers)])
async def update_station(station_id: int, payload: StationUpdate, db: AsyncSession = Depends(get_db)):
    station = await station_service.update_station(db, station_id, payload)
    return success_response(data=station_to_dict(station), message="Police station updated successfully.")


@router.delete("/{station_id}", dependencies=[Depends(admin_only)])
async def delete_station(station_id: int, db: AsyncSession = Depends(get_db)):
    await station_service.delete_station(db, station_id)
    return success_response(message="Police station deleted successfully.")
