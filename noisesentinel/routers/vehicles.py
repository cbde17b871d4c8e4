from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import any_user, require_roles
from noisesentinel.models.user import POLICE_OFFICER, STATION_AUTHORITY
from noisesentinel.schemas.vehicle import VehicleCreate, VehicleUpdate
from noisesentinel.services import vehicles as vehicle_service
from noisesentinel.services.serializers import vehicle_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/vehicle", tags=["vehicles"])

_vehicle_editors = require_roles(POLICE_OFFICER, STATION_AUTHORITY)


@router.post("", status_code=201, dependencies=[Depends(_vehicle_editors)])
async def create_vehicle(payload: VehicleCreate, db: AsyncSession = Depends(get_db)):
    vehicle = await vehicle_service.create_vehicle(db, payload)
    return success_response(data=vehicle_to_dict(vehicle), message="Vehicle registered successfully.")


@router.get("", dependencies=[Depends(any_user)])
async def list_vehicles(db: AsyncSession = Depends(get_db)):
    vehicles = await vehicle_service.list_vehicles(db)
    return success_response(data=[vehicle_to_dict(v) for v in vehicles])


@router.get("/search", dependencies=[Depends(any_user)])
async def search_vehicles(make: str, db: AsyncSession = Depends(get_db)):
    vehicles = await vehicle_service.list_vehicles(db, make=make)
    return success_response(data=[vehicle_to_dict(v) for v in vehicles])


@router.get("/plate/{plate_number}", dependencies=[Depends(any_user)])
async def get_vehicle_by_plate(plate_number: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=vehicle_to_dict(await vehicle_service.get_vehicle_by_plate(db, plate_number)))


@router.get("/owner/{accused_id}", dependencies=[Depends(any_user)])
async def list_owner_vehicles(accused_id: int, db: AsyncSession = Depends(get_db)):
    vehicles = await vehicle_service.list_vehicles(db, owner_id=accused_id)
    return success_response(data=[vehicle_to_dict(v) for v in vehicles])


@router.get("/{vehicle_id}", dependencies=[Depends(any_user)])
async def get_vehicle(vehicle_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=vehicle_to_dict(await vehicle_service.get_vehicle(db, vehicle_id)))


@router.put("/{vehicle_id}", dependencies=[Depends(_vehicle_editors)])
async def update_vehicle(vehicle_id: int, payload: VehicleUpdate, db: AsyncSession = Depends(get_db)):
    vehicle = await vehicle_service.update_vehicle(db, vehicle_id, payload)
    return success_response(data=vehicle_to_dict(vehicle), message="Vehicle updated successfully.")


@router.delete("/{vehicle_id}", dependencies=[Depends(_vehicle_editors)])
async def delete_vehicle(vehicle_id: int, db: AsyncSession = Depends(get_db)):
    await vehicle_service.delete_vehicle(db, vehicle_id)
    return success_response(message="Vehicle deleted successfully.")
