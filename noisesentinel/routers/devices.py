from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import any_user, police_officer_only, require_roles, station_authority_only
from noisesentinel.models.user import POLICE_OFFICER, STATION_AUTHORITY, User
from noisesentinel.schemas.device import DevicePair, DeviceRegister, DeviceUpdate
from noisesentinel.services import devices as device_service
from noisesentinel.services.serializers import device_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/iotdevice", tags=["iot devices"])


@router.post("/register", status_code=201, dependencies=[Depends(station_authority_only)])
async def register_device(payload: DeviceRegister, db: AsyncSession = Depends(get_db)):
    device = await device_service.register_device(db, payload)
    return success_response(data=device_to_dict(device), message="IoT device registered successfully.")


@router.get("", dependencies=[Depends(any_user)])
async def list_devices(db: AsyncSession = Depends(get_db)):
    devices = await device_service.list_devices(db)
    return success_response(data=[device_to_dict(d) for d in devices])


@router.get("/available", dependencies=[Depends(any_user)])
async def list_available_devices(db: AsyncSession = Depends(get_db)):
    devices = await device_service.list_devices(db, available_only=True)
    return success_response(data=[device_to_dict(d) for d in devices])


@router.get("/name/{device_name}", dependencies=[Depends(any_user)])
async def get_device_by_name(device_name: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=device_to_dict(await device_service.get_device_by_name(db, device_name)))


@router.post("/pair")
async def pair_device(
    payload: DevicePair,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(police_officer_only),
):
    device = await device_service.pair_device(db, user, payload.device_id)
    return success_response(data=device_to_dict(device), message=f"Device {device.device_name} paired successfully.")


@router.get("/{device_id}", dependencies=[Depends(any_user)])
async def get_device(device_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=device_to_dict(await device_service.get_device(db, device_id)))


@router.put("/{device_id}", dependencies=[Depends(station_authority_only)])
async def update_device(device_id: int, payload: DeviceUpdate, db: AsyncSession = Depends(get_db)):
    device = await device_service.update_device(db, device_id, payload)
    return success_response(data=device_to_dict(device), message="IoT device updated successfully.")


@router.post("/{device_id}/unpair")
async def unpair_device(
    device_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_roles(POLICE_OFFICER, STATION_AUTHORITY)),
):
    device = await device_service.unpair_device(db, user, device_id)
    return success_response(data=device_to_dict(device), message=f"Device {device.device_name} unpaired.")
