import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import reload
from noisesentinel.models.challan import Challan
from noisesentinel.models.vehicle import Vehicle
from noisesentinel.schemas.vehicle import VehicleCreate, VehicleInput, VehicleUpdate
from noisesentinel.services.accused import get_accused
from noisesentinel.utils.dates import utcnow
from noisesentinel.utils.exceptions import AppException, NotFoundError

logger = logging.getLogger(__name__)

_DETAIL_FIELDS = ("make", "color", "chassis_no", "engine_no", "reg_year")


def _check_reg_year(reg_year: int | None) -> None:
    if reg_year is not None and reg_year > utcnow().year:
        raise AppException("Registration year cannot be in the future.")


async def get_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    vehicle = await db.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise NotFoundError("Vehicle not found.")
    return vehicle


async def find_by_plate(db: AsyncSession, plate_number: str) -> Vehicle | None:
    return await db.scalar(select(Vehicle).where(Vehicle.plate_number == plate_number.strip().upper()))


async def get_vehicle_by_plate(db: AsyncSession, plate_number: str) -> Vehicle:
    vehicle = await find_by_plate(db, plate_number)
    if vehicle is None:
        raise NotFoundError("Vehicle not found.")
    return vehicle


async def create_vehicle(db: AsyncSession, payload: VehicleCreate) -> Vehicle:
    if await find_by_plate(db, payload.plate_number) is not None:
        raise AppException(f"A vehicle with plate number {payload.plate_number} already exists.")
    _check_reg_year(payload.reg_year)
    if payload.owner_id is not None:
        await get_accused(db, payload.owner_id)
    vehicle = Vehicle(**payload.model_dump())
    db.add(vehicle)
    await db.commit()
    return await reload(db, vehicle)


async def get_or_create_vehicle(db: AsyncSession, payload: VehicleInput) -> Vehicle:
    """Match by plate, filling in missing details, or stage a new row. Does not commit."""
    _check_reg_year(payload.reg_year)
    vehicle = await find_by_plate(db, payload.plate_number)
    if vehicle is None:
        vehicle = Vehicle(**payload.model_dump())
        db.add(vehicle)
        await db.flush()
        logger.info("Vehicle %s created during challan issue", vehicle.plate_number)
        return vehicle

    for field in _DETAIL_FIELDS:
        value = getattr(payload, field)
        if value is not None and getattr(vehicle, field) in (None, ""):
            setattr(vehicle, field, value)
    return vehicle


async def list_vehicles(db: AsyncSession, owner_id: int | None = None, make: str | None = None) -> list[Vehicle]:
    query = select(Vehicle).order_by(Vehicle.plate_number)
    if owner_id is not None:
        query = query.where(Vehicle.owner_id == owner_id)
    if make:
        query = query.where(func.lower(Vehicle.make).like(f"%{make.strip().lower()}%"))
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_vehicle(db: AsyncSession, vehicle_id: int, payload: VehicleUpdate) -> Vehicle:
    vehicle = await get_vehicle(db, vehicle_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "plate_number" in changes and changes["plate_number"] != vehicle.plate_number:
        if await find_by_plate(db, changes["plate_number"]) is not None:
            raise AppException(f"A vehicle with plate number {changes['plate_number']} already exists.")
    _check_reg_year(changes.get("reg_year"))
    if "owner_id" in changes:
        await get_accused(db, changes["owner_id"])
    for field, value in changes.items():
        setattr(vehicle, field, value)
    await db.commit()
    return await reload(db, vehicle)


async def delete_vehicle(db: AsyncSession, vehicle_id: int) -> None:
    vehicle = await get_vehicle(db, vehicle_id)
    challans = await db.scalar(select(func.count(Challan.id)).where(Challan.vehicle_id == vehicle.id))
    if challans:
        raise AppException(f"Cannot delete vehicle referenced by {challans} challan(s).")
    await db.execute(delete(Vehicle).where(Vehicle.id == vehicle.id))
    await db.commit()
