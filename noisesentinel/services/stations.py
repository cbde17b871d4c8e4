from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.models.fir import Fir
from noisesentinel.models.police import Policeofficer, Policestation
from noisesentinel.models.user import User
from noisesentinel.schemas.station import StationCreate, StationUpdate
from noisesentinel.utils.exceptions import AppException, NotFoundError


async def get_officer_profile(db: AsyncSession, user: User) -> Policeofficer:
    officer = await db.scalar(select(Policeofficer).where(Policeofficer.user_id == user.id))
    if officer is None:
        raise AppException("Police officer profile not found for the current user.", status_code=403)
    return officer


async def get_station(db: AsyncSession, station_id: int) -> Policestation:
    station = await db.get(Policestation, station_id)
    if station is None:
        raise NotFoundError("Police station not found.")
    return station


async def _check_unique(db: AsyncSession, name: str, province: str, code: str, exclude_id: int | None = None) -> None:
    name_query = select(Policestation.id).where(
        func.lower(Policestation.station_name) == name.lower(),
        func.lower(Policestation.province) == province.lower(),
    )
    code_query = select(Policestation.id).where(func.upper(Policestation.station_code) == code.upper())
    if exclude_id is not None:
        name_query = name_query.where(Policestation.id != exclude_id)
        code_query = code_query.where(Policestation.id != exclude_id)

    if await db.scalar(name_query) is not None:
        raise AppException(f"A police station named '{name}' already exists in {province}.")
    if await db.scalar(code_query) is not None:
        raise AppException(f"Station code '{code}' is already in use.")


async def create_station(db: AsyncSession, payload: StationCreate) -> Policestation:
    code = payload.station_code.upper()
    await _check_unique(db, payload.station_name, payload.province, code)
    station = Policestation(**payload.model_dump(exclude={"station_code"}), station_code=code)
    db.add(station)
    await db.commit()
    return station


async def list_stations(db: AsyncSession) -> list[Policestation]:
    result = await db.execute(select(Policestation).order_by(Policestation.station_name))
    return list(result.scalars().all())


async def list_station_officers(db: AsyncSession, station_id: int) -> list[Policeofficer]:
    await get_station(db, station_id)
    result = await db.execute(
        select(Policeofficer).where(Policeofficer.station_id == station_id).order_by(Policeofficer.badge_number)
    )
    return list(result.scalars().all())


async def update_station(db: AsyncSession, station_id: int, payload: StationUpdate) -> Policestation:
    station = await get_station(db, station_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "station_code" in changes:
        changes["station_code"] = changes["station_code"].upper()
    await _check_unique(
        db,
        changes.get("station_name", station.station_name),
        changes.get("province", station.province),
        changes.get("station_code", station.station_code),
        exclude_id=station.id,
    )
    for field, value in changes.items():
        setattr(station, field, value)
    await db.commit()
    return station


async def delete_station(db: AsyncSession, station_id: int) -> None:
    station = await get_station(db, station_id)
    officers = await db.scalar(select(func.count(Policeofficer.id)).where(Policeofficer.station_id == station.id))
    if officers:
        raise AppException(f"Cannot delete police station with {officers} assigned officer(s).")
    firs = await db.scalar(select(func.count(Fir.id)).where(Fir.station_id == station.id))
    if firs:
        raise AppException(f"Cannot delete police station with {firs} filed FIR(s).")
    await db.execute(delete(Policestation).where(Policestation.id == station.id))
    await db.commit()
