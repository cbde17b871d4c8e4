import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.models.accused import Accused
from noisesentinel.models.challan import Challan
from noisesentinel.models.vehicle import Vehicle
from noisesentinel.schemas.accused import AccusedInput, AccusedUpdate
from noisesentinel.utils.exceptions import AppException, NotFoundError

logger = logging.getLogger(__name__)


async def get_accused(db: AsyncSession, accused_id: int) -> Accused:
    accused = await db.get(Accused, accused_id)
    if accused is None:
        raise NotFoundError("Accused not found.")
    return accused


async def find_by_cnic(db: AsyncSession, cnic: str) -> Accused | None:
    return await db.scalar(select(Accused).where(Accused.cnic == cnic))


async def get_accused_by_cnic(db: AsyncSession, cnic: str) -> Accused:
    accused = await find_by_cnic(db, cnic)
    if accused is None:
        raise NotFoundError("Accused not found.")
    return accused


async def create_accused(db: AsyncSession, payload: AccusedInput) -> Accused:
    if await find_by_cnic(db, payload.cnic) is not None:
        raise AppException(f"An accused with CNIC {payload.cnic} already exists.")
    accused = Accused(**payload.model_dump())
    db.add(accused)
    await db.commit()
    return accused


async def get_or_create_accused(db: AsyncSession, payload: AccusedInput) -> Accused:
    """Match by CNIC, refreshing contact details, or stage a new row. Does not commit."""
    accused = await find_by_cnic(db, payload.cnic)
    if accused is None:
        accused = Accused(**payload.model_dump())
        db.add(accused)
        await db.flush()
        logger.info("Accused %s created during challan issue", accused.cnic)
        return accused

    for field in ("contact", "address", "email"):
        value = getattr(payload, field)
        if value and value != getattr(accused, field):
            setattr(accused, field, value)
    return accused


async def list_accused(db: AsyncSession, name: str | None = None) -> list[Accused]:
    query = select(Accused).order_by(Accused.full_name)
    if name:
        query = query.where(func.lower(Accused.full_name).like(f"%{name.strip().lower()}%"))
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_accused(db: AsyncSession, accused_id: int, payload: AccusedUpdate) -> Accused:
    accused = await get_accused(db, accused_id)
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(accused, field, value)
    await db.commit()
    return accused


async def delete_accused(db: AsyncSession, accused_id: int) -> None:
    accused = await get_accused(db, accused_id)
    challans = await db.scalar(select(func.count(Challan.id)).where(Challan.accused_id == accused.id))
    if challans:
        raise AppException(f"Cannot delete accused with {challans} challan(s).")
    vehicles = await db.scalar(select(func.count(Vehicle.id)).where(Vehicle.owner_id == accused.id))
    if vehicles:
        raise AppException(f"Cannot delete accused who owns {vehicles} vehicle(s).")
    await db.execute(delete(Accused).where(Accused.id == accused.id))
    await db.commit()
