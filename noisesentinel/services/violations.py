from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.models.challan import Challan
from noisesentinel.models.violation import Violation
from noisesentinel.schemas.violation import ViolationCreate, ViolationUpdate
from noisesentinel.utils.exceptions import AppException, NotFoundError


async def get_violation(db: AsyncSession, violation_id: int) -> Violation:
    violation = await db.get(Violation, violation_id)
    if violation is None:
        raise NotFoundError("Violation not found.")
    return violation


async def _check_unique_type(db: AsyncSession, violation_type: str, exclude_id: int | None = None) -> None:
    query = select(Violation.id).where(func.lower(Violation.violation_type) == violation_type.lower())
    if exclude_id is not None:
        query = query.where(Violation.id != exclude_id)
    if await db.scalar(query) is not None:
        raise AppException(f"Violation type '{violation_type}' already exists.")


async def create_violation(db: AsyncSession, payload: ViolationCreate) -> Violation:
    await _check_unique_type(db, payload.violation_type)
    violation = Violation(**payload.model_dump())
    db.add(violation)
    await db.commit()
    return violation


async def list_violations(db: AsyncSession, cognizable_only: bool = False) -> list[Violation]:
    query = select(Violation).order_by(Violation.violation_type)
    if cognizable_only:
        query = query.where(Violation.is_cognizable.is_(True))
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_violation(db: AsyncSession, violation_id: int, payload: ViolationUpdate) -> Violation:
    violation = await get_violation(db, violation_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "violation_type" in changes:
        await _check_unique_type(db, changes["violation_type"], exclude_id=violation.id)
    for field, value in changes.items():
        setattr(violation, field, value)
    await db.commit()
    return violation


async def delete_violation(db: AsyncSession, violation_id: int) -> None:
    violation = await get_violation(db, violation_id)
    challans = await db.scalar(select(func.count(Challan.id)).where(Challan.violation_id == violation.id))
    if challans:
        raise AppException(f"Cannot delete violation referenced by {challans} challan(s).")
    await db.execute(delete(Violation).where(Violation.id == violation.id))
    await db.commit()
