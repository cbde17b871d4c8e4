from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import reload
from noisesentinel.models.court import Court, Courttype, Judge
from noisesentinel.models.user import User
from noisesentinel.schemas.court import CourtCreate, CourtUpdate
from noisesentinel.utils.exceptions import AppException, NotFoundError


async def get_judge_profile(db: AsyncSession, user: User) -> Judge:
    judge = await db.scalar(select(Judge).where(Judge.user_id == user.id))
    if judge is None:
        raise AppException("Judge profile not found for the current user.", status_code=403)
    return judge


async def get_judge(db: AsyncSession, judge_id: int) -> Judge:
    judge = await db.get(Judge, judge_id)
    if judge is None:
        raise NotFoundError("Judge not found.")
    return judge


async def list_court_types(db: AsyncSession) -> list[Courttype]:
    result = await db.execute(select(Courttype).order_by(Courttype.id))
    return list(result.scalars().all())


async def get_court(db: AsyncSession, court_id: int) -> Court:
    court = await db.get(Court, court_id)
    if court is None:
        raise NotFoundError("Court not found.")
    return court


async def _check_court_type(db: AsyncSession, court_type_id: int) -> None:
    if await db.get(Courttype, court_type_id) is None:
        raise NotFoundError("Court type not found.")


async def _check_unique_name(db: AsyncSession, name: str, province: str, exclude_id: int | None = None) -> None:
    query = select(Court.id).where(
        func.lower(Court.court_name) == name.lower(),
        func.lower(Court.province) == province.lower(),
    )
    if exclude_id is not None:
        query = query.where(Court.id != exclude_id)
    if await db.scalar(query) is not None:
        raise AppException(f"A court named '{name}' already exists in {province}.")


async def create_court(db: AsyncSession, payload: CourtCreate) -> Court:
    await _check_court_type(db, payload.court_type_id)
    await _check_unique_name(db, payload.court_name, payload.province)
    court = Court(**payload.model_dump())
    db.add(court)
    await db.commit()
    return await reload(db, court)


async def list_courts(db: AsyncSession) -> list[Court]:
    result = await db.execute(select(Court).order_by(Court.court_name))
    return list(result.scalars().all())


async def list_court_judges(db: AsyncSession, court_id: int) -> list[Judge]:
    await get_court(db, court_id)
    result = await db.execute(select(Judge).where(Judge.court_id == court_id).order_by(Judge.id))
    return list(result.scalars().all())


async def update_court(db: AsyncSession, court_id: int, payload: CourtUpdate) -> Court:
    court = await get_court(db, court_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "court_type_id" in changes:
        await _check_court_type(db, changes["court_type_id"])
    await _check_unique_name(
        db,
        changes.get("court_name", court.court_name),
        changes.get("province", court.province),
        exclude_id=court.id,
    )
    for field, value in changes.items():
        setattr(court, field, value)
    await db.commit()
    return await reload(db, court)


async def delete_court(db: AsyncSession, court_id: int) -> None:
    court = await get_court(db, court_id)
    judges = await db.scalar(select(func.count(Judge.id)).where(Judge.court_id == court.id))
    if judges:
        raise AppException(f"Cannot delete court with {judges} assigned judge(s).")
    await db.execute(delete(Court).where(Court.id == court.id))
    await db.commit()
