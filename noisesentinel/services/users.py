import logging

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.models.case import Case
from noisesentinel.models.challan import Challan
from noisesentinel.models.court import Judge
from noisesentinel.models.police import Policeofficer
from noisesentinel.models.user import ALL_ROLES, Role, User
from noisesentinel.schemas.auth import JudgeUpdate, OfficerUpdate, UserUpdate
from noisesentinel.services.courts import get_judge
from noisesentinel.utils.exceptions import AppException, NotFoundError

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return user


async def list_users(
    db: AsyncSession,
    role: str | None = None,
    is_active: bool | None = None,
    search: str | None = None,
) -> list[User]:
    query = select(User).join(Role, User.role_id == Role.id).order_by(User.full_name)
    if role:
        if role not in ALL_ROLES:
            raise AppException(f"Unknown role '{role}'.")
        query = query.where(Role.name == role)
    if is_active is not None:
        query = query.where(User.is_active == is_active)
    if search:
        pattern = f"%{search.strip().lower()}%"
        query = query.where(or_(
            func.lower(User.username).like(pattern),
            func.lower(User.full_name).like(pattern),
            func.lower(User.email).like(pattern),
        ))
    result = await db.execute(query)
    return list(result.scalars().all())


async def count_users(db: AsyncSession) -> dict:
    result = await db.execute(
        select(Role.name, User.is_active, func.count(User.id))
        .join(User, User.role_id == Role.id)
        .group_by(Role.name, User.is_active)
    )
    by_role = {role: 0 for role in ALL_ROLES}
    active = inactive = 0
    for role_name, is_active, count in result.all():
        by_role[role_name] = by_role.get(role_name, 0) + count
        if is_active:
            active += count
        else:
            inactive += count
    return {"total": active + inactive, "active": active, "inactive": inactive, "by_role": by_role}


async def _apply_account_changes(db: AsyncSession, user: User, payload: UserUpdate) -> None:
    if payload.email is not None and payload.email.lower() != user.email.lower():
        taken = await db.scalar(select(User.id).where(func.lower(User.email) == payload.email.lower()))
        if taken is not None:
            raise AppException("Email already exists.")
        user.email = payload.email.lower()
    if payload.full_name is not None:
        user.full_name = payload.full_name


async def update_user(db: AsyncSession, user_id: int, payload: UserUpdate) -> User:
    user = await get_user(db, user_id)
    await _apply_account_changes(db, user, payload)
    await db.commit()
    return user


async def list_judges(db: AsyncSession) -> list[Judge]:
    result = await db.execute(select(Judge).join(User, Judge.user_id == User.id).order_by(User.full_name))
    return list(result.scalars().all())


async def list_officers(db: AsyncSession) -> list[Policeofficer]:
    result = await db.execute(
        select(Policeofficer).join(User, Policeofficer.user_id == User.id).order_by(User.full_name)
    )
    return list(result.scalars().all())


async def get_officer(db: AsyncSession, officer_id: int) -> Policeofficer:
    officer = await db.get(Policeofficer, officer_id)
    if officer is None:
        raise NotFoundError("Police officer not found.")
    return officer


async def update_judge(db: AsyncSession, judge_id: int, payload: JudgeUpdate) -> Judge:
    judge = await get_judge(db, judge_id)
    if payload.cnic is not None and payload.cnic != judge.cnic:
        taken = await db.scalar(select(Judge.id).where(Judge.cnic == payload.cnic, Judge.id != judge.id))
        if taken is not None:
            raise AppException(f"A judge with CNIC {payload.cnic} already exists.")
    await _apply_account_changes(db, judge.user, payload)
    for field in ("cnic", "contact_no", "rank"):
        value = getattr(payload, field)
        if value is not None:
            setattr(judge, field, value)
    await db.commit()
    logger.info("Judge %s updated", judge.id)
    return judge


async def update_officer(db: AsyncSession, officer_id: int, payload: OfficerUpdate) -> Policeofficer:
    officer = await get_officer(db, officer_id)
    if payload.cnic is not None and payload.cnic != officer.cnic:
        taken = await db.scalar(
            select(Policeofficer.id).where(Policeofficer.cnic == payload.cnic, Policeofficer.id != officer.id)
        )
        if taken is not None:
            raise AppException(f"An officer with CNIC {payload.cnic} already exists.")
    if payload.badge_number is not None:
        taken = await db.scalar(
            select(Policeofficer.id).where(
                func.upper(Policeofficer.badge_number) == payload.badge_number.upper(),
                Policeofficer.id != officer.id,
            )
        )
        if taken is not None:
            raise AppException(f"Badge number {payload.badge_number} is already assigned.")
    await _apply_account_changes(db, officer.user, payload)
    for field in ("cnic", "contact_no", "badge_number", "rank", "is_investigation_officer"):
        value = getattr(payload, field)
        if value is not None:
            setattr(officer, field, value)
    await db.commit()
    logger.info("Officer %s updated", officer.badge_number)
    return officer


async def set_user_active(db: AsyncSession, acting_user: User, user_id: int, active: bool) -> User:
    if acting_user.id == user_id and not active:
        raise AppException("You cannot deactivate your own account.")
    user = await get_user(db, user_id)
    user.is_active = active
    await db.commit()
    logger.info("User %s %s by %s", user.username, "activated" if active else "deactivated", acting_user.username)
    return user


async def delete_user(db: AsyncSession, acting_user: User, user_id: int) -> None:
    if acting_user.id == user_id:
        raise AppException("You cannot delete your own account.")
    user = await get_user(db, user_id)

    officer_id = await db.scalar(select(Policeofficer.id).where(Policeofficer.user_id == user.id))
    if officer_id is not None:
        challans = await db.scalar(select(func.count(Challan.id)).where(Challan.officer_id == officer_id))
        if challans:
            raise AppException(
                f"Cannot delete an officer who has issued {challans} challan(s). Deactivate the account instead."
            )
        await db.execute(delete(Policeofficer).where(Policeofficer.id == officer_id))

    judge_id = await db.scalar(select(Judge.id).where(Judge.user_id == user.id))
    if judge_id is not None:
        cases = await db.scalar(select(func.count(Case.id)).where(Case.judge_id == judge_id))
        if cases:
            raise AppException(
                f"Cannot delete a judge assigned to {cases} case(s). Deactivate the account instead."
            )
        await db.execute(delete(Judge).where(Judge.id == judge_id))

    await db.execute(delete(User).where(User.id == user.id))
    await db.commit()
    logger.info("User %s deleted by %s", user.username, acting_user.username)
