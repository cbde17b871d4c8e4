from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import admin_only, require_roles
from noisesentinel.models.user import ADMIN, COURT_AUTHORITY, STATION_AUTHORITY, User
from noisesentinel.schemas.auth import JudgeUpdate, OfficerUpdate, UserUpdate
from noisesentinel.services import users as user_service
from noisesentinel.services.serializers import judge_to_dict, officer_to_dict, user_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/users", tags=["users"])

_judge_managers = require_roles(ADMIN, COURT_AUTHORITY)
_officer_managers = require_roles(ADMIN, STATION_AUTHORITY)


@router.get("", dependencies=[Depends(admin_only)])
async def list_users(
    role: str | None = None,
    is_active: bool | None = None,
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    users = await user_service.list_users(db, role=role, is_active=is_active, search=search)
    return success_response(data=[user_to_dict(u) for u in users])


@router.get("/counts", dependencies=[Depends(admin_only)])
async def count_users(db: AsyncSession = Depends(get_db)):
    return success_response(data=await user_service.count_users(db))


@router.get("/judges", dependencies=[Depends(_judge_managers)])
async def list_judges(db: AsyncSession = Depends(get_db)):
    judges = await user_service.list_judges(db)
    return success_response(data=[judge_to_dict(j) for j in judges])


@router.get("/police-officers", dependencies=[Depends(_officer_managers)])
async def list_officers(db: AsyncSession = Depends(get_db)):
    officers = await user_service.list_officers(db)
    return success_response(data=[officer_to_dict(o) for o in officers])


@router.put("/judges/{judge_id}", dependencies=[Depends(_judge_managers)])
async def update_judge(judge_id: int, payload: JudgeUpdate, db: AsyncSession = Depends(get_db)):
    judge = await user_service.update_judge(db, judge_id, payload)
    return success_response(data=judge_to_dict(judge), message=f"Judge '{judge.user.full_name}' updated successfully.")


@router.put("/officers/{officer_id}", dependencies=[Depends(_officer_managers)])
async def update_officer(officer_id: int, payload: OfficerUpdate, db: AsyncSession = Depends(get_db)):
    officer = await user_service.update_officer(db, officer_id, payload)
    return success_response(
        data=officer_to_dict(officer), message=f"Police officer '{officer.user.full_name}' updated successfully."
    )


@router.get("/{user_id}", dependencies=[Depends(admin_only)])
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=user_to_dict(await user_service.get_user(db, user_id)))


@router.put("/{user_id}", dependencies=[Depends(admin_only)])
async def update_user(user_id: int, payload: UserUpdate, db: AsyncSession = Depends(get_db)):
    user = await user_service.update_user(db, user_id, payload)
    return success_response(data=user_to_dict(user), message="User updated successfully.")


@router.put("/{user_id}/activate")
async def activate_user(user_id: int, db: AsyncSession = Depends(get_db), admin: User = Depends(admin_only)):
    user = await user_service.set_user_active(db, admin, user_id, True)
    return success_response(data=user_to_dict(user), message="User activated successfully.")


@router.put("/{user_id}/deactivate")
async def deactivate_user(user_id: int, db: AsyncSession = Depends(get_db), admin: User = Depends(admin_only)):
    user = await user_service.set_user_active(db, admin, user_id, False)
    return success_response(data=user_to_dict(user), message="User deactivated successfully.")


@router.delete("/{user_id}")
async def delete_user(user_id: int, db: AsyncSession = Depends(get_db), admin: User = Depends(admin_only)):
    await user_service.delete_user(db, admin, user_id)
    return success_response(message="User deleted successfully.")
