from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import admin_only, any_user, authority_roles, require_roles
from noisesentinel.models.user import ADMIN, COURT_AUTHORITY
from noisesentinel.schemas.court import CourtCreate, CourtTypeResponse, CourtUpdate
from noisesentinel.services import courts as court_service
from noisesentinel.services.serializers import court_to_dict, judge_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/court", tags=["courts"])

_court_managers = require_roles(ADMIN, COURT_AUTHORITY)


@router.get("/types", dependencies=[Depends(any_user)])
async def list_court_types(db: AsyncSession = Depends(get_db)):
    types = await court_service.list_court_types(db)
    return success_response(data=[CourtTypeResponse.model_validate(t).model_dump() for t in types])


@router.post("", status_code=201, dependencies=[Depends(_court_managers)])
async def create_court(payload: CourtCreate, db: AsyncSession = Depends(get_db)):
    court = await court_service.create_court(db, payload)
    return success_response(data=court_to_dict(court), message="Court created successfully.")


@router.get("", dependencies=[Depends(authority_roles)])
async def list_courts(db: AsyncSession = Depends(get_db)):
    courts = await court_service.list_courts(db)
    return success_response(data=[court_to_dict(c) for c in courts])


@router.get("/{court_id}", dependencies=[Depends(authority_roles)])
async def get_court(court_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=court_to_dict(await court_service.get_court(db, court_id)))


@router.get("/{court_id}/judges", dependencies=[Depends(authority_roles)])
async def list_court_judges(court_id: int, db: AsyncSession = Depends(get_db)):
    judges = await court_service.list_court_judges(db, court_id)
    return success_response(data=[judge_to_dict(j) for j in judges])


@router.put("/{court_id}", dependencies=[Depends(_court_managers)])
async def update_court(court_id: int, payload: CourtUpdate, db: AsyncSession = Depends(get_db)):
    court = await court_service.update_court(db, court_id, payload)
    return success_response(data=court_to_dict(court), message="Court updated successfully.")


@router.delete("/{court_id}", dependencies=[Depends(admin_only)])
async def delete_court(court_id: int, db: AsyncSession = Depends(get_db)):
    await court_service.delete_court(db, court_id)
    return success_response(message="Court deleted successfully.")
