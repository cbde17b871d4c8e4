from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import any_user, require_roles
from noisesentinel.models.user import POLICE_OFFICER, STATION_AUTHORITY
from noisesentinel.schemas.accused import AccusedInput, AccusedUpdate
from noisesentinel.services import accused as accused_service
from noisesentinel.services.serializers import accused_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/accused", tags=["accused"])

_accused_editors = require_roles(POLICE_OFFICER, STATION_AUTHORITY)


@router.post("", status_code=201, dependencies=[Depends(_accused_editors)])
async def create_accused(payload: AccusedInput, db: AsyncSession = Depends(get_db)):
    accused = await accused_service.create_accused(db, payload)
    return success_response(data=accused_to_dict(accused), message="Accused registered successfully.")


@router.get("", dependencies=[Depends(any_user)])
async def list_accused(db: AsyncSession = Depends(get_db)):
    return success_response(data=[accused_to_dict(a) for a in await accused_service.list_accused(db)])


@router.get("/search", dependencies=[Depends(any_user)])
async def search_accused(name: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=[accused_to_dict(a) for a in await accused_service.list_accused(db, name=name)])


@router.get("/cnic/{cnic}", dependencies=[Depends(any_user)])
async def get_accused_by_cnic(cnic: str, db: AsyncSession = Depends(get_db)):
    return success_response(data=accused_to_dict(await accused_service.get_accused_by_cnic(db, cnic)))


@router.get("/{accused_id}", dependencies=[Depends(any_user)])
async def get_accused(accused_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=accused_to_dict(await accused_service.get_accused(db, accused_id)))


@router.put("/{accused_id}", dependencies=[Depends(_accused_editors)])
async def update_accused(accused_id: int, payload: AccusedUpdate, db: AsyncSession = Depends(get_db)):
    accused = await accused_service.update_accused(db, accused_id, payload)
    return success_response(data=accused_to_dict(accused), message="Accused updated successfully.")


@router.delete("/{accused_id}", dependencies=[Depends(_accused_editors)])
async def delete_accused(accused_id: int, db: AsyncSession = Depends(get_db)):
    await accused_service.delete_accused(db, accused_id)
    return success_response(message="Accused deleted successfully.")
