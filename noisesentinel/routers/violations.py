from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import any_user, station_authority_only
from noisesentinel.schemas.violation import ViolationCreate, ViolationUpdate
from noisesentinel.services import violations as violation_service
from noisesentinel.services.serializers import violation_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/violation", tags=["violations"])


@router.post("", status_code=201, dependencies=[Depends(station_authority_only)])
async def create_violation(payload: ViolationCreate, db: AsyncSession = Depends(get_db)):
    violation = await violation_service.create_violation(db, payload)
    return success_response(data=violation_to_dict(violation), message="Violation created successfully.")


@router.get("", dependencies=[Depends(any_user)])
async def list_violations(db: AsyncSession = Depends(get_db)):
    violations = await violation_service.list_violations(db)
    return success_response(data=[violation_to_dict(v) for v in violations])


@router.get("/cognizable", dependencies=[Depends(any_user)])
async def list_cognizable_violations(db: AsyncSession = Depends(get_db)):
    violations = await violation_service.list_violations(db, cognizable_only=True)
    return success_response(data=[violation_to_dict(v) for v in violations])


@router.get("/{violation_id}", dependencies=[Depends(any_user)])
async def get_violation(violation_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=violation_to_dict(await violation_service.get_violation(db, violation_id)))


@router.put("/{violation_id}", dependencies=[Depends(station_authority_only)])
async def update_violation(violation_id: int, payload: ViolationUpdate, db: AsyncSession = Depends(get_db)):
    violation = await violation_service.update_violation(db, violation_id, payload)
    return success_response(data=violation_to_dict(violation), message="Violation updated successfully.")


@router.delete("/{violation_id}", dependencies=[Depends(station_authority_only)])
async def delete_violation(violation_id: int, db: AsyncSession = Depends(get_db)):
    await violation_service.delete_violation(db, violation_id)
    return success_response(message="Violation deleted successfully.")
