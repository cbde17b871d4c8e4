from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import court_roles, judge_only
from noisesentinel.models.user import User
from noisesentinel.schemas.case import StatementCreate, StatementUpdate
from noisesentinel.services import case_statements as statement_service
from noisesentinel.services.serializers import statement_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/casestatement", tags=["case statements"])


@router.post("/create", status_code=201)
async def create_statement(
    payload: StatementCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(judge_only),
):
    statement = await statement_service.create_statement(db, user, payload)
    return success_response(data=statement_to_dict(statement), message="Case statement recorded successfully.")


@router.get("", dependencies=[Depends(court_roles)])
async def list_statements(db: AsyncSession = Depends(get_db)):
    statements = await statement_service.list_statements(db)
    return success_response(data=[statement_to_dict(s) for s in statements])


@router.get("/case/{case_id}", dependencies=[Depends(court_roles)])
async def list_case_statements(case_id: int, db: AsyncSession = Depends(get_db)):
    statements = await statement_service.list_statements(db, case_id)
    return success_response(data=[statement_to_dict(s) for s in statements])


@router.get("/case/{case_id}/latest", dependencies=[Depends(court_roles)])
async def get_latest_statement(case_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=statement_to_dict(await statement_service.get_latest_statement(db, case_id)))


@router.get("/{statement_id}", dependencies=[Depends(court_roles)])
async def get_statement(statement_id: int, db: AsyncSession = Depends(get_db)):
    return success_response(data=statement_to_dict(await statement_service.get_statement(db, statement_id)))


@router.put("/{statement_id}")
async def update_statement(
    statement_id: int,
    payload: StatementUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(judge_only),
):
    statement = await statement_service.update_statement(db, user, statement_id, payload)
    return success_response(data=statement_to_dict(statement), message="Case statement updated successfully.")


@router.delete("/{statement_id}")
async def delete_statement(statement_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(judge_only)):
    await statement_service.delete_statement(db, user, statement_id)
    return success_response(message="Case statement deleted successfully.")
