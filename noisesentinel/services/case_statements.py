import logging
import smtplib

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import reload
from noisesentinel.models.case import Case, Casestatement
from noisesentinel.models.user import User
from noisesentinel.schemas.case import StatementCreate, StatementUpdate
from noisesentinel.services.cases import get_case
from noisesentinel.services.courts import get_judge_profile
from noisesentinel.services.email_service import send_case_statement_notification
from noisesentinel.utils.exceptions import AppException, NotFoundError

logger = logging.getLogger(__name__)

SUMMARY_LENGTH = 200


def summarize(text: str) -> str:
    if len(text) <= SUMMARY_LENGTH:
        return text
    return text[:SUMMARY_LENGTH] + "..."


async def _assigned_case(db: AsyncSession, user: User, case_id: int, action: str) -> Case:
    case = await get_case(db, case_id)
    judge = await get_judge_profile(db, user)
    if case.judge_id != judge.id:
        raise AppException(f"You can only {action} statements for cases assigned to you.", status_code=403)
    return case


async def get_statement(db: AsyncSession, statement_id: int) -> Casestatement:
    statement = await db.get(Casestatement, statement_id)
    if statement is None:
        raise NotFoundError("Case statement not found.")
    return statement


async def _notify_accused(case: Case, statement: Casestatement) -> None:
    accused = case.fir.challan.accused
    if not accused.email:
        logger.info("Accused %s has no email, statement %s not notified", accused.cnic, statement.id)
        return
    try:
        await send_case_statement_notification(
            accused.email,
            accused.full_name,
            case.case_no,
            statement.statement_by,
            summarize(statement.statement_text),
        )
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("Failed to notify accused %s about case %s: %s", accused.cnic, case.case_no, exc)


async def create_statement(db: AsyncSession, user: User, payload: StatementCreate) -> Casestatement:
    case = await _assigned_case(db, user, payload.case_id, "create")
    statement = Casestatement(
        case_id=case.id,
        statement_by=payload.statement_by or user.full_name,
        statement_text=payload.statement_text,
    )
    db.add(statement)
    await db.commit()
    statement = await reload(db, statement)
    logger.info("Statement %s recorded in case %s", statement.id, case.case_no)

    await _notify_accused(case, statement)
    return statement


async def update_statement(
    db: AsyncSession, user: User, statement_id: int, payload: StatementUpdate
) -> Casestatement:
    statement = await get_statement(db, statement_id)
    await _assigned_case(db, user, statement.case_id, "update")
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(statement, field, value)
    await db.commit()
    return statement


async def delete_statement(db: AsyncSession, user: User, statement_id: int) -> None:
    statement = await get_statement(db, statement_id)
    await _assigned_case(db, user, statement.case_id, "delete")
    await db.execute(delete(Casestatement).where(Casestatement.id == statement.id))
    await db.commit()


async def list_statements(db: AsyncSession, case_id: int | None = None) -> list[Casestatement]:
    query = select(Casestatement).order_by(Casestatement.statement_date.desc(), Casestatement.id.desc())
    if case_id is not None:
        await get_case(db, case_id)
        query = query.where(Casestatement.case_id == case_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_latest_statement(db: AsyncSession, case_id: int) -> Casestatement:
    statements = await list_statements(db, case_id)
    if not statements:
        raise NotFoundError("No statements recorded for this case.")
    return statements[0]
