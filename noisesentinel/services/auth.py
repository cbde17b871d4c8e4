import hmac
import logging
import smtplib
from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.config import settings
from noisesentinel.database import reload
from noisesentinel.models.court import Judge
from noisesentinel.models.police import Policeofficer
from noisesentinel.models.user import ADMIN, JUDGE, POLICE_OFFICER, Role, User
from noisesentinel.schemas.auth import (
    ChangePasswordRequest,
    CreateJudgeRequest,
    CreateOfficerRequest,
    LoginRequest,
    RegisterUserRequest,
    ResetPasswordRequest,
    VerifyResetOtpRequest,
)
from noisesentinel.services.courts import get_court
from noisesentinel.services.email_service import send_account_created, send_password_reset_otp
from noisesentinel.services.serializers import judge_to_dict, officer_to_dict, user_to_dict
from noisesentinel.services.stations import get_station
from noisesentinel.utils.dates import to_naive_utc, utcnow
from noisesentinel.utils.exceptions import AppException
from noisesentinel.utils.security import create_access_token, generate_otp, hash_password, verify_password

logger = logging.getLogger(__name__)


async def _get_role(db: AsyncSession, role_name: str) -> Role:
    role = await db.scalar(select(Role).where(Role.name == role_name))
    if role is None:
        raise AppException(f"Role '{role_name}' is not configured.", status_code=500)
    return role


async def _find_by_email(db: AsyncSession, email: str) -> User | None:
    return await db.scalar(select(User).where(func.lower(User.email) == email.lower()))


async def _stage_user(db: AsyncSession, payload: RegisterUserRequest, role_name: str) -> User:
    taken = await db.scalar(select(User.id).where(func.lower(User.username) == payload.username.lower()))
    if taken is not None:
        raise AppException("Username already exists.")
    if await _find_by_email(db, payload.email) is not None:
        raise AppException("Email already exists.")

    role = await _get_role(db, role_name)
    user = User(
        username=payload.username,
        email=payload.email.lower(),
        full_name=payload.full_name,
        password_hash=hash_password(payload.password),
        role_id=role.id,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    return user


async def _notify_account_created(user: User, role_name: str) -> None:
    try:
        await send_account_created(user.email, user.full_name, user.username, role_name)
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("Account email to %s failed: %s", user.email, exc)


async def register_admin(db: AsyncSession, payload: RegisterUserRequest) -> User:
    admins = await db.scalar(
        select(func.count(User.id)).join(Role, User.role_id == Role.id).where(Role.name == ADMIN)
    )
    if admins:
        raise AppException("An administrator already exists. Ask an administrator to create your account.")
    user = await _stage_user(db, payload, ADMIN)
    await db.commit()
    logger.info("Initial administrator %s registered", user.username)
    return await reload(db, user)


async def create_user(db: AsyncSession, payload: RegisterUserRequest, role_name: str) -> User:
    user = await _stage_user(db, payload, role_name)
    await db.commit()
    user = await reload(db, user)
    logger.info("%s account %s created", role_name, user.username)
    await _notify_account_created(user, role_name)
    return user


async def create_judge(db: AsyncSession, payload: CreateJudgeRequest) -> Judge:
    await get_court(db, payload.court_id)
    if await db.scalar(select(Judge.id).where(Judge.cnic == payload.cnic)) is not None:
        raise AppException(f"A judge with CNIC {payload.cnic} already exists.")

    user = await _stage_user(db, payload, JUDGE)
    judge = Judge(
        user_id=user.id,
        court_id=payload.court_id,
        cnic=payload.cnic,
        contact_no=payload.contact_no,
        rank=payload.rank,
        service_status=payload.service_status,
    )
    db.add(judge)
    await db.commit()
    judge = await reload(db, judge)
    logger.info("Judge %s created for court %s", user.username, payload.court_id)
    await _notify_account_created(judge.user, JUDGE)
    return judge


async def create_officer(db: AsyncSession, payload: CreateOfficerRequest) -> Policeofficer:
    await get_station(db, payload.station_id)
    if await db.scalar(select(Policeofficer.id).where(Policeofficer.cnic == payload.cnic)) is not None:
        raise AppException(f"An officer with CNIC {payload.cnic} already exists.")
    badge_taken = await db.scalar(
        select(Policeofficer.id).where(func.upper(Policeofficer.badge_number) == payload.badge_number.upper())
    )
    if badge_taken is not None:
        raise AppException(f"Badge number {payload.badge_number} is already assigned.")

    user = await _stage_user(db, payload, POLICE_OFFICER)
    officer = Policeofficer(
        user_id=user.id,
        station_id=payload.station_id,
        cnic=payload.cnic,
        contact_no=payload.contact_no,
        badge_number=payload.badge_number,
        rank=payload.rank,
        is_investigation_officer=payload.is_investigation_officer,
        posting_date=to_naive_utc(payload.posting_date) or utcnow(),
    )
    db.add(officer)
    await db.commit()
    officer = await reload(db, officer)
    logger.info("Officer %s created for station %s", officer.badge_number, payload.station_id)
    await _notify_account_created(officer.user, POLICE_OFFICER)
    return officer


async def login(db: AsyncSession, payload: LoginRequest) -> dict:
    user = await db.scalar(select(User).where(func.lower(User.username) == payload.username.strip().lower()))
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login for %s", payload.username)
        raise AppException("Invalid username or password.")
    if not user.is_active:
        raise AppException("User account is deactivated.")

    user.last_login_at = utcnow()
    await db.commit()
    token, expires_at = create_access_token(user.id, user.username, user.email, user.role.name)
    return {
        "token": token,
        "token_type": "Bearer",
        "expires_at": expires_at,
        "user": user_to_dict(user),
    }


async def change_password(db: AsyncSession, user: User, payload: ChangePasswordRequest) -> None:
    if not verify_password(payload.current_password, user.password_hash):
        raise AppException("Current password is incorrect.")
    if payload.current_password == payload.new_password:
        raise AppException("New password must be different from the current password.")
    user.password_hash = hash_password(payload.new_password)
    user.password_changed_at = utcnow()
    await db.commit()
    logger.info("Password changed for %s", user.username)


async def get_profile(db: AsyncSession, user: User) -> dict:
    data = user_to_dict(user)
    data["officer"] = None
    data["judge"] = None
    if user.role.name == POLICE_OFFICER:
        officer = await db.scalar(select(Policeofficer).where(Policeofficer.user_id == user.id))
        data["officer"] = officer_to_dict(officer) if officer else None
    elif user.role.name == JUDGE:
        judge = await db.scalar(select(Judge).where(Judge.user_id == user.id))
        data["judge"] = judge_to_dict(judge) if judge else None
    return data


async def request_password_reset(db: AsyncSession, email: str) -> None:
    user = await _find_by_email(db, email)
    if user is None or not user.is_active:
        logger.info("Password reset requested for unknown or inactive email")
        return

    otp = generate_otp()
    user.reset_otp = otp
    user.reset_otp_expires_at = utcnow() + timedelta(minutes=settings.otp_expiry_minutes)
    await db.commit()
    try:
        await send_password_reset_otp(user.email, user.full_name, otp)
    except (smtplib.SMTPException, OSError):
        logger.exception("Password reset email to %s failed", user.email)
        raise AppException("Unable to send the reset code right now. Please try again later.", status_code=503)
    logger.info("Password reset code issued for %s", user.username)


async def _user_with_valid_otp(db: AsyncSession, email: str, otp: str) -> User:
    user = await _find_by_email(db, email)
    if user is None or not user.reset_otp or not hmac.compare_digest(user.reset_otp, otp):
        raise AppException("Invalid OTP.")
    if user.reset_otp_expires_at is None or user.reset_otp_expires_at < utcnow():
        raise AppException("OTP has expired. Please request a new one.")
    return user


async def verify_reset_otp(db: AsyncSession, payload: VerifyResetOtpRequest) -> None:
    await _user_with_valid_otp(db, payload.email, payload.otp)


async def reset_password(db: AsyncSession, payload: ResetPasswordRequest) -> None:
    user = await _user_with_valid_otp(db, payload.email, payload.otp)
    user.password_hash = hash_password(payload.new_password)
    user.password_changed_at = utcnow()
    user.reset_otp = None
    user.reset_otp_expires_at = None
    await db.commit()
    logger.info("Password reset completed for %s", user.username)
