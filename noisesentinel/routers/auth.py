from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.dependencies import admin_only, any_user, court_authority_only, station_authority_only
from noisesentinel.models.user import ADMIN, COURT_AUTHORITY, STATION_AUTHORITY, User
from noisesentinel.schemas.auth import (
    ChangePasswordRequest,
    CreateJudgeRequest,
    CreateOfficerRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterUserRequest,
    ResetPasswordRequest,
    VerifyResetOtpRequest,
)
from noisesentinel.services import auth as auth_service
from noisesentinel.services.serializers import judge_to_dict, officer_to_dict, user_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register-admin", status_code=201)
async def register_admin(payload: RegisterUserRequest, db: AsyncSession = Depends(get_db)):
    user = await auth_service.register_admin(db, payload)
    return success_response(data=user_to_dict(user), message="Administrator registered successfully.")


@router.post("/login")
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    data = await auth_service.login(db, payload)
    return success_response(data=data, message="Login successful.")


@router.post("/create/admin", status_code=201)
async def create_admin(
    payload: RegisterUserRequest,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(admin_only),
):
    user = await auth_service.create_user(db, payload, ADMIN)
    return success_response(data=user_to_dict(user), message="Admin account created successfully.")


@router.post("/create/court-authority", status_code=201)
async def create_court_authority(
    payload: RegisterUserRequest,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(admin_only),
):
    user = await auth_service.create_user(db, payload, COURT_AUTHORITY)
    return success_response(data=user_to_dict(user), message="Court Authority account created successfully.")


@router.post("/create/station-authority", status_code=201)
async def create_station_authority(
    payload: RegisterUserRequest,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(admin_only),
):
    user = await auth_service.create_user(db, payload, STATION_AUTHORITY)
    return success_response(data=user_to_dict(user), message="Station Authority account created successfully.")


@router.post("/create/judge", status_code=201)
async def create_judge(
    payload: CreateJudgeRequest,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(court_authority_only),
):
    judge = await auth_service.create_judge(db, payload)
    return success_response(data=judge_to_dict(judge), message="Judge account created successfully.")


@router.post("/create/police-officer", status_code=201)
async def create_police_officer(
    payload: CreateOfficerRequest,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(station_authority_only),
):
    officer = await auth_service.create_officer(db, payload)
    return success_response(data=officer_to_dict(officer), message="Police officer account created successfully.")


@router.get("/me")
async def me(db: AsyncSession = Depends(get_db), user: User = Depends(any_user)):
    return success_response(data=await auth_service.get_profile(db, user))


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(any_user),
):
    await auth_service.change_password(db, user, payload)
    return success_response(message="Password changed successfully.")


@router.post("/forgot-password")
async def forgot_password(payload: ForgotPasswordRequest, db: AsyncSession = Depends(get_db)):
    await auth_service.request_password_reset(db, payload.email)
    return success_response(message="If the email is registered, a reset code has been sent.")


@router.post("/verify-reset-otp")
async def verify_reset_otp(payload: VerifyResetOtpRequest, db: AsyncSession = Depends(get_db)):
    await auth_service.verify_reset_otp(db, payload)
    return success_response(message="OTP verified. You can now reset your password.")


@router.post("/reset-password")
async def reset_password(payload: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    await auth_service.reset_password(db, payload)
    return success_response(message="Password reset successfully. You can now log in.")
