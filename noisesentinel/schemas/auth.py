from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from noisesentinel.schemas.accused import CNIC_PATTERN, CONTACT_PATTERN
from noisesentinel.utils.security import PASSWORD_RULE, is_strong_password


def _check_password(value: str) -> str:
    if not is_strong_password(value):
        raise ValueError(PASSWORD_RULE)
    return value


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterUserRequest(BaseModel):
    username: str = Field(min_length=3, max_length=100, pattern=r"^[A-Za-z0-9_.]+$")
    email: EmailStr
    full_name: str = Field(min_length=3, max_length=255)
    password: str

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _check_password(value)


class CreateJudgeRequest(RegisterUserRequest):
    court_id: int
    cnic: str = Field(pattern=CNIC_PATTERN)
    contact_no: str | None = Field(default=None, min_length=10, max_length=20, pattern=CONTACT_PATTERN)
    rank: str | None = Field(default=None, max_length=50)
    service_status: str = "Active"


class CreateOfficerRequest(RegisterUserRequest):
    station_id: int
    cnic: str = Field(pattern=CNIC_PATTERN)
    contact_no: str | None = Field(default=None, min_length=10, max_length=20, pattern=CONTACT_PATTERN)
    badge_number: str = Field(min_length=3, max_length=50)
    rank: str | None = Field(default=None, max_length=50)
    is_investigation_officer: bool = False
    posting_date: datetime | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, value: str) -> str:
        return _check_password(value)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class VerifyResetOtpRequest(BaseModel):
    email: EmailStr
    otp: str = Field(pattern=r"^\d{6}$")


class ResetPasswordRequest(VerifyResetOtpRequest):
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, value: str) -> str:
        return _check_password(value)


class UserUpdate(BaseModel):
    full_name: str | None = Field(default=None, min_length=3, max_length=255)
    email: EmailStr | None = None


class JudgeUpdate(UserUpdate):
    cnic: str | None = Field(default=None, pattern=CNIC_PATTERN)
    contact_no: str | None = Field(default=None, min_length=10, max_length=20, pattern=CONTACT_PATTERN)
    rank: str | None = Field(default=None, max_length=50)


class OfficerUpdate(JudgeUpdate):
    badge_number: str | None = Field(default=None, min_length=3, max_length=50)
    is_investigation_officer: bool | None = None
