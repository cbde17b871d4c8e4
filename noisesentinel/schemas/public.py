from pydantic import BaseModel, EmailStr, Field

from noisesentinel.schemas.accused import CNIC_PATTERN


class StatusOtpRequest(BaseModel):
    vehicle_no: str = Field(min_length=3, max_length=50)
    cnic: str = Field(pattern=CNIC_PATTERN)
    email: EmailStr


class VerifyStatusOtpRequest(StatusOtpRequest):
    otp: str = Field(pattern=r"^\d{6}$")


class ChallanSearchRequest(BaseModel):
    vehicle_no: str = Field(min_length=3, max_length=50)
    cnic: str = Field(pattern=CNIC_PATTERN)
