from datetime import datetime

from pydantic import BaseModel, Field


class DeviceRegister(BaseModel):
    device_name: str = Field(min_length=3, max_length=100)
    firmware_version: str | None = Field(default=None, max_length=50)
    calibration_date: datetime | None = None
    calibration_status: str = Field(default="Calibrated", max_length=50)
    calibration_certificate_no: str | None = Field(default=None, max_length=100)
    is_active: bool = True


class DeviceUpdate(BaseModel):
    device_name: str | None = Field(default=None, min_length=3, max_length=100)
    firmware_version: str | None = Field(default=None, max_length=50)
    calibration_date: datetime | None = None
    calibration_status: str | None = Field(default=None, max_length=50)
    calibration_certificate_no: str | None = Field(default=None, max_length=100)
    is_active: bool | None = None


class DevicePair(BaseModel):
    device_id: int
