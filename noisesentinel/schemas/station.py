from pydantic import BaseModel, Field

from noisesentinel.schemas.accused import CONTACT_PATTERN


class StationCreate(BaseModel):
    station_name: str = Field(min_length=3, max_length=255)
    station_code: str = Field(min_length=2, max_length=50, pattern=r"^[A-Za-z0-9-]+$")
    location: str | None = Field(default=None, max_length=255)
    district: str | None = Field(default=None, max_length=100)
    province: str = Field(min_length=1, max_length=100)
    contact: str | None = Field(default=None, min_length=10, max_length=20, pattern=CONTACT_PATTERN)


class StationUpdate(BaseModel):
    station_name: str | None = Field(default=None, min_length=3, max_length=255)
    station_code: str | None = Field(default=None, min_length=2, max_length=50, pattern=r"^[A-Za-z0-9-]+$")
    location: str | None = Field(default=None, max_length=255)
    district: str | None = Field(default=None, max_length=100)
    province: str | None = Field(default=None, min_length=1, max_length=100)
    contact: str | None = Field(default=None, min_length=10, max_length=20, pattern=CONTACT_PATTERN)
