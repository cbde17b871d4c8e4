from pydantic import BaseModel, Field, field_validator

PLATE_PATTERN = r"^[A-Z0-9-]+$"


def _normalize_plate(value):
    if isinstance(value, str):
        return value.strip().upper()
    return value


class VehicleInput(BaseModel):
    plate_number: str = Field(min_length=3, max_length=50, pattern=PLATE_PATTERN)
    make: str = Field(min_length=1, max_length=100)
    color: str | None = Field(default=None, max_length=50)
    chassis_no: str | None = Field(default=None, max_length=100)
    engine_no: str | None = Field(default=None, max_length=100)
    reg_year: int | None = Field(default=None, ge=1900)

    @field_validator("plate_number", mode="before")
    @classmethod
    def normalize_plate(cls, value):
        return _normalize_plate(value)


class VehicleCreate(VehicleInput):
    owner_id: int | None = None


class VehicleUpdate(BaseModel):
    plate_number: str | None = Field(default=None, min_length=3, max_length=50, pattern=PLATE_PATTERN)
    make: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, max_length=50)
    chassis_no: str | None = Field(default=None, max_length=100)
    engine_no: str | None = Field(default=None, max_length=100)
    reg_year: int | None = Field(default=None, ge=1900)
    owner_id: int | None = None

    @field_validator("plate_number", mode="before")
    @classmethod
    def normalize_plate(cls, value):
        return _normalize_plate(value)
