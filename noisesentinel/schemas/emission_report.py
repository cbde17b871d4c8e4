from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

# widest value a Numeric(10, 2) reading column holds unchanged
MAX_READING = Decimal("99999999.99")


class EmissionReportCreate(BaseModel):
    device_id: int
    co: Decimal | None = Field(default=None, ge=0, le=MAX_READING)
    co2: Decimal | None = Field(default=None, ge=0, le=MAX_READING)
    hc: Decimal | None = Field(default=None, ge=0, le=MAX_READING)
    nox: Decimal | None = Field(default=None, ge=0, le=MAX_READING)
    sound_level_dba: Decimal = Field(ge=0, le=200)
    test_datetime: datetime
    ml_classification: str | None = Field(default=None, max_length=100)
