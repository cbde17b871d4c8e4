from pydantic import BaseModel, Field

from noisesentinel.schemas.accused import AccusedInput
from noisesentinel.schemas.vehicle import VehicleInput


class ChallanCreate(BaseModel):
    violation_id: int
    emission_report_id: int | None = None
    vehicle_id: int | None = None
    vehicle_input: VehicleInput | None = None
    accused_id: int | None = None
    accused_input: AccusedInput | None = None
    evidence_image: str | None = None
    bank_details: str | None = Field(default=None, max_length=255)
