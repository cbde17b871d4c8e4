from pydantic import BaseModel, Field


class FirCreate(BaseModel):
    challan_id: int
    station_id: int | None = None
    fir_description: str | None = Field(default=None, max_length=2000)


class FirUpdate(BaseModel):
    fir_status: str | None = Field(default=None, min_length=3, max_length=50)
    investigation_report: str | None = Field(default=None, max_length=5000)
