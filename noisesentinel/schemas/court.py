from pydantic import BaseModel, Field


class CourtTypeResponse(BaseModel):
    id: int
    court_type_name: str

    model_config = {"from_attributes": True}


class CourtCreate(BaseModel):
    court_name: str = Field(min_length=3, max_length=255)
    court_type_id: int
    location: str | None = Field(default=None, max_length=255)
    district: str | None = Field(default=None, max_length=100)
    province: str = Field(min_length=1, max_length=100)


class CourtUpdate(BaseModel):
    court_name: str | None = Field(default=None, min_length=3, max_length=255)
    court_type_id: int | None = None
    location: str | None = Field(default=None, max_length=255)
    district: str | None = Field(default=None, max_length=100)
    province: str | None = Field(default=None, min_length=1, max_length=100)
