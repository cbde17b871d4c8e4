from datetime import datetime

from pydantic import BaseModel, Field


class CaseCreate(BaseModel):
    fir_id: int
    judge_id: int
    case_type: str | None = Field(default=None, max_length=100)
    hearing_date: datetime | None = None


class CaseUpdate(BaseModel):
    case_status: str | None = Field(default=None, min_length=3, max_length=50)
    hearing_date: datetime | None = None
    verdict: str | None = Field(default=None, max_length=5000)


class AssignJudge(BaseModel):
    judge_id: int


class CaseSearch(BaseModel):
    case_no: str | None = None
    fir_no: str | None = None
    vehicle_plate: str | None = None
    accused_cnic: str | None = None
    accused_name: str | None = None
    case_status: str | None = None
    case_type: str | None = None
    judge_id: int | None = None
    hearing_from: datetime | None = None
    hearing_to: datetime | None = None


class StatementCreate(BaseModel):
    case_id: int
    statement_text: str = Field(min_length=10, max_length=10000)
    statement_by: str | None = Field(default=None, max_length=255)


class StatementUpdate(BaseModel):
    statement_text: str | None = Field(default=None, min_length=10, max_length=10000)
    statement_by: str | None = Field(default=None, max_length=255)
