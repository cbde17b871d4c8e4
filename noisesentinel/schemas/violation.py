from decimal import Decimal

from pydantic import BaseModel, Field


class ViolationCreate(BaseModel):
    violation_type: str = Field(min_length=3, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    penalty_amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    section_of_law: str | None = Field(default=None, max_length=255)
    is_cognizable: bool = False


class ViolationUpdate(BaseModel):
    violation_type: str | None = Field(default=None, min_length=3, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    penalty_amount: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    section_of_law: str | None = Field(default=None, max_length=255)
    is_cognizable: bool | None = None
