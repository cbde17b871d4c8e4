from pydantic import BaseModel, EmailStr, Field

CNIC_PATTERN = r"^[0-9]{5}-[0-9]{7}-[0-9]$"
CONTACT_PATTERN = r"^[\d\s\-\+\(\)]+$"


class AccusedInput(BaseModel):
    full_name: str = Field(min_length=3, max_length=255)
    cnic: str = Field(pattern=CNIC_PATTERN)
    city: str = Field(min_length=1, max_length=100)
    province: str = Field(min_length=1, max_length=100)
    address: str = Field(min_length=1, max_length=500)
    contact: str = Field(min_length=10, max_length=20, pattern=CONTACT_PATTERN)
    email: EmailStr | None = None


class AccusedUpdate(BaseModel):
    full_name: str | None = Field(default=None, min_length=3, max_length=255)
    city: str | None = Field(default=None, min_length=1, max_length=100)
    province: str | None = Field(default=None, min_length=1, max_length=100)
    address: str | None = Field(default=None, min_length=1, max_length=500)
    contact: str | None = Field(default=None, min_length=10, max_length=20, pattern=CONTACT_PATTERN)
    email: EmailStr | None = None
