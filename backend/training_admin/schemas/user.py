"""Pydantic schemas for admin users. Password hashes never leave the service layer."""

from pydantic import Field

from training_admin.schemas.common import AuditFields, InputModel, NamedRef

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(InputModel):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    mobile_no: str | None = Field(None, max_length=32)
    role_id: int | None = None
    state_id: int | None = None
    range_id: int | None = None
    is_active: bool = True


class UserUpdate(InputModel):
    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    password: str | None = Field(None, min_length=8, max_length=128)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    mobile_no: str | None = Field(None, max_length=32)
    role_id: int | None = None
    state_id: int | None = None
    range_id: int | None = None
    is_active: bool | None = None


class UserResponse(AuditFields):
    id: int
    email: str
    first_name: str | None
    last_name: str | None
    mobile_no: str | None
    role_id: int | None
    state_id: int | None
    range_id: int | None


class UserDetail(UserResponse):
    role: NamedRef | None = None
    state: NamedRef | None = None
    range: NamedRef | None = None
