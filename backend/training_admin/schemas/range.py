from pydantic import Field

from training_admin.schemas.common import AuditFields, InputModel, NamedRef


class RangeCreate(InputModel):
    state_id: int
    name: str = Field(..., min_length=1, max_length=150)
    head: str | None = Field(None, max_length=150)
    contact_no: str | None = Field(None, max_length=32)
    email: str | None = Field(None, max_length=255)
    description: str | None = None
    is_active: bool = True


class RangeUpdate(InputModel):
    state_id: int | None = None
    name: str | None = Field(None, min_length=1, max_length=150)
    head: str | None = Field(None, max_length=150)
    contact_no: str | None = Field(None, max_length=32)
    email: str | None = Field(None, max_length=255)
    description: str | None = None
    is_active: bool | None = None


class RangeResponse(AuditFields):
    id: int
    state_id: int
    name: str
    head: str | None
    contact_no: str | None
    email: str | None
    description: str | None


class RangeDetail(RangeResponse):
    state: NamedRef | None = None
    districts: list[NamedRef] = []
