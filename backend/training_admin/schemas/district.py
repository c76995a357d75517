from pydantic import Field

from training_admin.schemas.common import AuditFields, InputModel, NamedRef


class DistrictCreate(InputModel):
    range_id: int
    name: str = Field(..., min_length=1, max_length=150)
    head: str | None = Field(None, max_length=150)
    contact_no: str | None = Field(None, max_length=32)
    mobile_no: str | None = Field(None, max_length=32)
    email: str | None = Field(None, max_length=255)
    area: str | None = Field(None, max_length=150)
    description: str | None = None
    is_active: bool = True


class DistrictUpdate(InputModel):
    range_id: int | None = None
    name: str | None = Field(None, min_length=1, max_length=150)
    head: str | None = Field(None, max_length=150)
    contact_no: str | None = Field(None, max_length=32)
    mobile_no: str | None = Field(None, max_length=32)
    email: str | None = Field(None, max_length=255)
    area: str | None = Field(None, max_length=150)
    description: str | None = None
    is_active: bool | None = None


class DistrictResponse(AuditFields):
    id: int
    range_id: int
    name: str
    head: str | None
    contact_no: str | None
    mobile_no: str | None
    email: str | None
    area: str | None
    description: str | None


class DistrictDetail(DistrictResponse):
    range: NamedRef | None = None
