from pydantic import Field

from training_admin.schemas.common import AuditFields, InputModel, NamedRef


class StateCreate(InputModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: str | None = Field(None, max_length=20)
    description: str | None = None
    is_active: bool = True


class StateUpdate(InputModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    code: str | None = Field(None, max_length=20)
    description: str | None = None
    is_active: bool | None = None


class StateResponse(AuditFields):
    id: int
    name: str
    code: str | None
    description: str | None


class StateDetail(StateResponse):
    ranges: list[NamedRef] = []
