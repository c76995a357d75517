from pydantic import Field

from training_admin.schemas.common import AuditFields, InputModel, NamedRef


class PermissionCreate(InputModel):
    module_id: int | None = None
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9_.:-]+$")
    description: str | None = None
    is_active: bool = True


class PermissionUpdate(InputModel):
    module_id: int | None = None
    name: str | None = Field(None, min_length=1, max_length=100)
    code: str | None = Field(None, min_length=1, max_length=100, pattern=r"^[a-z0-9_.:-]+$")
    description: str | None = None
    is_active: bool | None = None


class PermissionResponse(AuditFields):
    id: int
    module_id: int | None
    name: str
    code: str
    description: str | None


class PermissionDetail(PermissionResponse):
    module: NamedRef | None = None
