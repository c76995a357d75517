from pydantic import Field

from training_admin.schemas.common import AuditFields, InputModel
from training_admin.schemas.module import PermissionRef


class RoleCreate(InputModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    is_active: bool = True
    permission_ids: list[int] = Field(default_factory=list)


class RoleUpdate(InputModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    is_active: bool | None = None


class RolePermissionsRequest(InputModel):
    """Replaces the role's permission set."""

    permission_ids: list[int] = Field(default_factory=list)


class RoleResponse(AuditFields):
    id: int
    name: str
    description: str | None


class RoleDetail(RoleResponse):
    permissions: list[PermissionRef] = []
