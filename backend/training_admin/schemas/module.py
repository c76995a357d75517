"""Pydantic schemas for the module catalog."""

from pydantic import Field

from training_admin.schemas.common import (
    MAX_BATCH_SIZE,
    AuditFields,
    InputModel,
    NamedRef,
    OrderedRef,
)


class ModuleCreate(InputModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: str | None = None
    icon: str | None = Field(None, max_length=100)
    route: str | None = Field(None, max_length=200)
    display_order: int | None = Field(None, ge=0)
    is_active: bool = True


class ModuleUpdate(InputModel):
    name: str | None = Field(None, min_length=1, max_length=150)
    description: str | None = None
    icon: str | None = Field(None, max_length=100)
    route: str | None = Field(None, max_length=200)
    display_order: int | None = Field(None, ge=0)
    is_active: bool | None = None


class ModuleBulkItem(ModuleUpdate):
    id: int


class ModuleBulkRequest(InputModel):
    items: list[ModuleBulkItem] = Field(default_factory=list, max_length=MAX_BATCH_SIZE)


class ModuleResponse(AuditFields):
    id: int
    name: str
    description: str | None
    icon: str | None
    route: str | None
    display_order: int


class PermissionRef(NamedRef):
    code: str


class ModuleDetail(ModuleResponse):
    topics: list[OrderedRef] = []
    permissions: list[PermissionRef] = []
