"""Building blocks reused by the entity schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt

# Upper bound on rows touched by one reorder or bulk request.
MAX_BATCH_SIZE = 500


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class InputModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


class AuditFields(ORMModel):
    is_active: bool
    created_by: int | None = None
    updated_by: int | None = None
    created_at: datetime
    updated_at: datetime


class NamedRef(ORMModel):
    """Minimal reference to a related row."""

    id: int
    name: str
    is_active: bool


class OrderedRef(NamedRef):
    description: str | None = None
    display_order: int


class ReorderEntry(InputModel):
    id: int
    display_order: StrictInt


class ReorderRequest(InputModel):
    items: list[ReorderEntry] = Field(default_factory=list, max_length=MAX_BATCH_SIZE)
