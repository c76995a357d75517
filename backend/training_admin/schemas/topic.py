"""Pydantic schemas for topics."""

from pydantic import Field

from training_admin.schemas.common import (
    MAX_BATCH_SIZE,
    AuditFields,
    InputModel,
    NamedRef,
    OrderedRef,
)


class TopicCreate(InputModel):
    module_id: int
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    display_order: int | None = Field(None, ge=0)
    is_active: bool = True


class TopicUpdate(InputModel):
    module_id: int | None = None
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    display_order: int | None = Field(None, ge=0)
    is_active: bool | None = None


class TopicBulkItem(InputModel):
    id: int
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    display_order: int | None = Field(None, ge=0)
    is_active: bool | None = None


class TopicBulkRequest(InputModel):
    items: list[TopicBulkItem] = Field(default_factory=list, max_length=MAX_BATCH_SIZE)


class TopicCopyRequest(InputModel):
    target_module_id: int
    name: str | None = Field(None, min_length=1, max_length=200)


class TopicResponse(AuditFields):
    id: int
    module_id: int
    name: str
    description: str | None
    display_order: int


class QuestionRef(OrderedRef):
    name: str = Field(validation_alias="question")


class TopicDetail(TopicResponse):
    module: NamedRef | None = None
    sub_topics: list[OrderedRef] = []
    questions: list[QuestionRef] = []
