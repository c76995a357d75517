from pydantic import Field

from training_admin.schemas.common import AuditFields, InputModel, NamedRef
from training_admin.schemas.topic import QuestionRef


class SubTopicCreate(InputModel):
    topic_id: int
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    display_order: int | None = Field(None, ge=0)
    is_active: bool = True


class SubTopicUpdate(InputModel):
    topic_id: int | None = None
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    display_order: int | None = Field(None, ge=0)
    is_active: bool | None = None


class SubTopicResponse(AuditFields):
    id: int
    topic_id: int
    name: str
    description: str | None
    display_order: int


class SubTopicDetail(SubTopicResponse):
    topic: NamedRef | None = None
    questions: list[QuestionRef] = []
