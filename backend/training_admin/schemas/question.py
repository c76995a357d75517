"""Pydantic schemas for questions attached to a topic (optionally to one of its sub-topics)."""

from typing import Any

from pydantic import Field

from training_admin.schemas.common import AuditFields, InputModel, NamedRef


class QuestionCreate(InputModel):
    topic_id: int
    sub_topic_id: int | None = None
    question: str = Field(..., min_length=1)
    question_type: str = Field("single_choice", max_length=32)
    options: list[Any] | dict[str, Any] | None = None
    answer: str | None = None
    display_order: int | None = Field(None, ge=0)
    is_active: bool = True


class QuestionUpdate(InputModel):
    topic_id: int | None = None
    sub_topic_id: int | None = None
    question: str | None = Field(None, min_length=1)
    question_type: str | None = Field(None, max_length=32)
    options: list[Any] | dict[str, Any] | None = None
    answer: str | None = None
    display_order: int | None = Field(None, ge=0)
    is_active: bool | None = None


class QuestionResponse(AuditFields):
    id: int
    topic_id: int
    sub_topic_id: int | None
    question: str
    question_type: str
    options: list[Any] | dict[str, Any] | None
    answer: str | None
    display_order: int


class QuestionDetail(QuestionResponse):
    topic: NamedRef | None = None
    sub_topic: NamedRef | None = None
