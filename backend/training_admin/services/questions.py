from sqlalchemy.orm import selectinload

from training_admin.core.errors import QueryValidationError
from training_admin.models import Question, SubTopic, Topic
from training_admin.schemas.question import QuestionResponse
from training_admin.services.catalog import CatalogService
from training_admin.services.query.config import EntityQueryConfig

QUESTION_QUERY = EntityQueryConfig(
    model=Question,
    sortable={
        "id": "id",
        "display_order": "display_order",
        "question_type": "question_type",
        "topic_id": "topic_id",
        "sub_topic_id": "sub_topic_id",
        "is_active": "is_active",
        "created_at": "created_at",
        "updated_at": "updated_at",
    },
    searchable=("question", "answer"),
    filterable={
        "topic_id": "topic_id",
        "sub_topic_id": "sub_topic_id",
        "question_type": "question_type",
        "is_active": "is_active",
    },
    default_sort=("display_order", "ASC"),
    search_sort=("display_order", "ASC"),
)


class QuestionService(CatalogService):
    model = Question
    resource = "questions"
    label = "Question"
    config = QUESTION_QUERY
    read_schema = QuestionResponse
    name_field = None
    scope_field = "topic_id"
    ordered = True
    detail_options = (selectinload(Question.topic), selectinload(Question.sub_topic))
    dropdown_fields = ("id", "question", "topic_id", "sub_topic_id", "display_order")
    clearable_fields = ("sub_topic_id", "options", "answer")
    conflict_message = "Question could not be saved"

    async def prepare(self, session, values, current=None):
        await self._require(session, Topic, values.get("topic_id"), "Topic")
        topic_id = values.get("topic_id", current.topic_id if current is not None else None)
        sub_topic_id = values.get("sub_topic_id", current.sub_topic_id if current is not None else None)
        sub_topic = await self._require(session, SubTopic, sub_topic_id, "Sub-topic")
        if sub_topic is not None and sub_topic.topic_id != topic_id:
            raise QueryValidationError(
                f"Sub-topic {sub_topic_id} does not belong to topic {topic_id}"
            )
        return values


question_service = QuestionService()
