from sqlalchemy.orm import selectinload

from training_admin.models import Question, SubTopic, Topic
from training_admin.schemas.sub_topic import SubTopicResponse
from training_admin.services.catalog import CatalogService, ChildRelation
from training_admin.services.query.config import EntityQueryConfig

SUB_TOPIC_QUERY = EntityQueryConfig(
    model=SubTopic,
    sortable={
        "id": "id",
        "name": "name",
        "display_order": "display_order",
        "topic_id": "topic_id",
        "is_active": "is_active",
        "created_at": "created_at",
        "updated_at": "updated_at",
    },
    searchable=("name", "description"),
    filterable={"topic_id": "topic_id", "is_active": "is_active"},
    default_sort=("display_order", "ASC"),
)


class SubTopicService(CatalogService):
    model = SubTopic
    resource = "sub_topics"
    label = "Sub-topic"
    config = SUB_TOPIC_QUERY
    read_schema = SubTopicResponse
    scope_field = "topic_id"
    ordered = True
    children = (
        ChildRelation(
            "questions",
            Question,
            Question.sub_topic_id,
            "question_count",
            delete_message="Cannot delete sub-topic with existing questions",
        ),
    )
    detail_options = (selectinload(SubTopic.topic), selectinload(SubTopic.questions))
    dropdown_fields = ("id", "name", "topic_id", "display_order")
    conflict_message = "Sub-topic with this name already exists in the topic"

    async def prepare(self, session, values, current=None):
        await self._require(session, Topic, values.get("topic_id"), "Topic")
        return values


sub_topic_service = SubTopicService()
