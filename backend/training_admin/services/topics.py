"""Topics belong to a module; each may hold sub-topics and questions."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from training_admin.models import Module, Question, SubTopic, Topic
from training_admin.schemas.common import NamedRef, OrderedRef
from training_admin.schemas.topic import QuestionRef, TopicResponse
from training_admin.services.audit import log_action
from training_admin.services.catalog import CatalogService, ChildRelation
from training_admin.services.query.config import EntityQueryConfig

logger = logging.getLogger(__name__)

TOPIC_QUERY = EntityQueryConfig(
    model=Topic,
    sortable={
        "id": "id",
        "name": "name",
        "display_order": "display_order",
        "module_id": "module_id",
        "is_active": "is_active",
        "created_at": "created_at",
        "updated_at": "updated_at",
    },
    searchable=("name", "description"),
    filterable={"module_id": "module_id", "is_active": "is_active"},
    default_sort=("display_order", "ASC"),
)


def _dump(schema, row) -> dict[str, Any]:
    return schema.model_validate(row).model_dump(mode="json")


class TopicService(CatalogService):
    model = Topic
    resource = "topics"
    label = "Topic"
    config = TOPIC_QUERY
    read_schema = TopicResponse
    scope_field = "module_id"
    ordered = True
    children = (
        ChildRelation("sub_topics", SubTopic, SubTopic.topic_id, "sub_topic_count"),
        ChildRelation("questions", Question, Question.topic_id, "question_count"),
    )
    detail_options = (
        selectinload(Topic.module),
        selectinload(Topic.sub_topics),
        selectinload(Topic.questions),
    )
    dropdown_fields = ("id", "name", "module_id", "display_order")
    bulk_fields = ("name", "description", "display_order", "is_active")
    conflict_message = "Topic with this name already exists in the module"

    async def prepare(self, session, values, current=None):
        await self._require(session, Module, values.get("module_id"), "Module")
        return values

    async def hierarchy(self, session: AsyncSession, topic_id: int) -> dict[str, Any] | None:
        """Topic with its module, active sub-topics (each with their questions) and direct questions.

        Inactive rows are left out at every level.
        """
        result = await session.execute(
            select(Topic)
            .options(
                selectinload(Topic.module),
                selectinload(Topic.sub_topics).selectinload(SubTopic.questions),
                selectinload(Topic.questions),
            )
            .where(Topic.id == topic_id)
            .execution_options(populate_existing=True)
        )
        topic = result.scalar_one_or_none()
        if topic is None:
            return None
        data = self.to_item(topic)
        data["module"] = _dump(NamedRef, topic.module)
        data["sub_topics"] = [
            {
                **_dump(OrderedRef, st),
                "questions": [_dump(QuestionRef, q) for q in st.questions if q.is_active],
            }
            for st in topic.sub_topics
            if st.is_active
        ]
        data["questions"] = [
            _dump(QuestionRef, q) for q in topic.questions if q.sub_topic_id is None and q.is_active
        ]
        return data

    async def copy(
        self,
        session: AsyncSession,
        topic_id: int,
        target_module_id: int,
        actor_id: int | None,
        *,
        name: str | None = None,
    ) -> Topic | None:
        """Duplicate a topic with its sub-topics and questions into ``target_module_id``."""
        result = await session.execute(
            select(Topic)
            .options(selectinload(Topic.sub_topics), selectinload(Topic.questions))
            .where(Topic.id == topic_id)
        )
        source = result.scalar_one_or_none()
        if source is None:
            return None
        await self._require(session, Module, target_module_id, "Module")

        sub_topics = list(source.sub_topics)
        questions = list(source.questions)
        clone = Topic(
            module_id=target_module_id,
            name=name or f"{source.name} (Copy)",
            description=source.description,
            display_order=await self.next_display_order(session, target_module_id),
            is_active=source.is_active,
            created_by=actor_id,
            updated_by=actor_id,
        )
        session.add(clone)
        await self._flush(session)

        sub_topic_ids: dict[int, int] = {}
        for st in sub_topics:
            st_clone = SubTopic(
                topic_id=clone.id,
                name=st.name,
                description=st.description,
                display_order=st.display_order,
                is_active=st.is_active,
                created_by=actor_id,
                updated_by=actor_id,
            )
            session.add(st_clone)
            await self._flush(session)
            sub_topic_ids[st.id] = st_clone.id

        for q in questions:
            session.add(
                Question(
                    topic_id=clone.id,
                    sub_topic_id=sub_topic_ids.get(q.sub_topic_id) if q.sub_topic_id else None,
                    question=q.question,
                    question_type=q.question_type,
                    options=q.options,
                    answer=q.answer,
                    display_order=q.display_order,
                    is_active=q.is_active,
                    created_by=actor_id,
                    updated_by=actor_id,
                )
            )
        await self._flush(session)
        await log_action(
            session,
            actor_id,
            "copy",
            self.resource,
            clone.id,
            details={
                "source_id": topic_id,
                "sub_topics": len(sub_topics),
                "questions": len(questions),
            },
        )
        logger.info("Copied topic %s to module %s as %s", topic_id, target_module_id, clone.id)
        return await self.get(session, clone.id)


topic_service = TopicService()
