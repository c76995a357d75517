from fastapi import APIRouter

from training_admin.api.v1.catalog import add_collection_routes, add_item_routes
from training_admin.schemas.question import (
    QuestionCreate,
    QuestionDetail,
    QuestionUpdate,
)
from training_admin.services.questions import question_service

router = APIRouter(prefix="/questions", tags=["questions"])


def question_filters(
    topic_id: int | None = None,
    sub_topic_id: int | None = None,
    question_type: str | None = None,
    is_active: bool | None = None,
) -> dict:
    return {
        "topic_id": topic_id,
        "sub_topic_id": sub_topic_id,
        "question_type": question_type,
        "is_active": is_active,
    }


add_collection_routes(
    router,
    question_service,
    plural="Questions",
    create_schema=QuestionCreate,
    filters=question_filters,
)
add_item_routes(router, question_service, update_schema=QuestionUpdate, detail_schema=QuestionDetail)
