from fastapi import APIRouter

from training_admin.api.deps import CurrentUser, DbSession, Page
from training_admin.api.responses import paged
from training_admin.api.v1.catalog import add_collection_routes, add_item_routes, not_found
from training_admin.schemas.sub_topic import (
    SubTopicCreate,
    SubTopicDetail,
    SubTopicUpdate,
)
from training_admin.services.questions import question_service
from training_admin.services.sub_topics import sub_topic_service

router = APIRouter(prefix="/sub-topics", tags=["sub-topics"])


def sub_topic_filters(topic_id: int | None = None, is_active: bool | None = None) -> dict:
    return {"topic_id": topic_id, "is_active": is_active}


add_collection_routes(
    router,
    sub_topic_service,
    plural="Sub-topics",
    create_schema=SubTopicCreate,
    filters=sub_topic_filters,
)
add_item_routes(router, sub_topic_service, update_schema=SubTopicUpdate, detail_schema=SubTopicDetail)


@router.get("/{item_id}/questions", summary="Questions of a sub-topic")
async def sub_topic_questions(
    session: DbSession,
    user: CurrentUser,
    page: Page,
    item_id: int,
    is_active: bool | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> dict:
    if await session.get(sub_topic_service.model, item_id) is None:
        raise not_found(sub_topic_service, item_id)
    result = await question_service.list_page(
        session,
        page,
        filters={"sub_topic_id": item_id, "is_active": is_active},
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return paged(result, "Questions retrieved successfully")
