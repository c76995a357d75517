"""Topic routes: catalog operations plus hierarchy, copy and child listings."""

from typing import Annotated

from fastapi import APIRouter

from training_admin.api.deps import CurrentUser, DbSession, Page
from training_admin.api.responses import ok, paged
from training_admin.api.v1.catalog import add_collection_routes, add_item_routes, manager, not_found
from training_admin.models.user import User
from training_admin.schemas.topic import (
    TopicBulkRequest,
    TopicCopyRequest,
    TopicCreate,
    TopicDetail,
    TopicUpdate,
)
from training_admin.services.questions import question_service
from training_admin.services.sub_topics import sub_topic_service
from training_admin.services.topics import topic_service

router = APIRouter(prefix="/topics", tags=["topics"])


def topic_filters(module_id: int | None = None, is_active: bool | None = None) -> dict:
    return {"module_id": module_id, "is_active": is_active}


add_collection_routes(
    router,
    topic_service,
    plural="Topics",
    create_schema=TopicCreate,
    bulk_schema=TopicBulkRequest,
    filters=topic_filters,
)
add_item_routes(router, topic_service, update_schema=TopicUpdate, detail_schema=TopicDetail)


@router.get("/{item_id}/hierarchy", summary="Topic with sub-topics and questions")
async def topic_hierarchy(session: DbSession, user: CurrentUser, item_id: int) -> dict:
    data = await topic_service.hierarchy(session, item_id)
    if data is None:
        raise not_found(topic_service, item_id)
    return ok(data, "Topic hierarchy retrieved successfully")


@router.post("/{item_id}/copy", status_code=201, summary="Copy a topic into a module")
async def copy_topic(
    session: DbSession,
    user: Annotated[User, manager("topics")],
    item_id: int,
    body: TopicCopyRequest,
) -> dict:
    actor_id = user.id
    row = await topic_service.copy(
        session, item_id, body.target_module_id, actor_id, name=body.name
    )
    if row is None:
        raise not_found(topic_service, item_id)
    return ok(topic_service.to_item(row), "Topic copied successfully")


@router.get("/{item_id}/sub-topics", summary="Sub-topics of a topic")
async def topic_sub_topics(
    session: DbSession,
    user: CurrentUser,
    page: Page,
    item_id: int,
    is_active: bool | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> dict:
    if await session.get(topic_service.model, item_id) is None:
        raise not_found(topic_service, item_id)
    result = await sub_topic_service.list_page(
        session,
        page,
        filters={"topic_id": item_id, "is_active": is_active},
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return paged(result, "Sub-topics retrieved successfully")


@router.get("/{item_id}/questions", summary="Questions of a topic")
async def topic_questions(
    session: DbSession,
    user: CurrentUser,
    page: Page,
    item_id: int,
    sub_topic_id: int | None = None,
    is_active: bool | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> dict:
    if await session.get(topic_service.model, item_id) is None:
        raise not_found(topic_service, item_id)
    result = await question_service.list_page(
        session,
        page,
        filters={"topic_id": item_id, "sub_topic_id": sub_topic_id, "is_active": is_active},
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return paged(result, "Questions retrieved successfully")
