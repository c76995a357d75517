from sqlalchemy.orm import selectinload

from training_admin.models import Range, State, User
from training_admin.schemas.state import StateResponse
from training_admin.services.catalog import CatalogService, ChildRelation
from training_admin.services.query.config import EntityQueryConfig

STATE_QUERY = EntityQueryConfig(
    model=State,
    sortable={
        "id": "id",
        "name": "name",
        "code": "code",
        "is_active": "is_active",
        "created_at": "created_at",
    },
    searchable=("name", "code", "description"),
    filterable={"is_active": "is_active"},
    default_sort=("name", "ASC"),
)


class StateService(CatalogService):
    model = State
    resource = "states"
    label = "State"
    config = STATE_QUERY
    read_schema = StateResponse
    children = (
        ChildRelation(
            "ranges",
            Range,
            Range.state_id,
            "range_count",
            delete_message="Cannot delete state with existing ranges",
        ),
        ChildRelation(
            "users",
            User,
            User.state_id,
            "user_count",
            delete_message="Cannot delete state while users are assigned to it",
        ),
    )
    detail_options = (selectinload(State.ranges),)
    dropdown_fields = ("id", "name", "code")
    clearable_fields = ("description", "code")
    conflict_message = "State with this name or code already exists"

    async def prepare(self, session, values, current=None):
        if values.get("code"):
            values["code"] = values["code"].upper()
        return values


state_service = StateService()
