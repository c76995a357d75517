from sqlalchemy.orm import selectinload

from training_admin.models import District, Range, State, User
from training_admin.schemas.range import RangeResponse
from training_admin.services.catalog import CatalogService, ChildRelation
from training_admin.services.query.config import EntityQueryConfig

RANGE_QUERY = EntityQueryConfig(
    model=Range,
    sortable={
        "id": "id",
        "name": "name",
        "state_id": "state_id",
        "is_active": "is_active",
        "created_at": "created_at",
    },
    searchable=("name", "head", "email", "contact_no"),
    filterable={"state_id": "state_id", "is_active": "is_active"},
    default_sort=("name", "ASC"),
)


class RangeService(CatalogService):
    model = Range
    resource = "ranges"
    label = "Range"
    config = RANGE_QUERY
    read_schema = RangeResponse
    scope_field = "state_id"
    children = (
        ChildRelation("districts", District, District.range_id, "district_count"),
        ChildRelation(
            "users",
            User,
            User.range_id,
            "user_count",
            delete_message="Cannot delete range while users are assigned to it",
        ),
    )
    detail_options = (selectinload(Range.state), selectinload(Range.districts))
    dropdown_fields = ("id", "name", "state_id")
    clearable_fields = ("description", "head", "contact_no", "email")
    conflict_message = "Range with this name already exists in the state"

    async def prepare(self, session, values, current=None):
        await self._require(session, State, values.get("state_id"), "State")
        return values


range_service = RangeService()
