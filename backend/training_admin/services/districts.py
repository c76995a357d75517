from sqlalchemy.orm import selectinload

from training_admin.models import District, Range
from training_admin.schemas.district import DistrictResponse
from training_admin.services.catalog import CatalogService
from training_admin.services.query.config import EntityQueryConfig

DISTRICT_QUERY = EntityQueryConfig(
    model=District,
    sortable={
        "id": "id",
        "name": "name",
        "range_id": "range_id",
        "is_active": "is_active",
        "created_at": "created_at",
    },
    searchable=("name", "head", "email", "area"),
    filterable={"range_id": "range_id", "is_active": "is_active"},
    default_sort=("name", "ASC"),
)


class DistrictService(CatalogService):
    model = District
    resource = "districts"
    label = "District"
    config = DISTRICT_QUERY
    read_schema = DistrictResponse
    scope_field = "range_id"
    detail_options = (selectinload(District.range),)
    dropdown_fields = ("id", "name", "range_id")
    clearable_fields = ("description", "head", "contact_no", "mobile_no", "email", "area")
    conflict_message = "District with this name already exists in the range"

    async def prepare(self, session, values, current=None):
        await self._require(session, Range, values.get("range_id"), "Range")
        return values


district_service = DistrictService()
