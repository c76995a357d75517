from fastapi import APIRouter

from training_admin.api.v1.catalog import add_collection_routes, add_item_routes
from training_admin.schemas.district import DistrictCreate, DistrictDetail, DistrictUpdate
from training_admin.services.districts import district_service

router = APIRouter(prefix="/districts", tags=["districts"])


def district_filters(range_id: int | None = None, is_active: bool | None = None) -> dict:
    return {"range_id": range_id, "is_active": is_active}


add_collection_routes(
    router,
    district_service,
    plural="Districts",
    create_schema=DistrictCreate,
    filters=district_filters,
)
add_item_routes(router, district_service, update_schema=DistrictUpdate, detail_schema=DistrictDetail)
