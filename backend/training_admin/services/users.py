"""Admin user accounts: hashed passwords, role and org placement."""

from sqlalchemy.orm import selectinload

from training_admin.core.auth import hash_password
from training_admin.core.errors import QueryValidationError
from training_admin.models import Range, Role, State, User
from training_admin.schemas.user import UserResponse
from training_admin.services.catalog import CatalogService
from training_admin.services.query.config import EntityQueryConfig

USER_QUERY = EntityQueryConfig(
    model=User,
    sortable={
        "id": "id",
        "email": "email",
        "first_name": "first_name",
        "last_name": "last_name",
        "is_active": "is_active",
        "created_at": "created_at",
        "updated_at": "updated_at",
    },
    searchable=("email", "first_name", "last_name", "mobile_no"),
    filterable={
        "role_id": "role_id",
        "state_id": "state_id",
        "range_id": "range_id",
        "is_active": "is_active",
    },
    default_sort=("created_at", "DESC"),
    search_sort=("email", "ASC"),
)


class UserService(CatalogService):
    model = User
    resource = "users"
    label = "User"
    config = USER_QUERY
    read_schema = UserResponse
    name_field = "email"
    detail_options = (selectinload(User.role), selectinload(User.state), selectinload(User.range))
    dropdown_fields = ("id", "email", "first_name", "last_name")
    clearable_fields = ("first_name", "last_name", "mobile_no", "role_id", "state_id", "range_id")
    conflict_message = "User with this email already exists"

    async def prepare(self, session, values, current=None):
        if values.get("email"):
            values["email"] = values["email"].strip().lower()
        password = values.pop("password", None)
        if password:
            values["password_hash"] = hash_password(password)

        await self._require(session, Role, values.get("role_id"), "Role")
        await self._require(session, State, values.get("state_id"), "State")
        state_id = values.get("state_id", current.state_id if current is not None else None)
        range_id = values.get("range_id", current.range_id if current is not None else None)
        range_row = await self._require(session, Range, range_id, "Range")
        if range_row is not None and state_id is not None and range_row.state_id != state_id:
            raise QueryValidationError(f"Range {range_id} does not belong to state {state_id}")
        return values

    async def name_exists(self, session, name, *, scope_id=None, exclude_id=None):
        return await super().name_exists(
            session, name.strip().lower(), scope_id=scope_id, exclude_id=exclude_id
        )

    async def delete(self, session, entity_id, actor_id):
        if entity_id == actor_id:
            raise QueryValidationError("You cannot delete your own account")
        return await super().delete(session, entity_id, actor_id)


user_service = UserService()
