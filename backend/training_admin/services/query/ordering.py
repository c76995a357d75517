from sqlalchemy.sql.elements import UnaryExpression

from training_admin.core.errors import QueryValidationError
from training_admin.services.query.config import EntityQueryConfig

SORT_DIRECTIONS = ("ASC", "DESC")


def resolve_order(
    config: EntityQueryConfig,
    sort_by: str | None = None,
    sort_order: str | None = None,
    *,
    default: tuple[str, str] | None = None,
) -> list[UnaryExpression]:
    """Validate sort input against the entity allow-list and build ORDER BY clauses.

    Unknown fields or directions raise ``QueryValidationError`` before any query is issued.
    A trailing ``id ASC`` keeps paging stable when the sort key has duplicates.
    """
    default_field, default_direction = default or config.default_sort
    if sort_by is None or not sort_by.strip():
        field = default_field
        direction = sort_order or default_direction
    else:
        field = sort_by.strip()
        direction = sort_order or "ASC"

    direction = direction.strip().upper()
    if direction not in SORT_DIRECTIONS:
        raise QueryValidationError(
            f"Invalid sort order '{direction}'. Use ASC or DESC",
            details={"allowed": list(SORT_DIRECTIONS)},
        )
    attr_name = config.sortable.get(field)
    if attr_name is None:
        raise QueryValidationError(
            f"Cannot sort by '{field}'",
            details={"allowed": sorted(config.sortable)},
        )

    column = config.attribute(attr_name)
    clauses = [column.asc() if direction == "ASC" else column.desc()]
    if attr_name != "id":
        clauses.append(config.model.id.asc())
    return clauses
