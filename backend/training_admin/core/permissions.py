"""Permission codes checked by write endpoints. A role grants a code through its permissions."""

RESOURCES = (
    "modules",
    "topics",
    "sub_topics",
    "questions",
    "permissions",
    "roles",
    "states",
    "ranges",
    "districts",
    "users",
)


def manage_code(resource: str) -> str:
    return f"{resource}:manage"


MANAGE_PERMISSIONS = {resource: manage_code(resource) for resource in RESOURCES}
