"""Domain errors raised by the service layer and mapped to HTTP responses in ``main``.

Lookups of a missing id are not errors: services return ``None`` (or ``False`` for delete)
and the router answers 404.
"""


class AdminError(Exception):
    """Base class; ``message`` is safe to show to API clients."""

    status_code = 400

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class QueryValidationError(AdminError):
    """Malformed or disallowed input (unknown sort field, bad sort order, bad reference)."""


class ConflictError(AdminError):
    """A uniqueness constraint rejected the write."""


class DependencyError(AdminError):
    """Deletion refused because dependent rows still exist."""

    status_code = 409
