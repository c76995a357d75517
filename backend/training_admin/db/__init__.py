from training_admin.db.session import (
    async_session_maker,
    get_db,
    get_session_factory,
    init_db,
    transaction_scope,
)
from training_admin.db.base import Base

__all__ = [
    "Base",
    "async_session_maker",
    "get_db",
    "get_session_factory",
    "init_db",
    "transaction_scope",
]
