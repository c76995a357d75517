"""Audit trail for catalog writes. Rows are flushed with the caller's transaction."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from training_admin.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


async def log_action(
    session: AsyncSession,
    user_id: int | None,
    action: str,
    resource: str,
    resource_id: Any = None,
    details: dict | None = None,
) -> None:
    session.add(
        AuditLog(
            user_id=user_id,
            action=action,
            resource=resource,
            resource_id=str(resource_id) if resource_id is not None else None,
            details=details,
        )
    )
    await session.flush()
    logger.info("audit: user=%s %s %s id=%s", user_id, action, resource, resource_id)
