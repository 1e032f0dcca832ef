"""Audit trail for mutating actions.

Writes are best-effort: each record goes into its own SAVEPOINT so a failed
insert is rolled back alone, logged, and never fails the request it describes.
"""

import functools
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import logger
from app.models.audit_log import AuditLog
from app.schemas import Pagination
from app.services.common import paginate


class AuditService:
    """Append-only audit log access."""

    async def record(
        self,
        db: AsyncSession,
        action: str,
        entity: str,
        entity_id: Optional[Any] = None,
        user_id: Optional[Any] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        try:
            async with db.begin_nested():
                db.add(
                    AuditLog(
                        action=action,
                        entity=entity or "Unknown",
                        entity_id=str(entity_id) if entity_id is not None else None,
                        user_id=user_id,
                        meta=metadata,
                    )
                )
        except SQLAlchemyError as e:
            logger.warning(f"Audit log write failed ({action} on {entity}): {e}")

    async def list_logs(
        self,
        db: AsyncSession,
        page: int = 1,
        limit: int = 50,
        action: Optional[str] = None,
        entity: Optional[str] = None,
        user_id: Optional[Any] = None,
    ) -> Tuple[List[AuditLog], Pagination]:
        query = select(AuditLog)
        if user_id:
            query = query.where(AuditLog.user_id == user_id)
        if action:
            query = query.where(AuditLog.action == action)
        if entity:
            query = query.where(AuditLog.entity == entity)
        query = query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        return await paginate(db, query, page, limit)


audit_service = AuditService()


def audited(
    action: str,
    entity: str,
    entity_id_param: Optional[str] = None,
    metadata: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = None,
):
    """Decorator recording an audit entry after a handler succeeds.

    The wrapped handler must take its session as ``db``; the actor is read
    from ``current_user`` when the handler has one. The entity id comes from
    the ``entity_id_param`` argument, or from the returned object's ``id``.
    """

    def decorator(handler):
        @functools.wraps(handler)
        async def wrapper(*args, **kwargs):
            result = await handler(*args, **kwargs)

            db = kwargs.get("db")
            if db is None:
                logger.warning(f"Audit skipped for {action}: handler has no db session")
                return result

            user = kwargs.get("current_user")
            if entity_id_param:
                entity_id = kwargs.get(entity_id_param)
            else:
                entity_id = getattr(result, "id", None)

            await audit_service.record(
                db,
                action=action,
                entity=entity,
                entity_id=entity_id,
                user_id=getattr(user, "id", None),
                metadata=metadata(kwargs) if metadata else None,
            )
            return result

        return wrapper

    return decorator
