"""Audit log read access."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.dependencies import get_current_user, require_admin
from app.models.user import User
from app.schemas import AuditLogListResponse
from app.services.audit_service import audit_service

router = APIRouter()


@router.get("", response_model=AuditLogListResponse)
async def list_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    action: Optional[str] = Query(None),
    entity: Optional[str] = Query(None),
    user_id: Optional[UUID] = Query(None, alias="userId"),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Audit entries, newest first (admin+ only)."""
    logs, pagination = await audit_service.list_logs(
        db, page=page, limit=limit, action=action, entity=entity, user_id=user_id
    )
    return {"logs": logs, "pagination": pagination}


@router.get("/current", response_model=AuditLogListResponse)
async def list_my_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Audit entries recorded for the signed-in user."""
    logs, pagination = await audit_service.list_logs(
        db, page=page, limit=limit, user_id=current_user.id
    )
    return {"logs": logs, "pagination": pagination}
