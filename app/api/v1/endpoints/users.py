"""User management endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging import logger
from app.dependencies import get_current_user, require_admin, require_super_admin
from app.models.user import User
from app.schemas import (
    MessageResponse,
    MoveToCollege,
    RoleUpdate,
    SuperAdminListResponse,
    UserDetail,
    UserResponse,
    UserUpdate,
)
from app.services.audit_service import audited
from app.services.user_service import user_service

router = APIRouter()


@router.get("/me", response_model=UserDetail)
async def get_me(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the signed-in user's profile."""
    return await user_service.get_detail(db, current_user.id)


@router.get("", response_model=List[UserDetail])
async def list_users(
    user_type: Optional[str] = Query(None, alias="userType"),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List users, optionally by role (admin+ only)."""
    return await user_service.list_users(db, user_type)


@router.get("/superadmins", response_model=SuperAdminListResponse)
async def list_super_admins(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    super_admins = await user_service.list_users(db, "SUPERADMIN")
    return {"super_admins": super_admins, "count": len(super_admins)}


@router.get("/clerk/{clerk_id}", response_model=UserDetail)
async def get_user_by_clerk_id(
    clerk_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Look a user up by identity-provider id."""
    return await user_service.get_detail_by_clerk_id(db, clerk_id)


@router.patch("/{user_id}/toggle-role", response_model=UserResponse)
@audited("CHANGE_USER_ROLE", "User", entity_id_param="user_id",
         metadata=lambda kw: {"role": kw["data"].role})
async def toggle_user_role(
    user_id: UUID,
    data: RoleUpdate,
    current_user: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db),
):
    """Set a user's role (superadmin only)."""
    user = await user_service.set_role(db, user_id, data.role)
    logger.info(f"Role of {user.email} set to {user.user_type} by {current_user.email}")
    return user


@router.patch("/{user_id}/move-to-collage", response_model=UserDetail)
@audited("MOVE_USER_TO_COLLEGE", "User", entity_id_param="user_id",
         metadata=lambda kw: {"collegeId": str(kw["data"].college_id)})
async def move_user_to_college(
    user_id: UUID,
    data: MoveToCollege,
    current_user: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db),
):
    """Make a user a member of a college (superadmin only)."""
    return await user_service.move_to_college(db, user_id, data.college_id)


@router.patch("/{user_id}/update", response_model=UserDetail)
@audited("UPDATE_USER", "User", entity_id_param="user_id")
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.update(db, user_id, data)


@router.delete("/{user_id}/delete", response_model=MessageResponse)
@audited("DELETE_USER", "User", entity_id_param="user_id")
async def delete_user(
    user_id: UUID,
    current_user: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a user account (superadmin only)."""
    user = await user_service.delete(db, user_id)
    logger.info(f"User deleted by {current_user.email}: {user.email}")
    return {"message": "User deleted successfully"}
