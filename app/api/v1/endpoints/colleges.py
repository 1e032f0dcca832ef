"""College endpoints: CRUD, complete page data, theme and gallery."""

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import ForbiddenError
from app.core.logging import logger
from app.dependencies import require_admin
from app.models.user import User
from app.schemas import (
    CollegeComplete,
    CollegeCreate,
    CollegeListItem,
    CollegeResponse,
    CollegeUpdate,
    DisplayCollegesRequest,
    DisplayCollegesResponse,
    GalleryUpdate,
    MessageResponse,
    ThemeResponse,
    ThemeUpdate,
)
from app.services.audit_service import audited
from app.services.college_service import college_service
from app.services.section_service import section_service
from app.services.user_service import user_service

router = APIRouter()


@router.post("/create", response_model=CollegeResponse, status_code=201)
@audited("CREATE_COLLEGE", "College", metadata=lambda kw: {"slug": kw["data"].slug})
async def create_college(
    data: CollegeCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create a college (admin+ only). Slugs are globally unique."""
    college = await college_service.create(db, data, creator=current_user)
    logger.info(f"College created by {current_user.email}: {college.name} ({college.slug})")
    return college


@router.post("/displaycollages", response_model=DisplayCollegesResponse)
async def display_colleges(
    data: Optional[DisplayCollegesRequest] = None,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Colleges visible to a user (admin+ only).

    A superadmin sees every college. Anyone else sees the colleges they created
    and the one they belong to. Only a superadmin may ask about another user.
    """
    user = current_user
    if data is not None and data.user_id is not None and data.user_id != current_user.id:
        if current_user.user_type != "SUPERADMIN":
            raise ForbiddenError("Only superadmins can view other users' colleges")
        user = await user_service.get_detail(db, data.user_id)

    created, member = await college_service.list_for_user(db, user)
    return {
        "success": True,
        "data": {
            "created_colleges": {"count": len(created), "colleges": created},
            "member_colleges": None if member is None else {"count": len(member), "colleges": member},
            "total_count": len(created) + len(member or []),
        },
    }


@router.get("", response_model=List[CollegeListItem])
async def list_colleges(
    type: Optional[str] = Query(None, description="Filter by college type"),
    created_by_id: Optional[UUID] = Query(None, alias="createdById"),
    db: AsyncSession = Depends(get_db),
):
    """List colleges, newest first, with member/section/form/submission counts (public)."""
    return await college_service.list_colleges(db, college_type=type, created_by_id=created_by_id)


@router.get("/slug/{slug}", response_model=CollegeComplete)
async def get_college_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    """Everything needed to render a college page, looked up by slug (public)."""
    return await college_service.get_by_slug(db, slug)


@router.get("/{college_id}", response_model=CollegeResponse)
async def get_college(college_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get a college by ID (public)."""
    return await college_service.get(db, college_id)


@router.get("/{college_id}/complete", response_model=CollegeComplete)
async def get_college_complete(college_id: UUID, db: AsyncSession = Depends(get_db)):
    """College with ordered sections, forms and fields, programs and counts (public)."""
    return await college_service.get_complete(db, college_id)


@router.put("/{college_id}/update", response_model=CollegeResponse)
@audited("UPDATE_COLLEGE", "College", entity_id_param="college_id",
         metadata=lambda kw: {"fields": sorted(kw["data"].model_dump(exclude_unset=True))})
async def update_college(
    college_id: UUID,
    data: CollegeUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Partially update a college (admin+ only)."""
    college = await college_service.update(db, college_id, data)
    logger.info(f"College updated by {current_user.email}: {college.name}")
    return college


@router.delete("/{college_id}/delete", response_model=MessageResponse)
@audited("DELETE_COLLEGE", "College", entity_id_param="college_id")
async def delete_college(
    college_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a college with its sections, forms, fields, submissions and programs (admin+ only)."""
    college = await college_service.delete(db, college_id)
    logger.info(f"College deleted by {current_user.email}: {college.name}")
    return {"message": "College deleted successfully"}


# ─── Theme & gallery ─────────────────────────────────────────────────────────

@router.get("/{college_id}/theme", response_model=ThemeResponse)
async def get_theme(college_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get a college's theme configuration (public)."""
    return {"theme": await section_service.get_theme(db, college_id)}


@router.put("/{college_id}/theme", response_model=ThemeResponse)
@audited("UPDATE_THEME", "College", entity_id_param="college_id")
async def update_theme(
    college_id: UUID,
    data: ThemeUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Replace a college's theme configuration (admin+ only)."""
    theme: Dict[str, Any] = await section_service.update_theme(db, college_id, data.theme)
    return {"theme": theme}


@router.put("/{college_id}/gallery", response_model=CollegeResponse)
@audited("UPDATE_GALLERY", "College", entity_id_param="college_id")
async def update_gallery(
    college_id: UUID,
    data: GalleryUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Replace a college's gallery image list (admin+ only)."""
    return await section_service.update_gallery(db, college_id, data.gallery_images)
