"""Main university endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging import logger
from app.dependencies import require_super_admin
from app.models.user import User
from app.schemas import (
    UniversityCreate,
    UniversityDelete,
    UniversityDeleteResponse,
    UniversityDetail,
    UniversityResponse,
    UniversityUpdate,
    UniversityUpdateResponse,
)
from app.services.audit_service import audit_service, audited
from app.services.university_service import university_service

router = APIRouter()


@router.get("", response_model=UniversityDetail)
async def get_university(db: AsyncSession = Depends(get_db)):
    """The main university with its colleges (public)."""
    return await university_service.get_main(db)


@router.post("/create", response_model=UniversityResponse, status_code=201)
@audited("CREATE_UNIVERSITY", "University")
async def create_university(
    data: UniversityCreate,
    current_user: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create a university (superadmin only)."""
    return await university_service.create(db, data)


@router.post("/edit", response_model=UniversityUpdateResponse)
@audited("UPDATE_UNIVERSITY", "University",
         metadata=lambda kw: {"fields": sorted(kw["data"].model_dump(exclude_unset=True))})
async def edit_university(
    data: UniversityUpdate,
    current_user: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db),
):
    """Update the main university's profile; its slug never changes (superadmin only)."""
    university = await university_service.edit(db, data)
    logger.info(f"University updated by {current_user.email}: {university.name}")
    return {"message": "University updated successfully", "university": university}


@router.post("/delete", response_model=UniversityDeleteResponse)
async def delete_university(
    data: UniversityDelete,
    current_user: User = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete the university with every college and member account (superadmin only).

    The body must carry the confirmation phrase ``DELETE_UNIVERSITY_<SLUG>``.
    """
    university, college_count = await university_service.delete(
        db, data.confirmation, actor=current_user
    )
    await audit_service.record(
        db,
        action="DELETE_UNIVERSITY",
        entity="University",
        entity_id=university.id,
        user_id=current_user.id,
        metadata={"slug": university.slug, "colleges": college_count},
    )
    return {
        "message": "University and all related data deleted successfully",
        "deleted_colleges": college_count,
    }
