"""Page section endpoints, both college-scoped and by section id."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging import logger
from app.dependencies import require_admin
from app.models.user import User
from app.schemas import (
    BulkSectionCreate,
    BulkSectionDelete,
    CollegeBrief,
    CollegeSectionsResponse,
    MessageResponse,
    SectionBulkCreateResponse,
    SectionBulkDeleteResponse,
    SectionCreate,
    SectionOrder,
    SectionReorder,
    SectionReorderResponse,
    SectionResponse,
    SectionUpdate,
)
from app.services.audit_service import audited
from app.services.section_service import section_service

router = APIRouter()


# ─── /collage/{id}/sections ──────────────────────────────────────────────────

@router.get("/collage/{college_id}/sections", response_model=CollegeSectionsResponse)
async def list_college_sections(college_id: UUID, db: AsyncSession = Depends(get_db)):
    """A college's sections sorted by order (public)."""
    college, sections = await section_service.college_sections(db, college_id)
    return {
        "college": CollegeBrief.model_validate(college),
        "sections": sections,
        "count": len(sections),
    }


@router.post(
    "/collage/{college_id}/sections/bulk",
    response_model=SectionBulkCreateResponse,
    status_code=201,
)
@audited("BULK_CREATE_SECTIONS", "Section", entity_id_param="college_id",
         metadata=lambda kw: {"count": len(kw["data"].sections or [])})
async def bulk_create_sections(
    college_id: UUID,
    data: BulkSectionCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create several sections in one transaction (admin+ only)."""
    sections = await section_service.bulk_create(db, college_id, data.sections)
    return {
        "message": f"{len(sections)} sections created successfully",
        "sections": sections,
    }


@router.delete("/collage/{college_id}/sections/bulk", response_model=SectionBulkDeleteResponse)
@audited("BULK_DELETE_SECTIONS", "Section", entity_id_param="college_id",
         metadata=lambda kw: {"sectionIds": [str(i) for i in kw["data"].section_ids or []]})
async def bulk_delete_sections(
    college_id: UUID,
    data: BulkSectionDelete,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete several sections; rejected whole if any id belongs elsewhere (admin+ only)."""
    deleted = await section_service.bulk_delete(db, college_id, data.section_ids)
    return {
        "message": f"{deleted} sections deleted successfully",
        "deleted_count": deleted,
    }


@router.api_route(
    "/collage/{college_id}/sections/reorder",
    methods=["PUT", "POST"],
    response_model=SectionReorderResponse,
)
@audited("REORDER_SECTIONS", "Section", entity_id_param="college_id")
async def reorder_college_sections(
    college_id: UUID,
    data: SectionReorder,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Apply new orders and return the sections sorted by them (admin+ only)."""
    sections = await section_service.reorder(db, college_id, data.section_orders)
    return {"message": "Sections reordered successfully", "sections": sections}


# ─── /section ────────────────────────────────────────────────────────────────

@router.post("/section/create", response_model=SectionResponse, status_code=201)
@audited("CREATE_SECTION", "Section",
         metadata=lambda kw: {"title": kw["data"].title, "sectionType": kw["data"].section_type})
async def create_section(
    data: SectionCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create one section (admin+ only)."""
    section = await section_service.create(db, data)
    logger.info(f"Section created by {current_user.email}: {section.title}")
    return section


@router.post("/section/reorder", response_model=SectionReorderResponse)
@audited("REORDER_SECTIONS", "Section")
async def reorder_sections(
    data: List[SectionOrder],
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Reorder by a bare list of {id, order}; all ids must share one college (admin+ only)."""
    sections = await section_service.reorder_any(db, data)
    return {"message": "Sections reordered successfully", "sections": sections}


@router.get("/section/{section_id}", response_model=SectionResponse)
async def get_section(section_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get one section (public)."""
    return await section_service.get(db, section_id)


@router.put("/section/{section_id}/update", response_model=SectionResponse)
@audited("UPDATE_SECTION", "Section", entity_id_param="section_id")
async def update_section(
    section_id: UUID,
    data: SectionUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Partially update a section (admin+ only)."""
    return await section_service.update(db, section_id, data)


@router.delete("/section/{section_id}/delete", response_model=MessageResponse)
@audited("DELETE_SECTION", "Section", entity_id_param="section_id")
async def delete_section(
    section_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a section (admin+ only)."""
    section = await section_service.delete(db, section_id)
    logger.info(f"Section deleted by {current_user.email}: {section.title}")
    return {"message": "Section deleted successfully"}
