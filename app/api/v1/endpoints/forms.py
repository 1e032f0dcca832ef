"""Dynamic form endpoints: form sections, fields and submissions."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging import logger
from app.dependencies import get_optional_user, require_admin
from app.models.user import User
from app.schemas import (
    FormFieldCreate,
    FormFieldResponse,
    FormFieldUpdate,
    FormListResponse,
    FormSectionCreate,
    FormSectionDetail,
    FormSectionResponse,
    FormSectionUpdate,
    FormSectionWithCollege,
    FormSectionWithFields,
    FormToggleResponse,
    MessageResponse,
    SubmissionCreate,
    SubmissionDetail,
    SubmissionListResponse,
)
from app.services.audit_service import audited
from app.services.form_service import form_service
from app.services.submission_service import submission_service

router = APIRouter()


@router.get("", response_model=FormListResponse)
async def list_forms(
    college_id: Optional[UUID] = Query(None, alias="collegeId"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    """Paginated form sections with field and submission counts (public)."""
    forms, pagination = await form_service.list_forms(db, college_id=college_id, page=page, limit=limit)
    return {"forms": forms, "pagination": pagination}


@router.get("/slug/{slug}", response_model=List[FormSectionWithFields])
async def list_forms_by_college_slug(slug: str, db: AsyncSession = Depends(get_db)):
    """Forms of the college with this slug (public)."""
    return await form_service.list_by_college_slug(db, slug)


# ─── Form sections ───────────────────────────────────────────────────────────

@router.post("/form-sections/create", response_model=FormSectionResponse, status_code=201)
@audited("CREATE_FORM_SECTION", "FormSection", metadata=lambda kw: {"title": kw["data"].title})
async def create_form_section(
    data: FormSectionCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create a form section (admin+ only)."""
    section = await form_service.create_section(db, data)
    logger.info(f"Form section created by {current_user.email}: {section.title}")
    return section


@router.get("/form-sections", response_model=List[FormSectionWithFields])
async def list_form_sections(
    college_id: Optional[UUID] = Query(None, alias="collegeId"),
    db: AsyncSession = Depends(get_db),
):
    return await form_service.list_sections(db, college_id)


@router.get("/form-sections/{section_id}", response_model=FormSectionDetail)
async def get_form_section(section_id: UUID, db: AsyncSession = Depends(get_db)):
    """A form section with ordered fields and its submission count (public)."""
    return await form_service.get_complete(db, section_id)


@router.put("/form-sections/{section_id}/update", response_model=FormSectionResponse)
@audited("UPDATE_FORM_SECTION", "FormSection", entity_id_param="section_id")
async def update_form_section(
    section_id: UUID,
    data: FormSectionUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await form_service.update_section(db, section_id, data)


@router.delete("/form-sections/{section_id}/delete", response_model=MessageResponse)
@audited("DELETE_FORM_SECTION", "FormSection", entity_id_param="section_id")
async def delete_form_section(
    section_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a form section together with its fields and submissions (admin+ only)."""
    section = await form_service.delete_section(db, section_id)
    logger.info(f"Form section deleted by {current_user.email}: {section.title}")
    return {"message": "Form section deleted successfully"}


# ─── Form fields ─────────────────────────────────────────────────────────────

@router.post("/form-feilds/create", response_model=FormFieldResponse, status_code=201)
@audited("CREATE_FORM_FIELD", "FormField",
         metadata=lambda kw: {"formSectionId": str(kw["data"].form_section_id)})
async def create_form_field(
    data: FormFieldCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Add a field to a form section (admin+ only)."""
    return await form_service.create_field(db, data)


@router.get("/form-feilds", response_model=List[FormFieldResponse])
async def list_form_fields(
    form_section_id: Optional[UUID] = Query(None, alias="formSectionId"),
    db: AsyncSession = Depends(get_db),
):
    return await form_service.list_fields(db, form_section_id)


@router.get("/form-feilds/{field_id}", response_model=FormFieldResponse)
async def get_form_field(field_id: UUID, db: AsyncSession = Depends(get_db)):
    return await form_service.get_field(db, field_id)


@router.put("/form-feilds/{field_id}/update", response_model=FormFieldResponse)
@audited("UPDATE_FORM_FIELD", "FormField", entity_id_param="field_id")
async def update_form_field(
    field_id: UUID,
    data: FormFieldUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await form_service.update_field(db, field_id, data)


@router.delete("/form-feilds/{field_id}/delete", response_model=MessageResponse)
@audited("DELETE_FORM_FIELD", "FormField", entity_id_param="field_id")
async def delete_form_field(
    field_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await form_service.delete_field(db, field_id)
    return {"message": "Form field deleted successfully"}


# ─── Form submissions ────────────────────────────────────────────────────────

@router.get("/form-submissions", response_model=SubmissionListResponse)
async def list_form_submissions(
    form_section_id: Optional[UUID] = Query(None, alias="formSectionId"),
    college_id: Optional[UUID] = Query(None, alias="collegeId"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Submissions filtered by form section and/or college, newest first (admin+ only)."""
    submissions, pagination = await submission_service.list_submissions(
        db, form_section_id=form_section_id, college_id=college_id, page=page, limit=limit
    )
    return {"submissions": submissions, "pagination": pagination}


@router.get("/form-submissions/{submission_id}", response_model=SubmissionDetail)
async def get_form_submission(
    submission_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await submission_service.load(db, submission_id)


@router.delete("/form-submissions/{submission_id}/delete", response_model=MessageResponse)
@audited("DELETE_FORM_SUBMISSION", "FormSubmission", entity_id_param="submission_id")
async def delete_form_submission(
    submission_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await submission_service.delete(db, submission_id)
    return {"message": "Form submission deleted successfully"}


# ─── Per-form routes ─────────────────────────────────────────────────────────

@router.post("/{form_id}/submit", response_model=SubmissionDetail, status_code=201)
async def submit_form(
    form_id: UUID,
    data: SubmissionCreate,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """Visitor submission of a form (public; the caller is recorded when signed in)."""
    return await submission_service.submit(
        db, form_id, data, user_id=current_user.id if current_user else None
    )


@router.get("/{form_id}/submissions", response_model=SubmissionListResponse)
async def list_submissions_for_form(
    form_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Submissions of one form, newest first (admin+ only)."""
    await form_service.load_section(db, form_id)
    submissions, pagination = await submission_service.list_submissions(
        db, form_section_id=form_id, page=page, limit=limit
    )
    return {"submissions": submissions, "pagination": pagination}


@router.put("/{form_id}/active", response_model=FormToggleResponse)
@audited("TOGGLE_FORM_ACTIVE", "FormSection", entity_id_param="form_id")
async def toggle_form_active(
    form_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Flip whether a form accepts visitor submissions (admin+ only)."""
    section = await form_service.toggle_active(db, form_id)
    logger.info(f"Form {section.title} set active={section.active} by {current_user.email}")
    return {"message": "Form active status updated", "active": section.active}


@router.get("/{form_id}/with-sections", response_model=FormSectionWithCollege)
async def get_form_with_fields(form_id: UUID, db: AsyncSession = Depends(get_db)):
    """A form with its ordered fields and owning college (public)."""
    return await form_service.load_section(db, form_id, with_college=True)
