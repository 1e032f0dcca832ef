"""FAQ endpoints: the published FAQ document and the intake/approval workflow."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging import logger
from app.dependencies import require_admin
from app.models.user import User
from app.schemas import (
    CountResponse,
    FAQData,
    FAQGenerateForm,
    FAQGenerateFormResponse,
    FAQImport,
    FAQItemCreate,
    FAQItemUpdate,
    FAQReplace,
    FormSectionWithFields,
    SubmissionDecision,
    SubmissionDecisionResponse,
    SubmissionDetail,
)
from app.services.audit_service import audited
from app.services.faq_service import faq_service

router = APIRouter()


@router.get("/slug/{slug}/faq/forms", response_model=List[FormSectionWithFields])
async def list_intake_forms_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    """FAQ intake forms of the college with this slug; 404 when it has none (public)."""
    return await faq_service.list_intake_forms_by_slug(db, slug)


@router.get("/{college_id}/faq", response_model=FAQData)
async def get_faq(college_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get the published FAQ, or an empty default one (public)."""
    return await faq_service.get(db, college_id)


@router.put("/{college_id}/faq", response_model=FAQData)
@audited("UPDATE_FAQ", "College", entity_id_param="college_id")
async def replace_faq(
    college_id: UUID,
    data: FAQReplace,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Replace title, description and items wholesale (admin+ only)."""
    faq = await faq_service.replace(db, college_id, data)
    logger.info(f"FAQ replaced by {current_user.email} for college {college_id}: {len(faq.items)} items")
    return faq


@router.post("/{college_id}/faq/items", response_model=FAQData)
@audited("ADD_FAQ_ITEM", "College", entity_id_param="college_id")
async def add_faq_item(
    college_id: UUID,
    data: FAQItemCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Append one question/answer item (admin+ only)."""
    return await faq_service.add_item(db, college_id, data)


@router.put("/{college_id}/faq/items/{item_id}", response_model=FAQData)
@audited("UPDATE_FAQ_ITEM", "FAQItem", entity_id_param="item_id")
async def update_faq_item(
    college_id: UUID,
    item_id: str,
    data: FAQItemUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Merge question/answer/order into one item (admin+ only)."""
    return await faq_service.update_item(db, college_id, item_id, data)


@router.delete("/{college_id}/faq/items/{item_id}", response_model=FAQData)
@audited("DELETE_FAQ_ITEM", "FAQItem", entity_id_param="item_id")
async def delete_faq_item(
    college_id: UUID,
    item_id: str,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Remove one item; unknown ids leave the FAQ unchanged (admin+ only)."""
    return await faq_service.delete_item(db, college_id, item_id)


@router.post("/{college_id}/faq/import", response_model=FAQData)
@audited("IMPORT_FAQ", "College", entity_id_param="college_id",
         metadata=lambda kw: {"count": len(kw["data"].items or [])})
async def import_faq(
    college_id: UUID,
    data: FAQImport,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Append a batch of question/answer pairs; one incomplete item rejects the batch (admin+ only)."""
    return await faq_service.import_items(db, college_id, data)


@router.post("/{college_id}/faq/generate-form", response_model=FAQGenerateFormResponse)
@audited("GENERATE_FAQ_FORM", "FAQForm", entity_id_param="college_id")
async def generate_faq_form(
    college_id: UUID,
    data: FAQGenerateForm,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create an intake form that collects visitor questions (admin+ only)."""
    form = await faq_service.generate_form(db, college_id, data.college_name, data.questions)
    return {
        "form": form,
        "message": "FAQ questions collection form generated successfully",
    }


@router.get("/{college_id}/faq/forms", response_model=List[FormSectionWithFields])
async def list_intake_forms(college_id: UUID, db: AsyncSession = Depends(get_db)):
    """Forms of this college with an FAQ-tagged field (public)."""
    return await faq_service.list_intake_forms(db, college_id)


@router.get("/{college_id}/faq/submissions", response_model=List[SubmissionDetail])
async def list_faq_submissions(
    college_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Pending intake submissions, newest first (admin+ only)."""
    return await faq_service.list_submissions(db, college_id)


@router.get("/{college_id}/faq/submissions/count", response_model=CountResponse)
async def count_faq_submissions(
    college_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Number of pending intake submissions (admin+ only)."""
    count = await faq_service.count_submissions(db, college_id)
    return {"count": count, "message": f"Found {count} FAQ form submissions"}


@router.put(
    "/{college_id}/faq/submissions/{submission_id}",
    response_model=SubmissionDecisionResponse,
    response_model_exclude_none=True,
)
@audited("UPDATE_FAQ_SUBMISSION", "FAQSubmission", entity_id_param="submission_id",
         metadata=lambda kw: {"action": kw["data"].action})
async def decide_faq_submission(
    college_id: UUID,
    submission_id: UUID,
    data: SubmissionDecision,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Approve a submission into FAQ items, or reject it (admin+ only)."""
    message, faq = await faq_service.decide_submission(db, college_id, submission_id, data)
    logger.info(f"FAQ submission {submission_id} {data.action}d by {current_user.email}")
    return {"message": message, "faq": faq}
