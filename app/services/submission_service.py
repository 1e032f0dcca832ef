"""Visitor form submissions."""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging import logger
from app.models.college import College
from app.models.form_field import FormField
from app.models.form_section import FormSection
from app.models.form_submission import FormSubmission
from app.schemas import Pagination, SubmissionCreate
from app.services.audit_service import audit_service
from app.services.common import get_or_404, paginate

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

SUBMISSION_LOAD_OPTIONS = (
    selectinload(FormSubmission.form_section).selectinload(FormSection.fields),
    selectinload(FormSubmission.college),
)


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or value == []


def check_against_fields(fields: List[FormField], data: Dict[str, Any]) -> Dict[str, str]:
    """Validate submitted values against the form's field definitions.

    Returns a mapping of field id (or submitted key) to error message; empty
    when the data conforms.
    """
    errors: Dict[str, str] = {}
    known = {str(f.id): f for f in fields}

    for key in data:
        if key not in known:
            errors[key] = "Unknown field"

    for field_id, field in known.items():
        value = data.get(field_id)
        if _is_blank(value):
            if field.is_required:
                errors[field_id] = f"{field.label} is required"
            continue

        rules = field.validation or {}
        if field.type == "NUMBER":
            if isinstance(value, bool) or not isinstance(value, (int, float, str)):
                errors[field_id] = f"{field.label} must be a number"
                continue
            try:
                float(value)
            except ValueError:
                errors[field_id] = f"{field.label} must be a number"
                continue
        elif field.type == "EMAIL":
            if not isinstance(value, str) or not EMAIL_RE.match(value):
                errors[field_id] = f"{field.label} must be a valid email"
                continue
        elif field.type == "DATE":
            try:
                datetime.fromisoformat(str(value))
            except ValueError:
                errors[field_id] = f"{field.label} must be an ISO date"
                continue
        elif field.type in ("SELECT", "RADIO"):
            if field.options and value not in field.options:
                errors[field_id] = f"{field.label} must be one of the listed options"
                continue
        elif field.type == "CHECKBOX":
            chosen = value if isinstance(value, list) else [value]
            if field.options and any(v not in field.options for v in chosen if not isinstance(v, bool)):
                errors[field_id] = f"{field.label} must be one of the listed options"
                continue

        if isinstance(value, str):
            min_length = rules.get("minLength")
            max_length = rules.get("maxLength")
            if isinstance(min_length, int) and len(value) < min_length:
                errors[field_id] = f"{field.label} must be at least {min_length} characters"
            elif isinstance(max_length, int) and len(value) > max_length:
                errors[field_id] = f"{field.label} must be at most {max_length} characters"

    return errors


class SubmissionService:
    """Accept, list and remove form submissions."""

    async def load(self, db: AsyncSession, submission_id: UUID) -> FormSubmission:
        result = await db.execute(
            select(FormSubmission)
            .where(FormSubmission.id == submission_id)
            .options(*SUBMISSION_LOAD_OPTIONS)
            .execution_options(populate_existing=True)
        )
        submission = result.scalar_one_or_none()
        if submission is None:
            raise NotFoundError("Form submission not found")
        return submission

    async def submit(
        self,
        db: AsyncSession,
        form_section_id: Optional[UUID],
        data: SubmissionCreate,
        user_id: Optional[UUID] = None,
    ) -> FormSubmission:
        if not data.data or not form_section_id or not data.college_id:
            raise ValidationError("Data, formSectionId, and collegeId are required")

        result = await db.execute(
            select(FormSection)
            .where(FormSection.id == form_section_id)
            .options(selectinload(FormSection.fields))
        )
        section = result.scalar_one_or_none()
        if section is None:
            raise NotFoundError("Form not found")
        if not section.active:
            raise ValidationError("This form is not accepting submissions")
        await get_or_404(db, College, data.college_id, "College")

        if settings.STRICT_SUBMISSIONS:
            errors = check_against_fields(section.fields, data.data)
            if errors:
                raise ValidationError("Submission does not match the form", {"fields": errors})

        submission = FormSubmission(
            form_section_id=form_section_id,
            college_id=data.college_id,
            data=data.data,
        )
        db.add(submission)
        await db.flush()

        await audit_service.record(
            db,
            action="SUBMIT_FORM",
            entity="FormSubmission",
            entity_id=submission.id,
            user_id=user_id,
            metadata={
                "formSectionId": str(form_section_id),
                "collegeId": str(data.college_id),
            },
        )

        logger.info(f"Form submission received for {section.title} ({submission.id})")
        return await self.load(db, submission.id)

    async def list_submissions(
        self,
        db: AsyncSession,
        form_section_id: Optional[UUID] = None,
        college_id: Optional[UUID] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[FormSubmission], Pagination]:
        query = select(FormSubmission)
        if form_section_id:
            query = query.where(FormSubmission.form_section_id == form_section_id)
        if college_id:
            query = query.where(FormSubmission.college_id == college_id)
        query = query.order_by(FormSubmission.submitted_at.desc(), FormSubmission.id.desc())
        return await paginate(db, query, page, limit, options=SUBMISSION_LOAD_OPTIONS)

    async def delete(self, db: AsyncSession, submission_id: UUID) -> FormSubmission:
        submission = await get_or_404(db, FormSubmission, submission_id, "Form submission")
        await db.delete(submission)
        await db.flush()
        return submission


submission_service = SubmissionService()
