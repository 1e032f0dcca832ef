"""FAQ workflow for a college.

The published FAQ is a single JSON document on ``colleges.faq``. Every change
reads the document, transforms it in memory, and writes it back whole. Writes
are compare-and-swap on ``colleges.faq_version``: if another request wrote
the document in between, the write matches no row and ConflictError is
raised instead of silently dropping the other request's change.
"""

import random
import string
import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.logging import logger
from app.models.college import College
from app.models.form_field import FormField
from app.models.form_section import FormSection
from app.models.form_submission import FormSubmission
from app.schemas import (
    DEFAULT_FAQ_TITLE,
    FAQData,
    FAQImport,
    FAQItem,
    FAQItemCreate,
    FAQItemUpdate,
    FAQReplace,
    FormSectionWithFields,
    IntakeCatalogEntry,
    SubmissionDecision,
)
from app.services.common import get_or_404
from app.services.submission_service import SUBMISSION_LOAD_OPTIONS

FAQ_TAG_KEYS = ("FAQ", "fqa")
INTAKE_FIELD_LABEL = "What questions do you need to know when you're here on orientation day?"
INTAKE_DESCRIPTION = (
    "Help us create a comprehensive FAQ by telling us what questions "
    "you need answered during orientation day."
)
DECISIONS = ("approve", "reject")

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_item_id() -> str:
    """``faq_<epoch ms>_<9 random base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"faq_{int(time.time() * 1000)}_{suffix}"


def default_faq() -> FAQData:
    return FAQData(
        title=DEFAULT_FAQ_TITLE,
        description="",
        last_updated=datetime.utcnow(),
        items=[],
    )


def parse_faq(raw: Any) -> FAQData:
    """Read the stored document; anything that is not a document is empty."""
    if not raw or not isinstance(raw, dict):
        return default_faq()
    return FAQData.model_validate(raw)


def is_faq_intake(validation: Optional[Dict[str, Any]]) -> bool:
    """True when a field's validation bag carries an FAQ intake tag."""
    if not validation:
        return False
    return any(validation.get(key) is True for key in FAQ_TAG_KEYS)


def is_intake_form(section: FormSection) -> bool:
    if any(is_faq_intake(f.validation) for f in section.fields):
        return True
    # Older intake forms are only recognisable by title
    return settings.FAQ_TITLE_HEURISTIC and "FAQ" in (section.title or "")


def build_item(question: str, answer: str, order: int, now: datetime) -> FAQItem:
    return FAQItem(
        id=new_item_id(),
        question=question,
        answer=answer,
        order=order,
        created_at=now,
        updated_at=now,
    )


class FAQService:
    """Reads and versioned writes of a college FAQ, plus the intake workflow."""

    async def _read(self, db: AsyncSession, college_id: UUID) -> Tuple[College, FAQData]:
        college = await get_or_404(db, College, college_id, "College")
        return college, parse_faq(college.faq)

    async def _write(self, db: AsyncSession, college: College, faq: FAQData) -> FAQData:
        version = college.faq_version
        result = await db.execute(
            update(College)
            .where(College.id == college.id, College.faq_version == version)
            .values(
                faq=faq.model_dump(mode="json", by_alias=True),
                faq_version=version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.warning(f"FAQ write lost a concurrent update race for college {college.id}")
            raise ConflictError("FAQ was modified by another request, reload and retry")

        await db.refresh(college)
        return faq

    async def get(self, db: AsyncSession, college_id: UUID) -> FAQData:
        _, faq = await self._read(db, college_id)
        return faq

    async def replace(self, db: AsyncSession, college_id: UUID, data: FAQReplace) -> FAQData:
        college, _ = await self._read(db, college_id)
        now = datetime.utcnow()

        items = [
            FAQItem(
                id=item.id or new_item_id(),
                question=item.question,
                answer=item.answer,
                order=index if item.order is None else item.order,
                created_at=item.created_at or now,
                updated_at=item.updated_at or now,
            )
            for index, item in enumerate(data.items or [])
        ]
        ids = [item.id for item in items]
        if len(set(ids)) != len(ids):
            raise ValidationError("FAQ item ids must be unique")

        faq = FAQData(
            title=data.title or DEFAULT_FAQ_TITLE,
            description=data.description or "",
            last_updated=now,
            items=items,
        )
        return await self._write(db, college, faq)

    async def add_item(self, db: AsyncSession, college_id: UUID, data: FAQItemCreate) -> FAQData:
        if not data.question or not data.answer:
            raise ValidationError("Question and answer are required")

        college, faq = await self._read(db, college_id)
        now = datetime.utcnow()
        order = len(faq.items) if data.order is None else data.order
        faq.items.append(build_item(data.question, data.answer, order, now))
        faq.last_updated = now
        return await self._write(db, college, faq)

    async def update_item(
        self, db: AsyncSession, college_id: UUID, item_id: str, data: FAQItemUpdate
    ) -> FAQData:
        college, faq = await self._read(db, college_id)
        item = next((i for i in faq.items if i.id == item_id), None)
        if item is None:
            raise NotFoundError("FAQ item not found")

        now = datetime.utcnow()
        if data.question:
            item.question = data.question
        if data.answer:
            item.answer = data.answer
        if data.order is not None:
            item.order = data.order
        item.updated_at = now
        faq.last_updated = now
        return await self._write(db, college, faq)

    async def delete_item(self, db: AsyncSession, college_id: UUID, item_id: str) -> FAQData:
        """Remove an item. An unknown id leaves the document untouched."""
        college, faq = await self._read(db, college_id)
        remaining = [i for i in faq.items if i.id != item_id]
        if len(remaining) == len(faq.items):
            return faq

        faq.items = remaining
        faq.last_updated = datetime.utcnow()
        return await self._write(db, college, faq)

    async def import_items(self, db: AsyncSession, college_id: UUID, data: FAQImport) -> FAQData:
        if data.items is None:
            raise ValidationError("Items array is required")
        for index, item in enumerate(data.items):
            if not (item.question or "").strip() or not (item.answer or "").strip():
                raise ValidationError(
                    "Each item must have both question and answer", {"index": index}
                )

        college, faq = await self._read(db, college_id)
        now = datetime.utcnow()
        start = len(faq.items)
        faq.items.extend(
            build_item(item.question.strip(), item.answer.strip(), start + index, now)
            for index, item in enumerate(data.items)
        )
        faq.last_updated = now
        faq = await self._write(db, college, faq)

        logger.info(f"Imported {len(data.items)} FAQ items into college {college_id}")
        return faq

    # ─── Intake workflow ─────────────────────────────────────────────────

    async def generate_form(
        self,
        db: AsyncSession,
        college_id: UUID,
        college_name: Optional[str],
        questions: Optional[List[str]],
    ) -> FormSection:
        """Create an intake form with one tagged question field."""
        if not questions or not isinstance(questions, list):
            raise ValidationError("Questions array is required and must not be empty")
        if not college_name:
            raise ValidationError("College name is required")
        await get_or_404(db, College, college_id, "College")

        section = FormSection(
            title=f"FAQ Questions Collection for {college_name}",
            description=INTAKE_DESCRIPTION,
            college_id=college_id,
            active=True,
        )
        db.add(section)
        await db.flush()

        db.add(
            FormField(
                form_section_id=section.id,
                label=INTAKE_FIELD_LABEL,
                type="TEXTAREA",
                is_required=True,
                options=[],
                order=0,
                validation={"minLength": 10, "maxLength": 1000, "FAQ": True},
            )
        )
        await db.flush()

        result = await db.execute(
            select(FormSection)
            .where(FormSection.id == section.id)
            .options(selectinload(FormSection.fields))
            .execution_options(populate_existing=True)
        )
        logger.info(f"FAQ intake form generated for {college_name} ({section.id})")
        return result.scalar_one()

    async def decide_submission(
        self,
        db: AsyncSession,
        college_id: UUID,
        submission_id: UUID,
        data: SubmissionDecision,
    ) -> Tuple[str, Optional[FAQData]]:
        """Approve a submission into FAQ items, or reject it. Either way it is removed."""
        if data.action not in DECISIONS:
            raise ValidationError("Action must be 'approve' or 'reject'")

        result = await db.execute(
            select(FormSubmission)
            .where(FormSubmission.id == submission_id)
            .options(selectinload(FormSubmission.form_section).selectinload(FormSection.fields))
        )
        submission = result.scalar_one_or_none()
        if submission is None or submission.college_id != college_id:
            raise NotFoundError("Submission not found")

        if data.action == "reject":
            await db.delete(submission)
            await db.flush()
            logger.info(f"FAQ submission {submission_id} rejected")
            return "Submission rejected and deleted", None

        if data.answers is None:
            raise ValidationError("Answers are required to approve a submission")

        college, faq = await self._read(db, college_id)
        now = datetime.utcnow()
        start = len(faq.items)
        fields = sorted(submission.form_section.fields, key=lambda f: f.order)
        submitted = submission.data or {}
        for index, field in enumerate(fields):
            key = str(field.id)
            faq.items.append(
                build_item(
                    str(submitted.get(key) or ""),
                    data.answers.get(key) or "",
                    start + index,
                    now,
                )
            )
        faq.last_updated = now
        faq = await self._write(db, college, faq)

        await db.delete(submission)
        await db.flush()

        logger.info(f"FAQ submission {submission_id} approved into {len(fields)} items")
        return "FAQ items added successfully", faq

    async def intake_form_ids(self, db: AsyncSession, college_id: UUID) -> List[UUID]:
        result = await db.execute(
            select(FormSection)
            .where(FormSection.college_id == college_id)
            .options(selectinload(FormSection.fields))
        )
        return [s.id for s in result.scalars().all() if is_intake_form(s)]

    async def list_submissions(self, db: AsyncSession, college_id: UUID) -> List[FormSubmission]:
        await get_or_404(db, College, college_id, "College")
        form_ids = await self.intake_form_ids(db, college_id)
        if not form_ids:
            return []
        result = await db.execute(
            select(FormSubmission)
            .where(
                FormSubmission.college_id == college_id,
                FormSubmission.form_section_id.in_(form_ids),
            )
            .options(*SUBMISSION_LOAD_OPTIONS)
            .order_by(FormSubmission.submitted_at.desc(), FormSubmission.id.desc())
        )
        return list(result.scalars().all())

    async def count_submissions(self, db: AsyncSession, college_id: UUID) -> int:
        await get_or_404(db, College, college_id, "College")
        form_ids = await self.intake_form_ids(db, college_id)
        if not form_ids:
            return 0
        result = await db.execute(
            select(func.count())
            .select_from(FormSubmission)
            .where(
                FormSubmission.college_id == college_id,
                FormSubmission.form_section_id.in_(form_ids),
            )
        )
        return result.scalar() or 0

    async def list_intake_forms(self, db: AsyncSession, college_id: UUID) -> List[FormSection]:
        """Forms of a college having at least one FAQ-tagged field."""
        await get_or_404(db, College, college_id, "College")
        result = await db.execute(
            select(FormSection)
            .where(FormSection.college_id == college_id)
            .options(selectinload(FormSection.fields))
            .order_by(FormSection.created_at.desc(), FormSection.id.desc())
        )
        return [
            s for s in result.scalars().all()
            if any(is_faq_intake(f.validation) for f in s.fields)
        ]

    async def list_intake_forms_by_slug(self, db: AsyncSession, slug: str) -> List[FormSection]:
        result = await db.execute(select(College).where(College.slug == slug))
        college = result.scalar_one_or_none()
        if college is None:
            raise NotFoundError("College not found")
        forms = await self.list_intake_forms(db, college.id)
        if not forms:
            raise NotFoundError("No FAQ forms found")
        return forms

    async def intake_catalog(self, db: AsyncSession) -> List[IntakeCatalogEntry]:
        """Every college with its FAQ intake forms, for the mobile app."""
        result = await db.execute(
            select(College)
            .options(selectinload(College.forms).selectinload(FormSection.fields))
            .order_by(College.name.asc(), College.id.asc())
        )
        return [
            IntakeCatalogEntry(
                id=college.id,
                name=college.name,
                slug=college.slug,
                forms=[
                    FormSectionWithFields.model_validate(form)
                    for form in sorted(college.forms, key=lambda f: (f.created_at, str(f.id)))
                    if any(is_faq_intake(f.validation) for f in form.fields)
                ],
            )
            for college in result.scalars().all()
        ]


faq_service = FAQService()
