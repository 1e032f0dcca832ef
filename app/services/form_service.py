"""Form schema management: form sections and their fields."""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging import logger
from app.models.college import College
from app.models.form_field import FIELD_TYPES, FormField
from app.models.form_section import FormSection
from app.models.form_submission import FormSubmission
from app.schemas import (
    FormFieldCreate,
    FormFieldUpdate,
    FormSectionCreate,
    FormSectionDetail,
    FormSectionSummary,
    FormSectionUpdate,
    Pagination,
)
from app.services.common import count_by, get_or_404, paginate


class FormService:
    """Create, edit, list and retrieve form sections and form fields."""

    # ─── Form sections ───────────────────────────────────────────────────

    async def load_section(
        self, db: AsyncSession, section_id: UUID, with_college: bool = False
    ) -> FormSection:
        """Fetch a form section with its ordered fields, or raise NotFoundError."""
        options = [selectinload(FormSection.fields)]
        if with_college:
            options.append(selectinload(FormSection.college))
        result = await db.execute(
            select(FormSection)
            .where(FormSection.id == section_id)
            .options(*options)
            .execution_options(populate_existing=True)
        )
        section = result.scalar_one_or_none()
        if section is None:
            raise NotFoundError("Form section not found")
        return section

    async def create_section(self, db: AsyncSession, data: FormSectionCreate) -> FormSection:
        if not data.title:
            raise ValidationError("Title is required")
        if data.college_id:
            await get_or_404(db, College, data.college_id, "College")

        section = FormSection(
            title=data.title,
            college_id=data.college_id,
            description=data.description or "",
            active=True if data.active is None else data.active,
        )
        db.add(section)
        await db.flush()
        await db.refresh(section)

        logger.info(f"Form section created: {section.title} ({section.id})")
        return section

    async def update_section(
        self, db: AsyncSession, section_id: UUID, data: FormSectionUpdate
    ) -> FormSection:
        section = await get_or_404(db, FormSection, section_id, "Form section")
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(section, key, value)
        await db.flush()
        await db.refresh(section)
        return section

    async def delete_section(self, db: AsyncSession, section_id: UUID) -> FormSection:
        """Delete a form section together with its fields and submissions."""
        section = await get_or_404(db, FormSection, section_id, "Form section")
        await db.execute(
            delete(FormSubmission).where(FormSubmission.form_section_id == section_id)
        )
        await db.execute(delete(FormField).where(FormField.form_section_id == section_id))
        await db.delete(section)
        await db.flush()

        logger.info(f"Form section deleted: {section.title} ({section.id})")
        return section

    async def toggle_active(self, db: AsyncSession, section_id: UUID) -> FormSection:
        section = await get_or_404(db, FormSection, section_id, "Form section")
        section.active = not section.active
        await db.flush()
        await db.refresh(section)
        return section

    async def list_sections(
        self, db: AsyncSession, college_id: Optional[UUID] = None
    ) -> List[FormSection]:
        query = select(FormSection).options(selectinload(FormSection.fields))
        if college_id:
            query = query.where(FormSection.college_id == college_id)
        query = query.order_by(FormSection.created_at.desc(), FormSection.id.desc())
        result = await db.execute(query)
        return list(result.scalars().all())

    async def list_forms(
        self,
        db: AsyncSession,
        college_id: Optional[UUID] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[FormSectionSummary], Pagination]:
        """One page of form sections with their college and child counts."""
        query = select(FormSection)
        if college_id:
            query = query.where(FormSection.college_id == college_id)
        query = query.order_by(FormSection.created_at.desc(), FormSection.id.desc())

        sections, pagination = await paginate(
            db, query, page, limit, options=[selectinload(FormSection.college)]
        )
        ids = [s.id for s in sections]
        field_counts = await count_by(db, FormField.form_section_id, ids)
        submission_counts = await count_by(db, FormSubmission.form_section_id, ids)

        forms = [
            FormSectionSummary.model_validate(s).model_copy(
                update={
                    "field_count": field_counts.get(s.id, 0),
                    "submission_count": submission_counts.get(s.id, 0),
                }
            )
            for s in sections
        ]
        return forms, pagination

    async def get_complete(self, db: AsyncSession, section_id: UUID) -> FormSectionDetail:
        """A form section with its ordered fields and its submission count."""
        section = await self.load_section(db, section_id)
        counts = await count_by(db, FormSubmission.form_section_id, [section.id])
        return FormSectionDetail.model_validate(section).model_copy(
            update={"submission_count": counts.get(section.id, 0)}
        )

    async def list_by_college_slug(self, db: AsyncSession, slug: str) -> List[FormSection]:
        result = await db.execute(select(College).where(College.slug == slug))
        college = result.scalar_one_or_none()
        if college is None:
            raise NotFoundError("College not found")
        return await self.list_sections(db, college.id)

    # ─── Form fields ─────────────────────────────────────────────────────

    async def create_field(self, db: AsyncSession, data: FormFieldCreate) -> FormField:
        missing = [
            name
            for name, value in (
                ("label", data.label),
                ("type", data.type),
                ("formSectionId", data.form_section_id),
            )
            if not value
        ]
        if missing:
            raise ValidationError(f"{', '.join(missing)} required", {"missing": missing})

        field_type = data.type.upper()
        if field_type not in FIELD_TYPES:
            raise ValidationError(
                f"Invalid field type: {data.type}", {"allowed": list(FIELD_TYPES)}
            )
        await get_or_404(db, FormSection, data.form_section_id, "Form section")

        field = FormField(
            form_section_id=data.form_section_id,
            label=data.label,
            type=field_type,
            is_required=bool(data.is_required),
            options=data.options or [],
            validation=data.validation,
            order=data.order or 0,
        )
        db.add(field)
        await db.flush()
        await db.refresh(field)

        logger.info(f"Form field created: {field.label} ({field.type}) in {field.form_section_id}")
        return field

    async def update_field(
        self, db: AsyncSession, field_id: UUID, data: FormFieldUpdate
    ) -> FormField:
        field = await get_or_404(db, FormField, field_id, "Form field")
        changes = data.model_dump(exclude_unset=True)
        if changes.get("type"):
            changes["type"] = changes["type"].upper()
            if changes["type"] not in FIELD_TYPES:
                raise ValidationError(
                    f"Invalid field type: {data.type}", {"allowed": list(FIELD_TYPES)}
                )
        for key, value in changes.items():
            # validation may be cleared explicitly
            if value is not None or key == "validation":
                setattr(field, key, value)
        await db.flush()
        await db.refresh(field)
        return field

    async def delete_field(self, db: AsyncSession, field_id: UUID) -> FormField:
        field = await get_or_404(db, FormField, field_id, "Form field")
        await db.delete(field)
        await db.flush()
        return field

    async def get_field(self, db: AsyncSession, field_id: UUID) -> FormField:
        return await get_or_404(db, FormField, field_id, "Form field")

    async def list_fields(
        self, db: AsyncSession, form_section_id: Optional[UUID] = None
    ) -> List[FormField]:
        query = select(FormField)
        if form_section_id:
            query = query.where(FormField.form_section_id == form_section_id)
        query = query.order_by(FormField.order.asc(), FormField.created_at.asc())
        result = await db.execute(query)
        return list(result.scalars().all())


form_service = FormService()
