"""College CRUD and cascading removal."""

from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.logging import logger
from app.models.college import College
from app.models.form_field import FormField
from app.models.form_section import FormSection
from app.models.form_submission import FormSubmission
from app.models.program import Program
from app.models.section import Section
from app.models.university import University
from app.models.user import User
from app.schemas import (
    CollegeComplete,
    CollegeCounts,
    CollegeCreate,
    CollegeListItem,
    CollegeUpdate,
)
from app.services.common import count_by, get_or_404

COMPLETE_LOAD_OPTIONS = (
    selectinload(College.sections),
    selectinload(College.forms).selectinload(FormSection.fields),
    selectinload(College.programs),
)


async def college_counts(db: AsyncSession, ids: List[UUID]) -> Dict[UUID, CollegeCounts]:
    users = await count_by(db, User.college_id, ids)
    sections = await count_by(db, Section.college_id, ids)
    forms = await count_by(db, FormSection.college_id, ids)
    submissions = await count_by(db, FormSubmission.college_id, ids)
    return {
        college_id: CollegeCounts(
            users=users.get(college_id, 0),
            sections=sections.get(college_id, 0),
            forms=forms.get(college_id, 0),
            submissions=submissions.get(college_id, 0),
        )
        for college_id in ids
    }


class CollegeService:
    """Colleges and everything hanging off them."""

    async def _ensure_slug_free(
        self, db: AsyncSession, slug: str, college_id: Optional[UUID] = None
    ) -> None:
        query = select(College.id).where(College.slug == slug)
        if college_id:
            query = query.where(College.id != college_id)
        if (await db.execute(query)).first() is not None:
            raise ConflictError("College slug already exists")

    async def create(
        self, db: AsyncSession, data: CollegeCreate, creator: Optional[User] = None
    ) -> College:
        if not data.name or not data.slug or not data.type:
            raise ValidationError("Name, slug, and type are required")
        await self._ensure_slug_free(db, data.slug)

        created_by_id = data.created_by_id or (creator.id if creator else None)
        if data.created_by_id:
            await get_or_404(db, User, data.created_by_id, "User")
        if data.university_id:
            await get_or_404(db, University, data.university_id, "University")

        college = College(
            name=data.name,
            slug=data.slug,
            type=data.type.upper(),
            theme=data.theme or {},
            gallery_images=data.gallery_images or [],
            projects=data.projects or [],
            created_by_id=created_by_id,
            university_id=data.university_id,
            faq=[],
        )
        db.add(college)
        await db.flush()
        await db.refresh(college)
        return college

    async def update(self, db: AsyncSession, college_id: UUID, data: CollegeUpdate) -> College:
        college = await get_or_404(db, College, college_id, "College")
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

        if "slug" in changes:
            await self._ensure_slug_free(db, changes["slug"], college_id)
        if "type" in changes:
            changes["type"] = changes["type"].upper()
        if "university_id" in changes:
            await get_or_404(db, University, changes["university_id"], "University")

        for key, value in changes.items():
            setattr(college, key, value)
        await db.flush()
        await db.refresh(college)
        return college

    async def list_colleges(
        self,
        db: AsyncSession,
        college_type: Optional[str] = None,
        created_by_id: Optional[UUID] = None,
    ) -> List[CollegeListItem]:
        query = select(College)
        if college_type:
            query = query.where(College.type == college_type.upper())
        if created_by_id:
            query = query.where(College.created_by_id == created_by_id)
        query = query.order_by(College.created_at.desc(), College.id.desc())

        colleges = list((await db.execute(query)).scalars().all())
        counts = await college_counts(db, [c.id for c in colleges])
        return [
            CollegeListItem.model_validate(c).model_copy(update={"counts": counts[c.id]})
            for c in colleges
        ]

    async def _complete_list(self, db: AsyncSession, query) -> List[CollegeComplete]:
        result = await db.execute(
            query.options(*COMPLETE_LOAD_OPTIONS).order_by(College.created_at.desc(), College.id.desc())
        )
        return [CollegeComplete.model_validate(c) for c in result.scalars().all()]

    async def list_for_user(
        self, db: AsyncSession, user: User
    ) -> Tuple[List[CollegeComplete], Optional[List[CollegeComplete]]]:
        """Colleges visible to ``user``: all of them for a superadmin, otherwise
        the ones it created plus the one it is a member of.

        Returns ``(created, member)``; ``member`` is None for a superadmin.
        """
        if user.user_type == "SUPERADMIN":
            return await self._complete_list(db, select(College)), None

        created = await self._complete_list(db, select(College).where(College.created_by_id == user.id))
        if user.college_id is None:
            return created, []
        member = await self._complete_list(
            db,
            select(College).where(
                College.id == user.college_id,
                or_(College.created_by_id.is_(None), College.created_by_id != user.id),
            ),
        )
        return created, member

    async def get(self, db: AsyncSession, college_id: UUID) -> College:
        return await get_or_404(db, College, college_id, "College")

    async def _complete(self, db: AsyncSession, college: Optional[College]) -> CollegeComplete:
        if college is None:
            raise NotFoundError("College not found")
        counts = await college_counts(db, [college.id])
        return CollegeComplete.model_validate(college).model_copy(
            update={"counts": counts[college.id]}
        )

    async def get_complete(self, db: AsyncSession, college_id: UUID) -> CollegeComplete:
        """College with ordered sections, forms with fields, programs and counts."""
        result = await db.execute(
            select(College)
            .where(College.id == college_id)
            .options(*COMPLETE_LOAD_OPTIONS)
            .execution_options(populate_existing=True)
        )
        return await self._complete(db, result.scalar_one_or_none())

    async def get_by_slug(self, db: AsyncSession, slug: str) -> CollegeComplete:
        result = await db.execute(
            select(College).where(College.slug == slug).options(*COMPLETE_LOAD_OPTIONS)
        )
        return await self._complete(db, result.scalar_one_or_none())

    async def purge(self, db: AsyncSession, college_id: UUID) -> None:
        """Delete a college's dependents child-before-parent, then the college row."""
        form_ids = select(FormSection.id).where(FormSection.college_id == college_id)

        await db.execute(
            delete(FormSubmission).where(
                (FormSubmission.college_id == college_id)
                | FormSubmission.form_section_id.in_(form_ids)
            )
        )
        await db.execute(delete(FormField).where(FormField.form_section_id.in_(form_ids)))
        await db.execute(delete(FormSection).where(FormSection.college_id == college_id))
        await db.execute(delete(Section).where(Section.college_id == college_id))
        await db.execute(delete(Program).where(Program.college_id == college_id))
        await db.execute(
            update(User)
            .where(User.college_id == college_id)
            .values(college_id=None)
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(College)
            .where(College.id == college_id)
            .execution_options(synchronize_session=False)
        )

    async def delete(self, db: AsyncSession, college_id: UUID) -> College:
        college = await get_or_404(db, College, college_id, "College")
        await self.purge(db, college_id)
        db.expunge(college)

        logger.info(f"College deleted: {college.name} ({college.slug})")
        return college


college_service = CollegeService()
