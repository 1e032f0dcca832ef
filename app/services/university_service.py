"""The main university tenant."""

from typing import Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.logging import logger
from app.models.college import College
from app.models.university import University
from app.models.user import User
from app.schemas import UniversityCreate, UniversityUpdate
from app.services.college_service import college_service


def delete_confirmation_phrase() -> str:
    return f"DELETE_UNIVERSITY_{settings.UNIVERSITY_SLUG.upper()}"


class UniversityService:
    """Single-tenant access: every operation targets ``settings.UNIVERSITY_SLUG``."""

    async def _main(self, db: AsyncSession, with_colleges: bool = False) -> Optional[University]:
        query = select(University).where(University.slug == settings.UNIVERSITY_SLUG)
        if with_colleges:
            query = query.options(selectinload(University.colleges))
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_main(self, db: AsyncSession) -> University:
        university = await self._main(db, with_colleges=True)
        if university is None:
            raise NotFoundError("University not found")
        return university

    async def create(self, db: AsyncSession, data: UniversityCreate) -> University:
        if not data.name or not data.slug:
            raise ValidationError("Name and slug are required")
        existing = await db.execute(select(University.id).where(University.slug == data.slug))
        if existing.first() is not None:
            raise ConflictError("University slug already exists")

        university = University(
            name=data.name,
            slug=data.slug,
            logo_url=data.logo_url,
            social_media=data.social_media,
            description=data.description,
            news_items=data.news_items,
            content=data.content or {},
        )
        db.add(university)
        await db.flush()
        await db.refresh(university)

        logger.info(f"University created: {university.name} ({university.slug})")
        return university

    async def edit(self, db: AsyncSession, data: UniversityUpdate) -> University:
        """Update the main university. The slug is kept so the tenant stays addressable."""
        if not data.name:
            raise ValidationError("Name is required")
        university = await self._main(db)
        if university is None:
            raise NotFoundError("University not found")

        for key, value in data.model_dump(exclude_unset=True, exclude={"slug"}).items():
            setattr(university, key, value)
        if university.content is None:
            university.content = {}
        await db.flush()
        await db.refresh(university)
        return university

    async def delete(
        self, db: AsyncSession, confirmation: Optional[str], actor: User
    ) -> Tuple[University, int]:
        """Delete the university, its colleges and their members in one transaction.

        The acting user is detached from its college instead of deleted.
        """
        if confirmation != delete_confirmation_phrase():
            raise ValidationError(
                "Final confirmation text does not match",
                {"expected": delete_confirmation_phrase()},
            )
        university = await self._main(db)
        if university is None:
            raise NotFoundError("University not found")

        result = await db.execute(
            select(College.id).where(College.university_id == university.id)
        )
        college_ids = list(result.scalars().all())

        async with db.begin_nested():
            for college_id in college_ids:
                await db.execute(
                    delete(User)
                    .where(User.college_id == college_id, User.id != actor.id)
                    .execution_options(synchronize_session=False)
                )
                await college_service.purge(db, college_id)
            await db.execute(
                delete(University)
                .where(University.id == university.id)
                .execution_options(synchronize_session=False)
            )
        db.expunge(university)

        logger.info(
            f"University {university.slug} deleted with {len(college_ids)} colleges by {actor.email}"
        )
        return university, len(college_ids)


university_service = UniversityService()
