"""College page sections, theme and gallery."""

from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.core.logging import logger
from app.models.college import College
from app.models.section import SECTION_TYPES, Section
from app.schemas import SectionCreate, SectionOrder, SectionSpec, SectionUpdate
from app.services.common import get_or_404

FOREIGN_SECTIONS = "Some sections do not belong to this college"


def _section_type(value: Optional[str], default: Optional[str] = None) -> str:
    if not value:
        if default is None:
            raise ValidationError("sectionType is required")
        return default
    section_type = value.upper()
    if section_type not in SECTION_TYPES:
        raise ValidationError(
            f"Invalid section type: {value}", {"allowed": list(SECTION_TYPES)}
        )
    return section_type


class SectionService:
    """Ordered, typed content blocks on a college page."""

    async def list_for_college(self, db: AsyncSession, college_id: UUID) -> List[Section]:
        result = await db.execute(
            select(Section)
            .where(Section.college_id == college_id)
            .order_by(Section.order.asc(), Section.created_at.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def college_sections(
        self, db: AsyncSession, college_id: UUID
    ) -> Tuple[College, List[Section]]:
        college = await get_or_404(db, College, college_id, "College")
        return college, await self.list_for_college(db, college_id)

    async def get(self, db: AsyncSession, section_id: UUID) -> Section:
        return await get_or_404(db, Section, section_id, "Section")

    async def create(self, db: AsyncSession, data: SectionCreate) -> Section:
        if not data.title or not data.college_id:
            raise ValidationError("Title and collegeId are required")
        section_type = _section_type(data.section_type)
        await get_or_404(db, College, data.college_id, "College")

        section = Section(
            title=data.title,
            college_id=data.college_id,
            section_type=section_type,
            order=data.order or 0,
            content=data.content or "",
            settings=data.settings or {},
        )
        db.add(section)
        await db.flush()
        await db.refresh(section)

        logger.info(f"Section created: {section.title} ({section.section_type}) in {section.college_id}")
        return section

    async def update(self, db: AsyncSession, section_id: UUID, data: SectionUpdate) -> Section:
        section = await get_or_404(db, Section, section_id, "Section")
        changes = data.model_dump(exclude_unset=True)
        if changes.get("section_type"):
            changes["section_type"] = _section_type(changes["section_type"])
        for key, value in changes.items():
            if value is not None:
                setattr(section, key, value)
        await db.flush()
        await db.refresh(section)
        return section

    async def delete(self, db: AsyncSession, section_id: UUID) -> Section:
        section = await get_or_404(db, Section, section_id, "Section")
        await db.delete(section)
        await db.flush()
        return section

    async def bulk_create(
        self, db: AsyncSession, college_id: UUID, specs: Optional[List[SectionSpec]]
    ) -> List[Section]:
        """Create all sections or none; an entry without ``order`` takes its index."""
        if specs is None:
            raise ValidationError("sections array is required")
        for index, spec in enumerate(specs):
            if not spec.title:
                raise ValidationError("Every section needs a title", {"index": index})
        await get_or_404(db, College, college_id, "College")

        sections = [
            Section(
                title=spec.title,
                college_id=college_id,
                section_type=_section_type(spec.section_type, default="CUSTOM"),
                order=index if spec.order is None else spec.order,
                content=spec.content or "",
                settings=spec.settings or {},
            )
            for index, spec in enumerate(specs)
        ]
        db.add_all(sections)
        await db.flush()
        for section in sections:
            await db.refresh(section)

        logger.info(f"{len(sections)} sections created in college {college_id}")
        return sections

    async def _owned_count(self, db: AsyncSession, college_id: UUID, ids: Sequence[UUID]) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(Section)
            .where(Section.college_id == college_id, Section.id.in_(ids))
        )
        return result.scalar() or 0

    async def bulk_delete(
        self, db: AsyncSession, college_id: UUID, section_ids: Optional[List[UUID]]
    ) -> int:
        """Delete the given sections; any foreign id rejects the whole batch."""
        if section_ids is None:
            raise ValidationError("sectionIds array is required")
        ids = list(set(section_ids))
        if await self._owned_count(db, college_id, ids) != len(ids):
            raise ValidationError(FOREIGN_SECTIONS)

        result = await db.execute(
            delete(Section)
            .where(Section.college_id == college_id, Section.id.in_(ids))
            .execution_options(synchronize_session="fetch")
        )
        logger.info(f"{result.rowcount} sections deleted from college {college_id}")
        return result.rowcount

    async def reorder(
        self, db: AsyncSession, college_id: UUID, orders: Optional[List[SectionOrder]]
    ) -> List[Section]:
        """Apply new ``order`` values and return the college's sections sorted by them."""
        if orders is None:
            raise ValidationError("sectionOrders array is required")
        await get_or_404(db, College, college_id, "College")

        ids = list({item.id for item in orders})
        if await self._owned_count(db, college_id, ids) != len(ids):
            raise ValidationError(FOREIGN_SECTIONS)

        await self._apply_orders(db, orders)
        return await self.list_for_college(db, college_id)

    async def reorder_any(self, db: AsyncSession, orders: List[SectionOrder]) -> List[Section]:
        """Reorder by id alone; every id must belong to the same college."""
        if not orders:
            raise ValidationError("Invalid payload")
        ids = list({item.id for item in orders})
        result = await db.execute(
            select(Section.id, Section.college_id).where(Section.id.in_(ids))
        )
        rows = result.all()
        if len(rows) != len(ids):
            raise ValidationError("Some sections were not found")
        college_ids = {row.college_id for row in rows}
        if len(college_ids) != 1:
            raise ValidationError("Sections must all belong to one college")

        await self._apply_orders(db, orders)
        return await self.list_for_college(db, college_ids.pop())

    async def _apply_orders(self, db: AsyncSession, orders: List[SectionOrder]) -> None:
        for item in orders:
            await db.execute(
                update(Section)
                .where(Section.id == item.id)
                .values(order=item.order)
                .execution_options(synchronize_session=False)
            )

    # ─── Theme & gallery ─────────────────────────────────────────────────

    async def get_theme(self, db: AsyncSession, college_id: UUID) -> Dict[str, Any]:
        college = await get_or_404(db, College, college_id, "College")
        return college.theme or {}

    async def update_theme(
        self, db: AsyncSession, college_id: UUID, theme: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        if theme is None:
            raise ValidationError("Theme is required")
        college = await get_or_404(db, College, college_id, "College")
        college.theme = theme
        await db.flush()
        await db.refresh(college)
        return college.theme

    async def update_gallery(
        self, db: AsyncSession, college_id: UUID, images: Optional[List[Any]]
    ) -> College:
        if images is None:
            raise ValidationError("galleryImages array is required")
        college = await get_or_404(db, College, college_id, "College")
        college.gallery_images = images
        await db.flush()
        await db.refresh(college)
        return college


section_service = SectionService()
