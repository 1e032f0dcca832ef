"""Programs offered by a college."""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.college import College
from app.models.program import Program
from app.schemas import ProgramCreate, ProgramUpdate
from app.services.common import get_or_404


class ProgramService:
    """Program mutations always confirm the program belongs to the college first."""

    async def list_for_college(self, db: AsyncSession, college_id: UUID) -> List[Program]:
        result = await db.execute(
            select(Program).where(Program.college_id == college_id).order_by(Program.name)
        )
        return list(result.scalars().all())

    async def list_all(self, db: AsyncSession) -> List[Program]:
        result = await db.execute(select(Program).order_by(Program.name))
        return list(result.scalars().all())

    async def get_owned(self, db: AsyncSession, college_id: UUID, program_id: UUID) -> Program:
        result = await db.execute(
            select(Program).where(Program.id == program_id, Program.college_id == college_id)
        )
        program = result.scalar_one_or_none()
        if program is None:
            raise NotFoundError("Program not found or does not belong to this college")
        return program

    async def get_by_slug(self, db: AsyncSession, college_id: UUID, slug: str) -> Program:
        result = await db.execute(
            select(Program).where(Program.college_id == college_id, Program.slug == slug)
        )
        program = result.scalars().first()
        if program is None:
            raise NotFoundError("Program not found")
        return program

    async def create(self, db: AsyncSession, college_id: UUID, data: ProgramCreate) -> Program:
        if not data.name or not data.slug:
            raise ValidationError("Name and slug are required")
        await get_or_404(db, College, college_id, "College")

        program = Program(
            college_id=college_id,
            name=data.name,
            slug=data.slug,
            description=data.description or [],
        )
        db.add(program)
        await db.flush()
        await db.refresh(program)
        return program

    async def update(
        self, db: AsyncSession, college_id: UUID, program_id: UUID, data: ProgramUpdate
    ) -> Program:
        program = await self.get_owned(db, college_id, program_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(program, key, value)
        await db.flush()
        await db.refresh(program)
        return program

    async def delete(self, db: AsyncSession, college_id: UUID, program_id: UUID) -> Program:
        program = await self.get_owned(db, college_id, program_id)
        await db.delete(program)
        await db.flush()
        return program


program_service = ProgramService()
