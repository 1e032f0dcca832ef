"""Program endpoints nested under a college."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging import logger
from app.dependencies import require_admin
from app.models.user import User
from app.schemas import MessageResponse, ProgramCreate, ProgramResponse, ProgramUpdate
from app.services.audit_service import audited
from app.services.program_service import program_service

router = APIRouter()


@router.get("/programs", response_model=List[ProgramResponse])
async def list_all_programs(db: AsyncSession = Depends(get_db)):
    """All programs across colleges (public)."""
    return await program_service.list_all(db)


@router.get("/{college_id}/programs", response_model=List[ProgramResponse])
async def list_programs(college_id: UUID, db: AsyncSession = Depends(get_db)):
    """Programs of one college (public)."""
    return await program_service.list_for_college(db, college_id)


@router.get("/{college_id}/programs/slug/{slug}", response_model=ProgramResponse)
async def get_program_by_slug(college_id: UUID, slug: str, db: AsyncSession = Depends(get_db)):
    """One program of a college, by slug (public)."""
    return await program_service.get_by_slug(db, college_id, slug)


@router.post("/{college_id}/programs", response_model=ProgramResponse, status_code=201)
@audited("CREATE_PROGRAM", "Program")
async def create_program(
    college_id: UUID,
    data: ProgramCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create a program under a college (admin+ only)."""
    program = await program_service.create(db, college_id, data)
    logger.info(f"Program created by {current_user.email}: {program.name}")
    return program


@router.put("/{college_id}/programs/{program_id}", response_model=ProgramResponse)
@audited("UPDATE_PROGRAM", "Program", entity_id_param="program_id")
async def update_program(
    college_id: UUID,
    program_id: UUID,
    data: ProgramUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Update a program after confirming it belongs to the college (admin+ only)."""
    return await program_service.update(db, college_id, program_id, data)


@router.delete("/{college_id}/programs/{program_id}", response_model=MessageResponse)
@audited("DELETE_PROGRAM", "Program", entity_id_param="program_id")
async def delete_program(
    college_id: UUID,
    program_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a program after confirming it belongs to the college (admin+ only)."""
    program = await program_service.delete(db, college_id, program_id)
    logger.info(f"Program deleted by {current_user.email}: {program.name}")
    return {"message": "Program deleted successfully"}
