"""Read-only endpoints consumed by the mobile app."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas import IntakeCatalogEntry
from app.services.faq_service import faq_service

router = APIRouter()


@router.get("/forms/fqa", response_model=List[IntakeCatalogEntry])
async def list_faq_intake_catalog(db: AsyncSession = Depends(get_db)):
    """All colleges with their FAQ intake forms and fields (public)."""
    return await faq_service.intake_catalog(db)
