"""Health endpoints: database reachability plus platform statistics."""

import platform
import time
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.database import get_db
from app.core.logging import logger
from app.models.college import College
from app.models.form_section import FormSection
from app.models.form_submission import FormSubmission
from app.models.user import User

router = APIRouter()

STARTED_AT = time.monotonic()


def _environment() -> str:
    return "production" if settings.PRODUCTION else "development"


def _elapsed_ms(start: float) -> str:
    return f"{int((time.perf_counter() - start) * 1000)}ms"


def _unhealthy(start: float) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={
            "status": "unhealthy",
            "timestamp": datetime.utcnow().isoformat(),
            "responseTime": _elapsed_ms(start),
            "database": {"status": "disconnected", "error": "Database unreachable"},
            "version": settings.VERSION,
            "environment": _environment(),
        },
    )


async def _count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar() or 0


async def _grouped(db: AsyncSession, column) -> dict:
    result = await db.execute(select(column, func.count()).group_by(column))
    by_type = {str(key): count for key, count in result.all()}
    return {"byType": by_type, "total": sum(by_type.values())}


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Database ping and row counts; 503 when the database is unreachable."""
    start = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
        stats = {
            "users": await _count(db, User),
            "colleges": await _count(db, College),
            "forms": await _count(db, FormSection),
            "submissions": await _count(db, FormSubmission),
        }
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return _unhealthy(start)

    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "responseTime": _elapsed_ms(start),
        "database": {"status": "connected", "connection": "ok"},
        "stats": stats,
        "version": settings.VERSION,
        "environment": _environment(),
    }


@router.get("/health/detailed")
async def detailed_health_check(db: AsyncSession = Depends(get_db)):
    """Grouped statistics, 30-day activity and the latest submissions."""
    start = time.perf_counter()
    since = datetime.utcnow() - timedelta(days=30)
    try:
        db_start = time.perf_counter()
        await db.execute(text("SELECT 1"))
        db_time = _elapsed_ms(db_start)

        users = await _grouped(db, User.user_type)
        colleges = await _grouped(db, College.type)
        forms_recent = await db.execute(
            select(func.count()).select_from(FormSection).where(FormSection.created_at >= since)
        )
        submissions_recent = await db.execute(
            select(func.count())
            .select_from(FormSubmission)
            .where(FormSubmission.submitted_at >= since)
        )
        recent = await db.execute(
            select(FormSubmission)
            .options(
                selectinload(FormSubmission.college),
                selectinload(FormSubmission.form_section),
            )
            .order_by(FormSubmission.submitted_at.desc(), FormSubmission.id.desc())
            .limit(10)
        )
        recent_activity = [
            {
                "id": str(s.id),
                "college": s.college.name if s.college else None,
                "form": s.form_section.title if s.form_section else None,
                "submittedAt": s.submitted_at.isoformat(),
            }
            for s in recent.scalars().all()
        ]
    except SQLAlchemyError as e:
        logger.error(f"Detailed health check failed: {e}")
        return _unhealthy(start)

    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "responseTime": _elapsed_ms(start),
        "database": {"status": "connected", "responseTime": db_time},
        "statistics": {
            "users": users,
            "colleges": colleges,
            "forms": {"createdLast30Days": forms_recent.scalar() or 0},
            "submissions": {"submittedLast30Days": submissions_recent.scalar() or 0},
        },
        "recentActivity": recent_activity,
        "system": {
            "version": settings.VERSION,
            "environment": _environment(),
            "pythonVersion": platform.python_version(),
            "uptime": round(time.monotonic() - STARTED_AT, 1),
        },
    }
