from fastapi import APIRouter

from app.api.v1.endpoints import (
    colleges,
    faq,
    forms,
    logs,
    mobile,
    programs,
    sections,
    universities,
    upload,
    users,
    webhooks,
)

api_router = APIRouter()

# Literal /collage/* routes must be registered ahead of /collage/{college_id}
api_router.include_router(programs.router, prefix="/collage", tags=["Programs"])
api_router.include_router(faq.router, prefix="/collage", tags=["FAQ"])
api_router.include_router(sections.router, tags=["Sections"])
api_router.include_router(colleges.router, prefix="/collage", tags=["Colleges"])
api_router.include_router(forms.router, prefix="/forms", tags=["Forms"])
api_router.include_router(universities.router, prefix="/uni", tags=["University"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(webhooks.router, prefix="/webhook", tags=["Webhooks"])
api_router.include_router(logs.router, prefix="/logs", tags=["Audit Logs"])
api_router.include_router(upload.router, prefix="/upload", tags=["Upload"])
api_router.include_router(mobile.router, prefix="/mobile", tags=["Mobile"])
