"""University, user, audit-log and upload schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.base import CamelModel, CollegeBrief, Pagination


# ─── University ──────────────────────────────────────────────────────────────

class UniversityCreate(CamelModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    logo_url: Optional[str] = None
    social_media: Optional[Dict[str, Any]] = None
    description: Optional[str] = None
    news_items: Optional[List[Any]] = None
    content: Optional[Dict[str, Any]] = None


class UniversityUpdate(UniversityCreate):
    pass


class UniversityResponse(CamelModel):
    id: UUID
    name: str
    slug: str
    logo_url: Optional[str] = None
    social_media: Optional[Dict[str, Any]] = None
    description: Optional[str] = None
    news_items: Optional[List[Any]] = None
    content: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class UniversityDetail(UniversityResponse):
    colleges: List[CollegeBrief] = []


class UniversityDelete(CamelModel):
    confirmation: Optional[str] = None


class UniversityUpdateResponse(BaseModel):
    message: str
    university: UniversityResponse


class UniversityDeleteResponse(CamelModel):
    message: str
    deleted_colleges: int


# ─── Users ───────────────────────────────────────────────────────────────────

class UserResponse(CamelModel):
    id: UUID
    clerk_id: str
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    onboarded: bool = False
    user_type: str
    college_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class UserDetail(UserResponse):
    college: Optional[CollegeBrief] = None
    colleges_created: List[CollegeBrief] = []


class UserUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None
    onboarded: Optional[bool] = None


class RoleUpdate(CamelModel):
    role: Optional[str] = None


class MoveToCollege(CamelModel):
    college_id: Optional[UUID] = None


class IdentityWebhookEvent(BaseModel):
    type: str
    data: Dict[str, Any] = {}


class WebhookResponse(BaseModel):
    status: str


class SuperAdminListResponse(CamelModel):
    super_admins: List[UserDetail]
    count: int


# ─── Audit logs ──────────────────────────────────────────────────────────────

class AuditLogResponse(CamelModel):
    id: UUID
    action: str
    entity: str
    entity_id: Optional[str] = None
    user_id: Optional[UUID] = None
    meta: Optional[Any] = Field(default=None, serialization_alias="metadata")
    created_at: datetime


class AuditLogListResponse(BaseModel):
    logs: List[AuditLogResponse]
    pagination: Pagination


# ─── Uploads ─────────────────────────────────────────────────────────────────

class UploadResponse(CamelModel):
    url: str
    path: str
    file_name: str


class GalleryUploadResponse(BaseModel):
    message: str
    files: List[UploadResponse]
