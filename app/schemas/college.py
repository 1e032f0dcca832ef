"""College, page section, theme and program schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from app.schemas.base import CamelModel, CollegeBrief
from app.schemas.forms import FormSectionWithFields


# ─── College ─────────────────────────────────────────────────────────────────

class CollegeCreate(CamelModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    type: Optional[str] = None
    theme: Optional[Dict[str, Any]] = None
    gallery_images: Optional[List[Any]] = None
    projects: Optional[List[Any]] = None
    created_by_id: Optional[UUID] = None
    university_id: Optional[UUID] = None


class CollegeUpdate(CamelModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    type: Optional[str] = None
    theme: Optional[Dict[str, Any]] = None
    gallery_images: Optional[List[Any]] = None
    projects: Optional[List[Any]] = None
    social_media: Optional[Dict[str, Any]] = None
    leaders: Optional[List[Any]] = None
    university_id: Optional[UUID] = None


class CollegeResponse(CamelModel):
    id: UUID
    name: str
    slug: str
    type: str
    theme: Optional[Dict[str, Any]] = None
    gallery_images: Optional[List[Any]] = None
    projects: Optional[List[Any]] = None
    social_media: Optional[Dict[str, Any]] = None
    leaders: Optional[List[Any]] = None
    faq: Optional[Any] = None
    university_id: Optional[UUID] = None
    created_by_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class CollegeCounts(CamelModel):
    users: int = 0
    sections: int = 0
    forms: int = 0
    submissions: int = 0


class CollegeListItem(CollegeResponse):
    counts: CollegeCounts = CollegeCounts()


# ─── Sections ────────────────────────────────────────────────────────────────

class SectionCreate(CamelModel):
    title: Optional[str] = None
    college_id: Optional[UUID] = None
    section_type: Optional[str] = None
    order: Optional[int] = None
    content: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None


class SectionSpec(CamelModel):
    title: Optional[str] = None
    section_type: Optional[str] = None
    order: Optional[int] = None
    content: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None


class SectionUpdate(CamelModel):
    title: Optional[str] = None
    section_type: Optional[str] = None
    order: Optional[int] = None
    content: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None


class SectionOrder(CamelModel):
    id: UUID
    order: int


class BulkSectionCreate(CamelModel):
    sections: Optional[List[SectionSpec]] = None


class BulkSectionDelete(CamelModel):
    section_ids: Optional[List[UUID]] = None


class SectionReorder(CamelModel):
    section_orders: Optional[List[SectionOrder]] = None


class SectionResponse(CamelModel):
    id: UUID
    college_id: UUID
    title: str
    content: Optional[str] = ""
    order: int
    section_type: str
    settings: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class CollegeSectionsResponse(BaseModel):
    college: CollegeBrief
    sections: List[SectionResponse]
    count: int


class SectionBulkCreateResponse(BaseModel):
    message: str
    sections: List[SectionResponse]


class SectionBulkDeleteResponse(CamelModel):
    message: str
    deleted_count: int


class SectionReorderResponse(BaseModel):
    message: str
    sections: List[SectionResponse]


class ThemeUpdate(CamelModel):
    theme: Optional[Dict[str, Any]] = None


class ThemeResponse(CamelModel):
    theme: Dict[str, Any]


class GalleryUpdate(CamelModel):
    gallery_images: Optional[List[Any]] = None


# ─── Programs ────────────────────────────────────────────────────────────────

class ProgramCreate(CamelModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[List[Any]] = None


class ProgramUpdate(ProgramCreate):
    pass


class ProgramResponse(CamelModel):
    id: UUID
    college_id: UUID
    name: str
    slug: str
    description: Optional[List[Any]] = None


class CollegeComplete(CollegeResponse):
    sections: List[SectionResponse] = []
    forms: List[FormSectionWithFields] = []
    programs: List[ProgramResponse] = []
    counts: Optional[CollegeCounts] = None


class DisplayCollegesRequest(CamelModel):
    user_id: Optional[UUID] = None


class CollegeGroup(BaseModel):
    count: int
    colleges: List[CollegeComplete]


class DisplayCollegesData(CamelModel):
    created_colleges: CollegeGroup
    member_colleges: Optional[CollegeGroup] = None
    total_count: int


class DisplayCollegesResponse(BaseModel):
    success: bool = True
    data: DisplayCollegesData
