"""Form section, form field and submission schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from app.schemas.base import CamelModel, CollegeBrief, Pagination


# ─── Form sections ───────────────────────────────────────────────────────────

class FormSectionCreate(CamelModel):
    title: Optional[str] = None
    college_id: Optional[UUID] = None
    description: Optional[str] = None
    active: Optional[bool] = None


class FormSectionUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    active: Optional[bool] = None


class FormSectionResponse(CamelModel):
    id: UUID
    college_id: Optional[UUID] = None
    title: str
    description: Optional[str] = ""
    active: bool
    created_at: datetime
    updated_at: datetime


# ─── Form fields ─────────────────────────────────────────────────────────────

class FormFieldCreate(CamelModel):
    label: Optional[str] = None
    type: Optional[str] = None
    form_section_id: Optional[UUID] = None
    is_required: Optional[bool] = None
    options: Optional[List[str]] = None
    validation: Optional[Dict[str, Any]] = None
    order: Optional[int] = None


class FormFieldUpdate(CamelModel):
    label: Optional[str] = None
    type: Optional[str] = None
    is_required: Optional[bool] = None
    options: Optional[List[str]] = None
    validation: Optional[Dict[str, Any]] = None
    order: Optional[int] = None


class FormFieldResponse(CamelModel):
    id: UUID
    form_section_id: UUID
    label: str
    type: str
    is_required: bool
    options: Optional[List[str]] = None
    validation: Optional[Dict[str, Any]] = None
    order: int
    created_at: datetime
    updated_at: datetime


class FormSectionWithFields(FormSectionResponse):
    fields: List[FormFieldResponse] = []


class FormSectionDetail(FormSectionWithFields):
    submission_count: int = 0


class FormSectionWithCollege(FormSectionWithFields):
    college: Optional[CollegeBrief] = None


class FormSectionSummary(FormSectionResponse):
    college: Optional[CollegeBrief] = None
    field_count: int = 0
    submission_count: int = 0


class FormListResponse(BaseModel):
    forms: List[FormSectionSummary]
    pagination: Pagination


# ─── Submissions ─────────────────────────────────────────────────────────────

class SubmissionCreate(CamelModel):
    data: Optional[Dict[str, Any]] = None
    college_id: Optional[UUID] = None


class SubmissionResponse(CamelModel):
    id: UUID
    form_section_id: UUID
    college_id: UUID
    data: Dict[str, Any]
    submitted_at: datetime


class SubmissionDetail(SubmissionResponse):
    form_section: FormSectionWithFields
    college: CollegeBrief


class SubmissionListResponse(BaseModel):
    submissions: List[SubmissionDetail]
    pagination: Pagination


class FormToggleResponse(BaseModel):
    message: str
    active: bool
