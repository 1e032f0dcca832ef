"""FAQ document schemas.

``FAQData`` is the JSON document stored on ``colleges.faq``; the same model
parses what is read back and produces what is written.
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from app.schemas.base import CamelModel
from app.schemas.forms import FormSectionWithFields

DEFAULT_FAQ_TITLE = "Frequently Asked Questions"


class FAQItem(CamelModel):
    id: str
    question: str
    answer: str
    order: int = 0
    created_at: datetime
    updated_at: datetime


class FAQData(CamelModel):
    title: str = DEFAULT_FAQ_TITLE
    description: str = ""
    last_updated: datetime
    items: List[FAQItem] = []


class FAQItemIn(CamelModel):
    id: Optional[str] = None
    question: str
    answer: str
    order: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FAQReplace(CamelModel):
    items: Optional[List[FAQItemIn]] = None
    title: Optional[str] = None
    description: Optional[str] = None


class FAQItemCreate(CamelModel):
    question: Optional[str] = None
    answer: Optional[str] = None
    order: Optional[int] = None


class FAQItemUpdate(CamelModel):
    question: Optional[str] = None
    answer: Optional[str] = None
    order: Optional[int] = None


class FAQImportItem(CamelModel):
    question: Optional[str] = None
    answer: Optional[str] = None


class FAQImport(CamelModel):
    items: Optional[List[FAQImportItem]] = None


class FAQGenerateForm(CamelModel):
    college_name: Optional[str] = None
    questions: Optional[List[str]] = None


class FAQGenerateFormResponse(BaseModel):
    form: FormSectionWithFields
    message: str


class SubmissionDecision(CamelModel):
    action: Optional[str] = None
    answers: Optional[Dict[str, str]] = None


class SubmissionDecisionResponse(BaseModel):
    message: str
    faq: Optional[FAQData] = None


class IntakeCatalogEntry(CamelModel):
    id: UUID
    name: str
    slug: str
    forms: List[FormSectionWithFields] = []
