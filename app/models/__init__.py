"""SQLAlchemy models package."""

from app.models.user import User
from app.models.university import University
from app.models.college import College
from app.models.section import Section
from app.models.program import Program
from app.models.form_section import FormSection
from app.models.form_field import FormField
from app.models.form_submission import FormSubmission
from app.models.audit_log import AuditLog

__all__ = [
    "User",
    "University",
    "College",
    "Section",
    "Program",
    "FormSection",
    "FormField",
    "FormSubmission",
    "AuditLog",
]
