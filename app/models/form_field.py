"""Form field model."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

FIELD_TYPES = (
    "TEXT",
    "TEXTAREA",
    "EMAIL",
    "NUMBER",
    "SELECT",
    "CHECKBOX",
    "RADIO",
    "DATE",
    "FILE",
)


class FormField(Base):
    __tablename__ = "form_fields"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    form_section_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("form_sections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    label: Mapped[str] = mapped_column(String(500), nullable=False)
    type: Mapped[str] = mapped_column(Enum(*FIELD_TYPES, name="form_field_type"), nullable=False)
    is_required: Mapped[bool] = mapped_column(Boolean, default=False)
    options: Mapped[list] = mapped_column(JSON, default=list)
    # Structural rules (minLength, maxLength, ...) and tags such as FAQ / fqa
    validation: Mapped[dict] = mapped_column(JSON(none_as_null=True), nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    form_section = relationship("FormSection", back_populates="fields")
