"""College model."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


class College(Base):
    __tablename__ = "colleges"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)

    theme: Mapped[dict] = mapped_column(JSON, default=dict)
    gallery_images: Mapped[list] = mapped_column(JSON, default=list)
    projects: Mapped[list] = mapped_column(JSON, default=list)
    social_media: Mapped[dict] = mapped_column(JSON, nullable=True)
    leaders: Mapped[list] = mapped_column(JSON, nullable=True)

    # Embedded FAQ document, rewritten whole on every change.
    faq: Mapped[dict] = mapped_column(JSON, nullable=True)
    faq_version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    university_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("universities.id", ondelete="SET NULL"), nullable=True
    )
    created_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL", use_alter=True, name="fk_colleges_created_by_id"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    university = relationship("University", back_populates="colleges")
    created_by = relationship(
        "User", back_populates="colleges_created", foreign_keys=[created_by_id]
    )
    users = relationship("User", back_populates="college", foreign_keys="User.college_id")
    sections = relationship("Section", back_populates="college", order_by="Section.order")
    forms = relationship("FormSection", back_populates="college")
    submissions = relationship("FormSubmission", back_populates="college")
    programs = relationship("Program", back_populates="college")
