"""ORM models for the content tables."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class ContentModel(Base):
    """Columns shared by every content table."""

    __abstract__ = True

    # Field names exposed in API payloads, in output order
    FIELDS = ()

    id = Column(String(36), primary_key=True, default=_new_id)
    is_active = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    def to_dict(self) -> dict:
        data = {"id": self.id}
        for field in self.FIELDS:
            data[field] = getattr(self, _attribute(field))
        data["is_active"] = self.is_active
        data["display_order"] = self.display_order
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        data["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return data


class ContentSection(ContentModel):
    __tablename__ = "content_sections"

    FIELDS = ("key", "title", "content", "metadata", "image_url")

    key = Column(String(100), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    image_url = Column(String(1024), nullable=True)


class ContentItem(ContentModel):
    __tablename__ = "content_items"

    FIELDS = ("section_id", "title", "description", "image_url", "link_url", "metadata")

    section_id = Column(
        String(36),
        ForeignKey("content_sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(1024), nullable=True)
    link_url = Column(String(1024), nullable=True)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)


class Testimonial(ContentModel):
    __tablename__ = "testimonials"

    FIELDS = ("name", "role", "company", "content", "image_url", "rating")

    name = Column(String(255), nullable=False)
    role = Column(String(255), nullable=True)
    company = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    image_url = Column(String(1024), nullable=True)
    rating = Column(Integer, nullable=True)


class FAQ(ContentModel):
    __tablename__ = "faqs"

    FIELDS = ("question", "answer", "category")

    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    category = Column(String(100), nullable=True)


def _attribute(field: str) -> str:
    """Map a payload field name to its ORM attribute name."""
    return "metadata_" if field == "metadata" else field
