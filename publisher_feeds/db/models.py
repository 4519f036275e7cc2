"""SQLAlchemy models for ingested publisher articles."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    DateTime,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import Uuid


class Base(DeclarativeBase):
    """Base class for ORM models."""


class TimestampMixin:
    """Adds created_at/updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class PublisherUpdate(TimestampMixin, Base):
    """One article ingested from a publisher feed; ``link`` is the dedup key."""

    __tablename__ = "publisher_updates"
    __table_args__ = (
        UniqueConstraint("link", name="uq_publisher_updates_link"),
        Index("ix_publisher_updates_published_at", "published_at"),
        Index("ix_publisher_updates_slug_published", "publisher_slug", "published_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    publisher: Mapped[str] = mapped_column(String(128), nullable=False)
    publisher_slug: Mapped[str] = mapped_column(String(64), nullable=False)
    source_feed_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str | None] = mapped_column(String(500))
    link: Mapped[str] = mapped_column(String(2048), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(2048))
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
