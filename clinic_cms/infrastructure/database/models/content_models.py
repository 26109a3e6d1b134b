"""SQLAlchemy ORM models for content records and their items."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from clinic_cms.infrastructure.database.base import Base


def _generate_uuid() -> str:
    return str(uuid.uuid4())


class ContentRecordModel(Base):
    """ORM model — maps to the 'content_records' table.

    ``media`` holds the top-level attachments as ``{slot: {url, public_id,
    resource_type} | null}``.
    """

    __tablename__ = "content_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_generate_uuid)
    kind: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    fields: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    media: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_content_records_kind_created", "kind", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ContentRecordModel(id={self.id}, kind='{self.kind}')>"


class ContentItemModel(Base):
    """ORM model — maps to the 'content_items' table (sections, cards, ...)."""

    __tablename__ = "content_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_generate_uuid)
    record_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("content_records.id", ondelete="CASCADE"),
        nullable=False,
    )
    collection: Mapped[str] = mapped_column(String(100), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    fields: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    media: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_content_items_record_order", "record_id", "collection", "sort_order"),
    )

    def __repr__(self) -> str:
        return (
            f"<ContentItemModel(id={self.id}, record={self.record_id}, "
            f"collection='{self.collection}')>"
        )
