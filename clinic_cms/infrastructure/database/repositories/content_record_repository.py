"""Concrete repository implementation for content records backed by SQLAlchemy."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_cms.application.interfaces import ContentRecordRepository
from clinic_cms.domain.entities import ChildItem, MediaAttachment, ContentRecord
from clinic_cms.infrastructure.database.models import ContentItemModel, ContentRecordModel


def _dump_media(media: dict[str, MediaAttachment | None]) -> dict[str, Any]:
    return {slot: (a.to_dict() if a is not None else None) for slot, a in media.items()}


def _load_media(raw: dict[str, Any] | None) -> dict[str, MediaAttachment | None]:
    return {slot: MediaAttachment.from_dict(value) for slot, value in (raw or {}).items()}


class SQLAlchemyContentRecordRepository(ContentRecordRepository):
    """Implements the ContentRecordRepository port using SQLAlchemy async sessions.

    Reads made outside ``transaction()`` end the implicit transaction they
    begin, so no connection is held while the caller talks to other services.
    """

    def __init__(self, session: AsyncSession):
        self._session = session
        self._writing = False

    async def _end_read(self) -> None:
        if not self._writing and self._session.in_transaction():
            await self._session.commit()

    def _to_item(self, model: ContentItemModel) -> ChildItem:
        """Map ORM model → domain child item."""
        return ChildItem(
            id=model.id,
            collection=model.collection,
            sort_order=model.sort_order,
            fields=dict(model.fields or {}),
            media=_load_media(model.media),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_entity(
        self, model: ContentRecordModel, items: list[ContentItemModel]
    ) -> ContentRecord:
        """Map ORM model + its items → domain entity."""
        children: dict[str, list[ChildItem]] = {}
        for item in items:
            children.setdefault(item.collection, []).append(self._to_item(item))
        return ContentRecord(
            id=model.id,
            kind=model.kind,
            fields=dict(model.fields or {}),
            media=_load_media(model.media),
            children=children,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def _items_for(self, record_ids: list[str]) -> dict[str, list[ContentItemModel]]:
        grouped: dict[str, list[ContentItemModel]] = {rid: [] for rid in record_ids}
        if not record_ids:
            return grouped
        stmt = (
            select(ContentItemModel)
            .where(ContentItemModel.record_id.in_(record_ids))
            .order_by(ContentItemModel.sort_order.asc(), ContentItemModel.created_at.asc())
        )
        result = await self._session.execute(stmt)
        for item in result.scalars().all():
            grouped[item.record_id].append(item)
        return grouped

    async def list_by_kind(self, kind: str) -> list[ContentRecord]:
        stmt = (
            select(ContentRecordModel)
            .where(ContentRecordModel.kind == kind)
            .order_by(ContentRecordModel.created_at.asc(), ContentRecordModel.id.asc())
        )
        result = await self._session.execute(stmt)
        models = list(result.scalars().all())
        items = await self._items_for([m.id for m in models])
        await self._end_read()
        return [self._to_entity(m, items[m.id]) for m in models]

    async def get_by_id(self, record_id: str) -> ContentRecord | None:
        model = await self._session.get(ContentRecordModel, record_id)
        if model is None:
            await self._end_read()
            return None
        items = await self._items_for([model.id])
        await self._end_read()
        return self._to_entity(model, items[model.id])

    async def create(self, record: ContentRecord) -> ContentRecord:
        model = ContentRecordModel(
            kind=record.kind,
            fields=dict(record.fields),
            media=_dump_media(record.media),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
        if record.id is not None:
            model.id = record.id
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model, [])

    async def update(self, record: ContentRecord) -> ContentRecord:
        model = await self._session.get(ContentRecordModel, record.id)
        if model is None:
            raise ValueError(f"ContentRecord {record.id} not found in database")
        model.fields = dict(record.fields)
        model.media = _dump_media(record.media)
        model.updated_at = record.updated_at
        await self._session.flush()
        return record

    async def delete_many(self, record_ids: list[str]) -> int:
        if not record_ids:
            return 0
        # Children first; the FK cascade is not enforced on every backend.
        await self._session.execute(
            delete(ContentItemModel).where(ContentItemModel.record_id.in_(record_ids))
        )
        result = await self._session.execute(
            delete(ContentRecordModel).where(ContentRecordModel.id.in_(record_ids))
        )
        await self._session.flush()
        return result.rowcount or 0

    async def delete_children(self, child_ids: list[str]) -> int:
        if not child_ids:
            return 0
        result = await self._session.execute(
            delete(ContentItemModel).where(ContentItemModel.id.in_(child_ids))
        )
        await self._session.flush()
        return result.rowcount or 0

    async def save_child(self, record_id: str, item: ChildItem) -> ChildItem:
        now = datetime.now(timezone.utc)
        if item.id is not None:
            model = await self._session.get(ContentItemModel, item.id)
            if model is None or model.record_id != record_id:
                raise ValueError(f"ContentItem {item.id} not found in record {record_id}")
            model.collection = item.collection
            model.sort_order = item.sort_order
            model.fields = dict(item.fields)
            model.media = _dump_media(item.media)
            model.updated_at = now
        else:
            model = ContentItemModel(
                record_id=record_id,
                collection=item.collection,
                sort_order=item.sort_order,
                fields=dict(item.fields),
                media=_dump_media(item.media),
                created_at=now,
                updated_at=now,
            )
            self._session.add(model)
        await self._session.flush()
        return self._to_item(model)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Open a fresh transaction; commits on normal exit, rolls back on error."""
        await self._end_read()
        self._writing = True
        try:
            async with self._session.begin():
                yield
        finally:
            self._writing = False
