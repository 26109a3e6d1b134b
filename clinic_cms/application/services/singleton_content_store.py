"""Singleton content store — one live record per content kind, with hosted media.

Every record of the kind is loaded on write; the oldest is canonical and any
others are collapsed onto it inside the same transaction.
"""

import logging

from clinic_cms.application.services.content_store_base import ContentStoreBase
from clinic_cms.domain.entities import ContentRecord, DesiredState
from clinic_cms.domain.exceptions import (
    ContentPersistenceError,
    ContentValidationError,
    EntityNotFoundError,
)

logger = logging.getLogger(__name__)


class SingletonContentStore(ContentStoreBase):
    """Keeps exactly one record of ``kind`` consistent with its hosted media.

    Concurrent writers are not serialised; two overlapping writes can leave
    the loser's fresh upload unreferenced on the media host.
    """

    # ── Read ─────────────────────────────────────────────────────────

    async def read(self) -> ContentRecord | None:
        """Return the canonical record, or None if the kind has never been written."""
        records = await self._repository.list_by_kind(self._kind.name)
        return records[0] if records else None

    # ── Write ────────────────────────────────────────────────────────

    async def write(self, desired: DesiredState) -> ContentRecord:
        """Reconcile the persisted record with ``desired`` and return the result."""
        self._check_shape(desired)
        self._log.separator(f"write {self._kind.name}")

        records = await self._repository.list_by_kind(self._kind.name)
        canonical = records[0] if records else None
        duplicates = records[1:]
        if duplicates:
            logger.warning(
                "Found %d extra %s record(s); collapsing onto %s",
                len(duplicates),
                self._kind.name,
                canonical.id,
            )
        return await self._save(desired, canonical, duplicates)

    # ── Delete ───────────────────────────────────────────────────────

    async def delete(self) -> bool:
        """Remove the record (and any duplicates) with children and media.

        Returns False when there was nothing to delete.
        """
        records = await self._repository.list_by_kind(self._kind.name)
        if not records:
            return False
        await self._delete_records(records, reason="record deleted")
        return True

    async def remove_media(self, slot: str) -> ContentRecord:
        """Clear one top-level media slot, keeping every other field."""
        if slot not in self._kind.media_slots:
            raise ContentValidationError(f"{self._kind.label} has no media slot '{slot}'", slot)

        record = await self.read()
        if record is None:
            raise EntityNotFoundError(self._kind.label, self._kind.name)
        attachment = record.media.get(slot)
        if attachment is None:
            raise ContentValidationError(f"No {slot.replace('_', ' ')} to remove", slot)

        record.media[slot] = None
        record.touch()
        try:
            async with self._repository.transaction():
                await self._repository.update(record)
        except Exception as exc:
            raise ContentPersistenceError(self._kind.label, str(exc)) from exc

        await self._discard([attachment], reason="media removed")
        return record
