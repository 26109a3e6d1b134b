"""Entry store — many records of one kind (team members, services, ...), addressed by id."""

from collections.abc import Iterable
from typing import Any

from clinic_cms.application.services.content_store_base import ContentStoreBase
from clinic_cms.domain.entities import ContentRecord, DesiredState
from clinic_cms.domain.exceptions import ContentPersistenceError, EntityNotFoundError

_RECORD_ATTRIBUTES = ("created_at", "updated_at")


def _sort_value(record: ContentRecord, order_by: str) -> Any:
    if order_by in _RECORD_ATTRIBUTES:
        value: Any = getattr(record, order_by)
    else:
        value = record.fields.get(order_by)
    if isinstance(value, str):
        value = value.casefold()
    return value


class ContentEntryStore(ContentStoreBase):
    """Create, update and delete individual records of ``kind`` with their media."""

    async def list_entries(
        self,
        *,
        where: dict[str, Any] | None = None,
        order_by: str = "created_at",
        descending: bool = False,
    ) -> list[ContentRecord]:
        """Records whose fields equal every value in ``where``, sorted by ``order_by``.

        ``order_by`` is a record timestamp or a field name; records missing the
        field sort last.
        """
        records = await self._repository.list_by_kind(self._kind.name)
        if where:
            records = [
                r for r in records
                if all(r.fields.get(name) == value for name, value in where.items())
            ]
        present = [r for r in records if _sort_value(r, order_by) is not None]
        missing = [r for r in records if _sort_value(r, order_by) is None]
        present.sort(key=lambda r: _sort_value(r, order_by), reverse=descending)
        return present + missing

    async def get(self, entry_id: str) -> ContentRecord:
        """Fetch one entry; raises EntityNotFoundError if it is absent or of another kind."""
        record = await self._repository.get_by_id(entry_id)
        if record is None or record.kind != self._kind.name:
            raise EntityNotFoundError(self._kind.label, entry_id)
        return record

    async def create(self, desired: DesiredState) -> ContentRecord:
        self._check_shape(desired)
        self._log.separator(f"create {self._kind.name}")
        return await self._save(desired, None)

    async def update(self, entry_id: str, desired: DesiredState) -> ContentRecord:
        """Replace an entry's fields, media and children with ``desired``."""
        self._check_shape(desired)
        target = await self.get(entry_id)
        self._log.separator(f"update {self._kind.name} {entry_id}")
        return await self._save(desired, target)

    async def patch_fields(self, entry_id: str, changes: dict[str, Any]) -> ContentRecord:
        """Change scalar fields only; media and children stay as they are."""
        record = await self.get(entry_id)
        record.fields.update(changes)
        record.touch()
        try:
            async with self._repository.transaction():
                await self._repository.update(record)
        except Exception as exc:
            raise ContentPersistenceError(self._kind.label, str(exc)) from exc
        return record

    async def delete(
        self, entry_id: str, *, dependents: Iterable[ContentRecord] = ()
    ) -> ContentRecord:
        """Delete an entry, plus ``dependents`` in the same transaction, then their media."""
        record = await self.get(entry_id)
        await self._delete_records([record, *dependents], reason=f"{self._kind.name} deleted")
        return record

