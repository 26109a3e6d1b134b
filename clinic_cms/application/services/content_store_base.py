"""Shared write path for content stores — hosted media around a database transaction.

A save reconciles a desired full state against one persisted target record:

    1. work out which persisted media the desired state no longer references
    2. upload pending media (outside any transaction)
    3. in one transaction: create/update the target, drop the given duplicates,
       drop children missing from the desired state, update or insert the rest
    4. after commit, delete the media found in step 1 (failures are logged only)

If step 2 or 3 fails, the media uploaded by this attempt is deleted and
nothing queued in step 1 is touched.
"""

import logging
import time
from dataclasses import dataclass

from clinic_cms.application.interfaces import ContentRecordRepository, MediaHost
from clinic_cms.domain.entities import (
    ChildItem,
    CollectionSpec,
    ContentKind,
    ContentRecord,
    DesiredChild,
    DesiredState,
    MediaAttachment,
    PendingUpload,
)
from clinic_cms.domain.exceptions import (
    ContentPersistenceError,
    ContentValidationError,
    EntityNotFoundError,
    MediaUploadError,
)
from clinic_cms.infrastructure.logging.colored_logger import PipelineLogger, StoreStage

logger = logging.getLogger(__name__)

# Top-level media slots are keyed with this in place of a collection name.
_RECORD_SCOPE = "record"

UploadKey = tuple[str | None, int, str]


@dataclass
class _UploadTask:
    """One pending upload and where its result goes."""

    collection: str | None
    index: int
    slot: str
    upload: PendingUpload


class ContentStoreBase:
    """Reconciles records of one ``kind`` with the media they reference."""

    def __init__(
        self,
        kind: ContentKind,
        repository: ContentRecordRepository,
        media_host: MediaHost,
    ):
        self._kind = kind
        self._repository = repository
        self._media_host = media_host
        self._log = PipelineLogger(type(self).__name__)

    async def _save(
        self,
        desired: DesiredState,
        target: ContentRecord | None,
        duplicates: list[ContentRecord] | None = None,
    ) -> ContentRecord:
        """Write ``desired`` onto ``target`` (or a new record when None)."""
        duplicates = duplicates or []
        self._check_shape(desired)

        records = ([target] if target else []) + duplicates
        resolved = self._resolve_identities(desired, target)
        known = self._index_attachments(records)
        self._check_retained(desired, known)
        stale = self._stale_attachments(records, self._retained_urls(desired))

        uploaded = await self._upload_all(desired)

        try:
            with self._log.timed_step(StoreStage.TRANSACTION, f"Saving {self._kind.name}"):
                async with self._repository.transaction():
                    result = await self._apply(
                        desired, target, duplicates, resolved, known, uploaded
                    )
        except Exception as exc:
            await self._discard(list(uploaded.values()), reason="rollback")
            raise ContentPersistenceError(self._kind.label, str(exc)) from exc

        await self._discard(stale, reason="superseded")
        self._log.step_complete(
            StoreStage.COMPLETE,
            f"{self._kind.name} saved",
            uploads=len(uploaded),
            cleaned=len(stale),
        )
        return result

    async def _delete_records(self, records: list[ContentRecord], *, reason: str) -> None:
        """Delete records with their children in one transaction, then their media."""
        attachments = self._unique(a for r in records for a in r.attachments())
        try:
            async with self._repository.transaction():
                await self._repository.delete_many([r.id for r in records])
        except Exception as exc:
            raise ContentPersistenceError(self._kind.label, str(exc)) from exc

        logger.info("Deleted %d %s record(s)", len(records), self._kind.name)
        await self._discard(attachments, reason=reason)

    # ── Planning ─────────────────────────────────────────────────────

    def _check_shape(self, desired: DesiredState) -> None:
        """Reject collections and media slots the kind does not declare."""
        for slot in (*desired.media, *desired.uploads):
            if slot not in self._kind.media_slots:
                raise ContentValidationError(
                    f"{self._kind.label} has no media slot '{slot}'", slot
                )

        for name, items in desired.children.items():
            if name not in self._kind.collection_names:
                raise ContentValidationError(
                    f"{self._kind.label} has no collection '{name}'", name
                )
            spec = self._kind.collection(name)
            if spec.max_items is not None and len(items) > spec.max_items:
                raise ContentValidationError(
                    f"{name} accepts at most {spec.max_items} item(s)", name
                )
            seen: set[str] = set()
            for item in items:
                for slot in (*item.media, *item.uploads):
                    if slot not in spec.media_slots:
                        raise ContentValidationError(f"{name} has no media slot '{slot}'", slot)
                if item.id is not None:
                    if item.id in seen:
                        raise ContentValidationError(f"Duplicate {name} id '{item.id}'", name)
                    seen.add(item.id)

    def _resolve_identities(
        self, desired: DesiredState, target: ContentRecord | None
    ) -> dict[str, list[str | None]]:
        """Map each desired child to the persisted ID it updates (None = insert).

        Raises EntityNotFoundError for an ID the target record does not own.
        """
        resolved: dict[str, list[str | None]] = {}
        for spec in self._kind.collections:
            items = desired.children.get(spec.name, [])
            persisted = target.children.get(spec.name, []) if target else []
            persisted_ids = {p.id for p in persisted}

            ids: list[str | None] = []
            for item in items:
                if item.id is not None and item.id not in persisted_ids:
                    raise EntityNotFoundError(f"{self._kind.label} {spec.name}", item.id)
                if item.id is None and spec.single and persisted:
                    ids.append(persisted[0].id)
                else:
                    ids.append(item.id)
            resolved[spec.name] = ids
        return resolved

    def _check_retained(self, desired: DesiredState, known: dict[str, MediaAttachment]) -> None:
        """A kept URL must be one this record already holds; new media arrives as an upload."""
        for url in self._retained_urls(desired):
            if url not in known:
                raise ContentValidationError(
                    f"{self._kind.label} does not hold media '{url}'; upload the file instead"
                )

    @staticmethod
    def _retained_urls(desired: DesiredState) -> set[str]:
        """URLs the desired state keeps: carried-over values of slots without a new upload."""
        kept = {
            url for slot, url in desired.media.items()
            if url and slot not in desired.uploads
        }
        for items in desired.children.values():
            for item in items:
                kept.update(
                    url for slot, url in item.media.items()
                    if url and slot not in item.uploads
                )
        return kept

    def _stale_attachments(
        self, records: list[ContentRecord], retained: set[str]
    ) -> list[MediaAttachment]:
        """Persisted attachments that will no longer be referenced after the write."""
        return self._unique(
            a for record in records for a in record.attachments()
            if a.url not in retained
        )

    @staticmethod
    def _index_attachments(records: list[ContentRecord]) -> dict[str, MediaAttachment]:
        return {a.url: a for record in records for a in record.attachments()}

    @staticmethod
    def _unique(attachments) -> list[MediaAttachment]:
        seen: dict[str, MediaAttachment] = {}
        for attachment in attachments:
            seen.setdefault(attachment.url, attachment)
        return list(seen.values())

    # ── Uploads ──────────────────────────────────────────────────────

    def _upload_tasks(self, desired: DesiredState) -> list[_UploadTask]:
        tasks = [
            _UploadTask(None, 0, slot, upload)
            for slot, upload in desired.uploads.items()
        ]
        for name, items in desired.children.items():
            for index, item in enumerate(items):
                tasks.extend(
                    _UploadTask(name, index, slot, upload)
                    for slot, upload in item.uploads.items()
                )
        return tasks

    def _public_id(self, task: _UploadTask) -> str:
        scope = task.collection or _RECORD_SCOPE
        stamp = int(time.time() * 1000)
        base = f"{self._kind.name}_{scope}_{task.slot}_{stamp}_{task.index}".replace("-", "_")
        if task.upload.effective_resource_type().value == "raw":
            return f"{base}{task.upload.extension}"
        return base

    async def _upload_all(self, desired: DesiredState) -> dict[UploadKey, MediaAttachment]:
        """Upload every pending file; on the first failure undo the ones that succeeded."""
        uploaded: dict[UploadKey, MediaAttachment] = {}
        tasks = self._upload_tasks(desired)
        if not tasks:
            return uploaded

        with self._log.timed_step(StoreStage.UPLOAD, f"Uploading {len(tasks)} file(s)"):
            for task in tasks:
                folder = f"{self._kind.upload_folder}/{task.collection or _RECORD_SCOPE}"
                try:
                    attachment = await self._media_host.upload(
                        task.upload, folder=folder, public_id=self._public_id(task)
                    )
                except Exception as exc:
                    await self._discard(list(uploaded.values()), reason="upload aborted")
                    if isinstance(exc, MediaUploadError):
                        raise
                    raise MediaUploadError(self._media_host.provider_name, 0, str(exc)) from exc
                self._log.detail(f"Uploaded {task.slot}", url=attachment.url)
                uploaded[(task.collection, task.index, task.slot)] = attachment
        return uploaded

    # ── Transaction body ─────────────────────────────────────────────

    async def _apply(
        self,
        desired: DesiredState,
        target: ContentRecord | None,
        duplicates: list[ContentRecord],
        resolved: dict[str, list[str | None]],
        known: dict[str, MediaAttachment],
        uploaded: dict[UploadKey, MediaAttachment],
    ) -> ContentRecord:
        top_media = self._final_media(
            self._kind.media_slots, desired.media, None, 0, known, uploaded
        )

        if target is None:
            record = await self._repository.create(
                ContentRecord(kind=self._kind.name, fields=dict(desired.fields), media=top_media)
            )
        else:
            record = target
            record.fields = dict(desired.fields)
            record.media = top_media
            record.touch()
            await self._repository.update(record)

        if duplicates:
            await self._repository.delete_many([d.id for d in duplicates])

        if target is not None:
            keep = {i for ids in resolved.values() for i in ids if i is not None}
            removed = [item.id for item in target.items() if item.id not in keep]
            if removed:
                await self._repository.delete_children(removed)

        for spec in self._kind.collections:
            items = desired.children.get(spec.name, [])
            for index, (item, item_id) in enumerate(zip(items, resolved[spec.name])):
                await self._repository.save_child(
                    record.id,
                    self._to_child(spec, item, item_id, index, known, uploaded),
                )

        saved = await self._repository.get_by_id(record.id)
        if saved is None:
            raise EntityNotFoundError(self._kind.label, record.id)
        return saved

    def _to_child(
        self,
        spec: CollectionSpec,
        item: DesiredChild,
        item_id: str | None,
        index: int,
        known: dict[str, MediaAttachment],
        uploaded: dict[UploadKey, MediaAttachment],
    ) -> ChildItem:
        return ChildItem(
            collection=spec.name,
            fields=dict(item.fields),
            media=self._final_media(spec.media_slots, item.media, spec.name, index, known, uploaded),
            sort_order=item.sort_order,
            id=item_id,
        )

    @staticmethod
    def _final_media(
        slots: tuple[str, ...],
        carried: dict[str, str | None],
        collection: str | None,
        index: int,
        known: dict[str, MediaAttachment],
        uploaded: dict[UploadKey, MediaAttachment],
    ) -> dict[str, MediaAttachment | None]:
        """Fresh upload wins; otherwise the persisted attachment kept by URL; otherwise empty."""
        media: dict[str, MediaAttachment | None] = {}
        for slot in slots:
            fresh = uploaded.get((collection, index, slot))
            if fresh is not None:
                media[slot] = fresh
            elif carried.get(slot):
                media[slot] = known[carried[slot]]
            else:
                media[slot] = None
        return media

    # ── Cleanup ──────────────────────────────────────────────────────

    async def _discard(self, attachments: list[MediaAttachment], *, reason: str) -> None:
        """Best-effort delete from the media host; failures are logged and skipped."""
        if not attachments:
            return
        self._log.step_start(StoreStage.CLEANUP, f"Deleting {len(attachments)} file(s)", reason=reason)
        for attachment in attachments:
            try:
                await self._media_host.delete(attachment)
            except Exception as exc:
                self._log.step_error(StoreStage.CLEANUP, f"Could not delete {attachment.url}", error=exc)
