"""Domain entities for content records and their child items."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from collections.abc import Iterator

from .media import MediaAttachment, PendingUpload


@dataclass
class ChildItem:
    """An ordered, owned sub-record of a ContentRecord (section, card, ...)."""

    collection: str
    fields: dict[str, Any] = field(default_factory=dict)
    media: dict[str, MediaAttachment | None] = field(default_factory=dict)
    sort_order: int = 0
    id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def attachments(self) -> list[MediaAttachment]:
        return [a for a in self.media.values() if a is not None]


@dataclass
class ContentRecord:
    """A stored record of a content kind.

    Singleton kinds keep exactly one; entry kinds (team members, services,
    ...) keep many. ``children`` maps a collection name to its items in
    display order.
    """

    kind: str
    fields: dict[str, Any] = field(default_factory=dict)
    media: dict[str, MediaAttachment | None] = field(default_factory=dict)
    children: dict[str, list[ChildItem]] = field(default_factory=dict)
    id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def items(self) -> Iterator[ChildItem]:
        for collection in self.children.values():
            yield from collection

    def attachments(self) -> list[MediaAttachment]:
        """Every attachment held by the record and its children."""
        found = [a for a in self.media.values() if a is not None]
        for item in self.items():
            found.extend(item.attachments())
        return found

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)


@dataclass
class DesiredChild:
    """One child item as the caller wants it to look after a write.

    ``media`` holds URLs to retain per slot; ``uploads`` holds new bytes that
    replace whatever the slot held before.
    """

    fields: dict[str, Any] = field(default_factory=dict)
    sort_order: int = 0
    id: str | None = None
    media: dict[str, str | None] = field(default_factory=dict)
    uploads: dict[str, PendingUpload] = field(default_factory=dict)


@dataclass
class DesiredState:
    """Full desired state of a content record, input to a store write."""

    fields: dict[str, Any] = field(default_factory=dict)
    media: dict[str, str | None] = field(default_factory=dict)
    uploads: dict[str, PendingUpload] = field(default_factory=dict)
    children: dict[str, list[DesiredChild]] = field(default_factory=dict)
