"""Abstract repository interface (port) for content records."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from clinic_cms.domain.entities import ChildItem, ContentRecord


class ContentRecordRepository(ABC):
    """Port for content record persistence — implemented in the infrastructure layer.

    The store treats this as transactional rows with a parent/child relation;
    nothing here assumes a SQL dialect.
    """

    @abstractmethod
    async def list_by_kind(self, kind: str) -> list[ContentRecord]:
        """All records of a kind with their children, oldest first."""
        ...

    @abstractmethod
    async def get_by_id(self, record_id: str) -> ContentRecord | None:
        """Retrieve a single record with its ordered children."""
        ...

    @abstractmethod
    async def create(self, record: ContentRecord) -> ContentRecord:
        """Persist a new record (without children) and return it with its ID."""
        ...

    @abstractmethod
    async def update(self, record: ContentRecord) -> ContentRecord:
        """Write the record's scalar fields and top-level media."""
        ...

    @abstractmethod
    async def delete_many(self, record_ids: list[str]) -> int:
        """Delete records and all of their children. Returns the number of records removed."""
        ...

    @abstractmethod
    async def delete_children(self, child_ids: list[str]) -> int:
        """Delete child items by ID. Returns the number removed."""
        ...

    @abstractmethod
    async def save_child(self, record_id: str, item: ChildItem) -> ChildItem:
        """Update the child in place when it has an ID, otherwise insert it."""
        ...

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """All-or-nothing scope: commits on normal exit, rolls back on error."""
        ...
