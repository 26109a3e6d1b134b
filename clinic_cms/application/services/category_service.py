"""Application service (use case) for service categories."""

from collections import Counter

from clinic_cms.application.services.content_entry_store import ContentEntryStore
from clinic_cms.domain.entities import ContentRecord, DesiredState
from clinic_cms.domain.exceptions import DuplicateEntryError


class CategoryService:
    """Category titles are unique regardless of case; deleting one removes its services."""

    def __init__(self, categories: ContentEntryStore, services: ContentEntryStore):
        self._categories = categories
        self._services = services

    async def list_categories(self) -> list[tuple[ContentRecord, int]]:
        """Every category, oldest first, with the number of services it holds."""
        categories = await self._categories.list_entries()
        counts = await self._service_counts()
        return [(c, counts[c.id]) for c in categories]

    async def get_category(self, category_id: str) -> tuple[ContentRecord, int]:
        category = await self._categories.get(category_id)
        counts = await self._service_counts()
        return category, counts[category.id]

    async def create_category(self, desired: DesiredState) -> ContentRecord:
        await self._check_unique_title(desired.fields["title"])
        return await self._categories.create(desired)

    async def update_category(self, category_id: str, desired: DesiredState) -> ContentRecord:
        await self._categories.get(category_id)
        await self._check_unique_title(desired.fields["title"], exclude_id=category_id)
        return await self._categories.update(category_id, desired)

    async def delete_category(self, category_id: str) -> ContentRecord:
        services = await self._services.list_entries(where={"category_id": category_id})
        return await self._categories.delete(category_id, dependents=services)

    async def _service_counts(self) -> Counter:
        services = await self._services.list_entries()
        return Counter(s.fields.get("category_id") for s in services)

    async def _check_unique_title(self, title: str, exclude_id: str | None = None) -> None:
        wanted = title.casefold()
        for category in await self._categories.list_entries():
            if category.id != exclude_id and str(category.fields.get("title", "")).casefold() == wanted:
                raise DuplicateEntryError("Category with this title already exists", "title")
