"""Application service (use case) for the dental services catalogue."""

from clinic_cms.application.services.content_entry_store import ContentEntryStore
from clinic_cms.domain.entities import ContentRecord, DesiredState


class ServiceCatalogService:
    """Services belong to an existing category; listings show the newest first."""

    def __init__(self, services: ContentEntryStore, categories: ContentEntryStore):
        self._services = services
        self._categories = categories

    async def list_services(self, category_id: str | None = None) -> list[ContentRecord]:
        where = {"category_id": category_id} if category_id else None
        return await self._services.list_entries(where=where, order_by="created_at", descending=True)

    async def get_service(self, service_id: str) -> ContentRecord:
        return await self._services.get(service_id)

    async def create_service(self, desired: DesiredState) -> ContentRecord:
        await self._categories.get(desired.fields["category_id"])
        return await self._services.create(desired)

    async def update_service(self, service_id: str, desired: DesiredState) -> ContentRecord:
        await self._categories.get(desired.fields["category_id"])
        return await self._services.update(service_id, desired)

    async def delete_service(self, service_id: str) -> ContentRecord:
        return await self._services.delete(service_id)
