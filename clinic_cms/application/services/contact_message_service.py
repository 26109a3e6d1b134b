"""Application service (use case) for messages sent through the contact form."""

from clinic_cms.application.services.content_entry_store import ContentEntryStore
from clinic_cms.domain.entities import ContentRecord, DesiredState


def _matches(message: ContentRecord, needle: str) -> bool:
    return (
        needle in str(message.fields.get("name", "")).casefold()
        or needle in str(message.fields.get("email_id", "")).casefold()
    )


class ContactMessageService:
    def __init__(self, store: ContentEntryStore):
        self._store = store

    async def submit_message(self, desired: DesiredState) -> ContentRecord:
        return await self._store.create(desired)

    async def list_messages(
        self,
        *,
        limit: int = 50,
        offset: int = 0,
        order_by: str = "created_at",
        descending: bool = True,
        search: str | None = None,
    ) -> tuple[list[ContentRecord], int]:
        """One page of messages and the total that matched.

        ``search`` keeps messages whose sender name or email contains it, in any case.
        """
        messages = await self._store.list_entries(order_by=order_by, descending=descending)
        if search:
            messages = [m for m in messages if _matches(m, search.casefold())]
        return messages[offset:offset + limit], len(messages)

    async def get_message(self, message_id: str) -> ContentRecord:
        return await self._store.get(message_id)

    async def delete_message(self, message_id: str) -> ContentRecord:
        return await self._store.delete(message_id)
