"""Application service (use case) for the clinic's team roster."""

from clinic_cms.application.schemas.catalog import TeamType
from clinic_cms.application.services.content_entry_store import ContentEntryStore
from clinic_cms.domain.entities import ContentRecord, DesiredState


class TeamMemberService:
    """Orchestrates team member rules on top of the team-member entry store.

    Members are ordered within their team by ``sort_order``; a new member goes
    to the end of its team. Deleting deactivates unless a hard delete is asked.
    """

    def __init__(self, store: ContentEntryStore):
        self._store = store

    async def list_members(
        self,
        *,
        team: TeamType | None = None,
        is_active: bool = True,
        order_by: str = "sort_order",
        descending: bool = False,
    ) -> list[ContentRecord]:
        where: dict = {"is_active": is_active}
        if team is not None:
            where["team"] = team.value
        return await self._store.list_entries(where=where, order_by=order_by, descending=descending)

    async def members_by_team(self) -> dict[str, list[ContentRecord]]:
        """Active members grouped under every team, empty teams included."""
        grouped: dict[str, list[ContentRecord]] = {team.value: [] for team in TeamType}
        for member in await self.list_members():
            grouped.setdefault(member.fields["team"], []).append(member)
        return grouped

    async def get_member(self, member_id: str) -> ContentRecord:
        return await self._store.get(member_id)

    async def create_member(self, desired: DesiredState) -> ContentRecord:
        fields = desired.fields
        fields["sort_order"] = await self._next_sort_order(fields["team"])
        if fields.get("is_active") is None:
            fields["is_active"] = True
        return await self._store.create(desired)

    async def update_member(self, member_id: str, desired: DesiredState) -> ContentRecord:
        """Replace the member's details; its place in the roster is kept."""
        current = await self._store.get(member_id)
        fields = desired.fields
        fields["sort_order"] = current.fields.get("sort_order", 0)
        if fields.get("is_active") is None:
            fields["is_active"] = current.fields.get("is_active", True)
        return await self._store.update(member_id, desired)

    async def reorder_member(self, member_id: str, sort_order: int) -> ContentRecord:
        return await self._store.patch_fields(member_id, {"sort_order": sort_order})

    async def delete_member(self, member_id: str, *, hard: bool = False) -> ContentRecord:
        """Deactivate the member, or remove it together with its image when ``hard``."""
        if hard:
            return await self._store.delete(member_id)
        return await self._store.patch_fields(member_id, {"is_active": False})

    async def _next_sort_order(self, team: str) -> int:
        peers = await self._store.list_entries(where={"team": team})
        return max((p.fields.get("sort_order") or 0 for p in peers), default=0) + 1
