"""Team member endpoints — the clinic roster, ordered within each team."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status

from clinic_cms.config import get_settings
from clinic_cms.application.schemas import (
    ApiEnvelope,
    ContentRecordResponse,
    MemberOrderInput,
    TeamMemberInput,
    TeamType,
)
from clinic_cms.application.services import TeamMemberService
from clinic_cms.domain.content_kinds import TEAM_MEMBER
from clinic_cms.infrastructure.dependencies import get_team_member_service
from clinic_cms.presentation.api.v1.content_forms import read_content_payload, validate_content

router = APIRouter(prefix="/team-members", tags=["Team Members"])

_ORDER_FIELDS = {"name": "name", "sortOrder": "sort_order", "createdAt": "created_at"}


@router.get("", response_model=ApiEnvelope)
async def list_team_members(
    team: TeamType | None = None,
    is_active: bool = Query(True, alias="isActive"),
    order_by: Literal["name", "sortOrder", "createdAt"] = Query("sortOrder", alias="orderBy"),
    order_direction: Literal["asc", "desc"] = Query("asc", alias="orderDirection"),
    grouped: bool = False,
    service: TeamMemberService = Depends(get_team_member_service),
) -> ApiEnvelope:
    """List members, optionally of one team; ``grouped`` returns active members per team."""
    if grouped:
        by_team = await service.members_by_team()
        data = {
            team_name: [ContentRecordResponse.from_entity(m) for m in members]
            for team_name, members in by_team.items()
        }
        return ApiEnvelope(success=True, data=data)

    members = await service.list_members(
        team=team,
        is_active=is_active,
        order_by=_ORDER_FIELDS[order_by],
        descending=order_direction == "desc",
    )
    return ApiEnvelope(success=True, data=[ContentRecordResponse.from_entity(m) for m in members])


@router.get("/{member_id}", response_model=ApiEnvelope)
async def get_team_member(
    member_id: str,
    service: TeamMemberService = Depends(get_team_member_service),
) -> ApiEnvelope:
    member = await service.get_member(member_id)
    return ApiEnvelope(success=True, data=ContentRecordResponse.from_entity(member))


@router.post("", response_model=ApiEnvelope, status_code=status.HTTP_201_CREATED)
async def create_team_member(
    request: Request,
    service: TeamMemberService = Depends(get_team_member_service),
) -> ApiEnvelope:
    """Add a member at the end of its team."""
    payload = await read_content_payload(
        request, TEAM_MEMBER, max_upload_bytes=get_settings().max_upload_bytes
    )
    member_input = validate_content(TeamMemberInput, payload)
    member = await service.create_member(member_input.to_desired_state())
    return ApiEnvelope(
        success=True,
        data=ContentRecordResponse.from_entity(member),
        message="Team member created successfully",
    )


@router.put("/{member_id}", response_model=ApiEnvelope)
async def update_team_member(
    member_id: str,
    request: Request,
    service: TeamMemberService = Depends(get_team_member_service),
) -> ApiEnvelope:
    """Replace a member's details; leaving out ``imageUrl`` without a new file drops the image."""
    payload = await read_content_payload(
        request, TEAM_MEMBER, max_upload_bytes=get_settings().max_upload_bytes
    )
    member_input = validate_content(TeamMemberInput, payload)
    member = await service.update_member(member_id, member_input.to_desired_state())
    return ApiEnvelope(
        success=True,
        data=ContentRecordResponse.from_entity(member),
        message="Team member updated successfully",
    )


@router.put("/{member_id}/order", response_model=ApiEnvelope)
async def reorder_team_member(
    member_id: str,
    data: MemberOrderInput,
    service: TeamMemberService = Depends(get_team_member_service),
) -> ApiEnvelope:
    member = await service.reorder_member(member_id, data.sort_order)
    return ApiEnvelope(
        success=True,
        data=ContentRecordResponse.from_entity(member),
        message="Member order updated successfully",
    )


@router.delete("/{member_id}", response_model=ApiEnvelope)
async def delete_team_member(
    member_id: str,
    hard: bool = False,
    service: TeamMemberService = Depends(get_team_member_service),
) -> ApiEnvelope:
    """Deactivate a member; ``hard=true`` deletes it and its image."""
    await service.delete_member(member_id, hard=hard)
    message = "Team member permanently deleted" if hard else "Team member deactivated"
    return ApiEnvelope(success=True, message=message)
