"""Contact form endpoints — the public form posts, the admin reads and deletes."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status

from clinic_cms.config import get_settings
from clinic_cms.application.schemas import (
    ApiEnvelope,
    ContactMessageInput,
    ContentRecordResponse,
    PaginatedEnvelope,
    Pagination,
)
from clinic_cms.application.services import ContactMessageService
from clinic_cms.domain.content_kinds import CONTACT_MESSAGE
from clinic_cms.infrastructure.dependencies import get_contact_message_service
from clinic_cms.presentation.api.v1.content_forms import read_content_payload, validate_content

router = APIRouter(prefix="/contact", tags=["Contact"])

_ORDER_FIELDS = {"createdAt": "created_at", "name": "name"}


@router.post("", response_model=ApiEnvelope, status_code=status.HTTP_201_CREATED)
async def submit_contact_message(
    request: Request,
    service: ContactMessageService = Depends(get_contact_message_service),
) -> ApiEnvelope:
    payload = await read_content_payload(
        request, CONTACT_MESSAGE, max_upload_bytes=get_settings().max_upload_bytes
    )
    message_input = validate_content(ContactMessageInput, payload)
    record = await service.submit_message(message_input.to_desired_state())
    return ApiEnvelope(
        success=True,
        data=ContentRecordResponse.from_entity(record),
        message="Your message has been sent successfully. We'll get back to you soon!",
    )


@router.get("", response_model=PaginatedEnvelope)
async def list_contact_messages(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    order_by: Literal["createdAt", "name"] = Query("createdAt", alias="orderBy"),
    order_direction: Literal["asc", "desc"] = Query("desc", alias="orderDirection"),
    search: str | None = None,
    service: ContactMessageService = Depends(get_contact_message_service),
) -> PaginatedEnvelope:
    """One page of messages; ``search`` matches sender name or email."""
    messages, total = await service.list_messages(
        limit=limit,
        offset=offset,
        order_by=_ORDER_FIELDS[order_by],
        descending=order_direction == "desc",
        search=search,
    )
    return PaginatedEnvelope(
        success=True,
        data=[ContentRecordResponse.from_entity(m) for m in messages],
        pagination=Pagination(
            total=total, limit=limit, offset=offset, has_more=offset + limit < total
        ),
    )


@router.get("/{message_id}", response_model=ApiEnvelope)
async def get_contact_message(
    message_id: str,
    service: ContactMessageService = Depends(get_contact_message_service),
) -> ApiEnvelope:
    record = await service.get_message(message_id)
    return ApiEnvelope(success=True, data=ContentRecordResponse.from_entity(record))


@router.delete("/{message_id}", response_model=ApiEnvelope)
async def delete_contact_message(
    message_id: str,
    service: ContactMessageService = Depends(get_contact_message_service),
) -> ApiEnvelope:
    await service.delete_message(message_id)
    return ApiEnvelope(success=True, message="Contact message deleted successfully")
