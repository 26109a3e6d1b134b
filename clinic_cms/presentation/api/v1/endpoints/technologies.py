"""Dental technology endpoints."""

from fastapi import APIRouter, Depends, Request, status

from clinic_cms.config import get_settings
from clinic_cms.application.schemas import ApiEnvelope, ContentRecordResponse, TechnologyInput
from clinic_cms.application.services import ContentEntryStore
from clinic_cms.domain.content_kinds import TECHNOLOGY
from clinic_cms.infrastructure.dependencies import get_technology_store
from clinic_cms.presentation.api.v1.content_forms import read_content_payload, validate_content

router = APIRouter(prefix="/technologies", tags=["Technologies"])


async def _technology_input(request: Request) -> TechnologyInput:
    payload = await read_content_payload(
        request, TECHNOLOGY, max_upload_bytes=get_settings().max_upload_bytes
    )
    return validate_content(TechnologyInput, payload)


@router.get("", response_model=ApiEnvelope)
async def list_technologies(
    store: ContentEntryStore = Depends(get_technology_store),
) -> ApiEnvelope:
    """Technologies, newest first."""
    records = await store.list_entries(descending=True)
    return ApiEnvelope(success=True, data=[ContentRecordResponse.from_entity(r) for r in records])


@router.get("/{technology_id}", response_model=ApiEnvelope)
async def get_technology(
    technology_id: str,
    store: ContentEntryStore = Depends(get_technology_store),
) -> ApiEnvelope:
    record = await store.get(technology_id)
    return ApiEnvelope(success=True, data=ContentRecordResponse.from_entity(record))


@router.post("", response_model=ApiEnvelope, status_code=status.HTTP_201_CREATED)
async def create_technology(
    request: Request,
    store: ContentEntryStore = Depends(get_technology_store),
) -> ApiEnvelope:
    technology_input = await _technology_input(request)
    record = await store.create(technology_input.to_desired_state())
    return ApiEnvelope(
        success=True,
        data=ContentRecordResponse.from_entity(record),
        message="Technology created successfully",
    )


@router.put("/{technology_id}", response_model=ApiEnvelope)
async def update_technology(
    technology_id: str,
    request: Request,
    store: ContentEntryStore = Depends(get_technology_store),
) -> ApiEnvelope:
    technology_input = await _technology_input(request)
    record = await store.update(technology_id, technology_input.to_desired_state())
    return ApiEnvelope(
        success=True,
        data=ContentRecordResponse.from_entity(record),
        message="Technology updated successfully",
    )


@router.delete("/{technology_id}", response_model=ApiEnvelope)
async def delete_technology(
    technology_id: str,
    store: ContentEntryStore = Depends(get_technology_store),
) -> ApiEnvelope:
    await store.delete(technology_id)
    return ApiEnvelope(success=True, message="Technology deleted successfully")
