"""Dental service endpoints — each service belongs to a category."""

from fastapi import APIRouter, Depends, Query, Request, status

from clinic_cms.config import get_settings
from clinic_cms.application.schemas import ApiEnvelope, ContentRecordResponse, ServiceInput
from clinic_cms.application.services import ServiceCatalogService
from clinic_cms.domain.content_kinds import DENTAL_SERVICE
from clinic_cms.infrastructure.dependencies import get_service_catalog_service
from clinic_cms.presentation.api.v1.content_forms import read_content_payload, validate_content

router = APIRouter(prefix="/services", tags=["Services"])


async def _service_input(request: Request) -> ServiceInput:
    payload = await read_content_payload(
        request, DENTAL_SERVICE, max_upload_bytes=get_settings().max_upload_bytes
    )
    return validate_content(ServiceInput, payload)


@router.get("", response_model=ApiEnvelope)
async def list_services(
    category_id: str | None = Query(None, alias="categoryId"),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
) -> ApiEnvelope:
    """Services, newest first, optionally of one category."""
    services = await service.list_services(category_id)
    return ApiEnvelope(success=True, data=[ContentRecordResponse.from_entity(s) for s in services])


@router.get("/{service_id}", response_model=ApiEnvelope)
async def get_service(
    service_id: str,
    service: ServiceCatalogService = Depends(get_service_catalog_service),
) -> ApiEnvelope:
    record = await service.get_service(service_id)
    return ApiEnvelope(success=True, data=ContentRecordResponse.from_entity(record))


@router.post("", response_model=ApiEnvelope, status_code=status.HTTP_201_CREATED)
async def create_service(
    request: Request,
    service: ServiceCatalogService = Depends(get_service_catalog_service),
) -> ApiEnvelope:
    service_input = await _service_input(request)
    record = await service.create_service(service_input.to_desired_state())
    return ApiEnvelope(
        success=True,
        data=ContentRecordResponse.from_entity(record),
        message="Service created successfully",
    )


@router.put("/{service_id}", response_model=ApiEnvelope)
async def update_service(
    service_id: str,
    request: Request,
    service: ServiceCatalogService = Depends(get_service_catalog_service),
) -> ApiEnvelope:
    """Replace a service with the posted state, sections and price ranges included."""
    service_input = await _service_input(request)
    record = await service.update_service(service_id, service_input.to_desired_state())
    return ApiEnvelope(
        success=True,
        data=ContentRecordResponse.from_entity(record),
        message="Service updated successfully",
    )


@router.delete("/{service_id}", response_model=ApiEnvelope)
async def delete_service(
    service_id: str,
    service: ServiceCatalogService = Depends(get_service_catalog_service),
) -> ApiEnvelope:
    await service.delete_service(service_id)
    return ApiEnvelope(success=True, message="Service deleted successfully")
