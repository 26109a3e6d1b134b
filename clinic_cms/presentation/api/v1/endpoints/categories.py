"""Service category endpoints."""

from fastapi import APIRouter, Depends, Request, status

from clinic_cms.config import get_settings
from clinic_cms.application.schemas import ApiEnvelope, CategoryInput, CategoryResponse
from clinic_cms.application.services import CategoryService
from clinic_cms.domain.content_kinds import CATEGORY
from clinic_cms.infrastructure.dependencies import get_category_service
from clinic_cms.presentation.api.v1.content_forms import read_content_payload, validate_content

router = APIRouter(prefix="/categories", tags=["Categories"])


async def _category_input(request: Request) -> CategoryInput:
    payload = await read_content_payload(
        request, CATEGORY, max_upload_bytes=get_settings().max_upload_bytes
    )
    return validate_content(CategoryInput, payload)


@router.get("", response_model=ApiEnvelope)
async def list_categories(
    service: CategoryService = Depends(get_category_service),
) -> ApiEnvelope:
    """All categories, oldest first, each with its ``services_count``."""
    categories = await service.list_categories()
    return ApiEnvelope(
        success=True,
        data=[CategoryResponse.from_category(c, count) for c, count in categories],
    )


@router.get("/{category_id}", response_model=ApiEnvelope)
async def get_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
) -> ApiEnvelope:
    category, count = await service.get_category(category_id)
    return ApiEnvelope(success=True, data=CategoryResponse.from_category(category, count))


@router.post("", response_model=ApiEnvelope, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: Request,
    service: CategoryService = Depends(get_category_service),
) -> ApiEnvelope:
    category_input = await _category_input(request)
    category = await service.create_category(category_input.to_desired_state())
    return ApiEnvelope(
        success=True,
        data=CategoryResponse.from_category(category, 0),
        message="Category created successfully",
    )


@router.put("/{category_id}", response_model=ApiEnvelope)
async def update_category(
    category_id: str,
    request: Request,
    service: CategoryService = Depends(get_category_service),
) -> ApiEnvelope:
    category_input = await _category_input(request)
    await service.update_category(category_id, category_input.to_desired_state())
    category, count = await service.get_category(category_id)
    return ApiEnvelope(
        success=True,
        data=CategoryResponse.from_category(category, count),
        message="Category updated successfully",
    )


@router.delete("/{category_id}", response_model=ApiEnvelope)
async def delete_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
) -> ApiEnvelope:
    """Delete a category together with its services and their media."""
    await service.delete_category(category_id)
    return ApiEnvelope(success=True, message="Category deleted successfully")
