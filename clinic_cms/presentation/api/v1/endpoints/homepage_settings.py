"""Homepage background settings endpoints."""

from fastapi import APIRouter, Depends, Request

from clinic_cms.config import get_settings
from clinic_cms.application.schemas import (
    ApiEnvelope,
    HomepageSettingsInput,
    ContentRecordResponse,
)
from clinic_cms.application.services import SingletonContentStore
from clinic_cms.domain.content_kinds import HOMEPAGE_SETTINGS
from clinic_cms.infrastructure.dependencies import content_store_dependency
from clinic_cms.presentation.api.v1.content_forms import read_content_payload, validate_content

router = APIRouter(prefix="/homepage-settings", tags=["Homepage Settings"])

get_homepage_store = content_store_dependency(HOMEPAGE_SETTINGS)

_MEDIA_SLOT = "background_media"


@router.get("", response_model=ApiEnvelope)
async def get_homepage_settings(
    store: SingletonContentStore = Depends(get_homepage_store),
) -> ApiEnvelope:
    """Retrieve the homepage background settings, or null if never saved."""
    record = await store.read()
    data = ContentRecordResponse.from_entity(record) if record else None
    return ApiEnvelope(success=True, data=data)


@router.post("", response_model=ApiEnvelope)
async def save_homepage_settings(
    request: Request,
    store: SingletonContentStore = Depends(get_homepage_store),
) -> ApiEnvelope:
    """Create or update the settings.

    Without a new ``backgroundMedia`` file the stored media is kept.
    """
    payload = await read_content_payload(
        request, HOMEPAGE_SETTINGS, max_upload_bytes=get_settings().max_upload_bytes
    )
    uploads = payload.get("uploads")
    has_upload = isinstance(uploads, dict) and _MEDIA_SLOT in uploads
    if not has_upload and not (payload.get("backgroundMediaUrl") or payload.get("background_media_url")):
        current = await store.read()
        stored = current.media.get(_MEDIA_SLOT) if current else None
        if stored is not None:
            payload["backgroundMediaUrl"] = stored.url

    settings_input = validate_content(HomepageSettingsInput, payload)
    record = await store.write(settings_input.to_desired_state())
    return ApiEnvelope(
        success=True,
        data=ContentRecordResponse.from_entity(record),
        message="Homepage settings saved successfully",
    )


@router.delete("", response_model=ApiEnvelope)
async def delete_homepage_settings(
    store: SingletonContentStore = Depends(get_homepage_store),
) -> ApiEnvelope:
    """Delete the settings together with the background media."""
    deleted = await store.delete()
    message = "Homepage settings deleted successfully" if deleted else "Homepage settings do not exist"
    return ApiEnvelope(success=True, message=message)


@router.delete("/media", response_model=ApiEnvelope)
async def remove_background_media(
    store: SingletonContentStore = Depends(get_homepage_store),
) -> ApiEnvelope:
    """Remove only the background media, keeping colour and opacity."""
    record = await store.remove_media(_MEDIA_SLOT)
    return ApiEnvelope(
        success=True,
        data=ContentRecordResponse.from_entity(record),
        message="Background media removed successfully",
    )
