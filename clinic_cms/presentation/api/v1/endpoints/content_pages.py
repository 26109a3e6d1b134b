"""Section-based content pages — Safe, Precise, Personal, First visit, Patient instructions.

Each page is a single record edited as a whole: PUT replaces it with the
posted state (multipart with files, or JSON).
"""

from fastapi import APIRouter, Depends, Request

from clinic_cms.config import get_settings
from clinic_cms.application.schemas import (
    ApiEnvelope,
    CardPageInput,
    FirstVisitInput,
    PatientInstructionsInput,
    ContentRecordResponse,
)
from clinic_cms.application.services import SingletonContentStore
from clinic_cms.domain import content_kinds
from clinic_cms.domain.entities import ContentKind
from clinic_cms.infrastructure.dependencies import content_store_dependency
from clinic_cms.presentation.api.v1.content_forms import read_content_payload, validate_content

router = APIRouter(tags=["Content Pages"])

_PAGES = (
    (content_kinds.SAFE, CardPageInput),
    (content_kinds.PRECISE, CardPageInput),
    (content_kinds.PERSONAL, CardPageInput),
    (content_kinds.FIRST_VISIT, FirstVisitInput),
    (content_kinds.PATIENT_INSTRUCTIONS, PatientInstructionsInput),
)


def _register_page(kind: ContentKind, input_model: type) -> None:
    get_store = content_store_dependency(kind)
    slug = kind.name.replace("-", "_")

    @router.get(f"/{kind.name}", response_model=ApiEnvelope, name=f"get_{slug}")
    async def read_page(store: SingletonContentStore = Depends(get_store)) -> ApiEnvelope:
        """Retrieve the page with all its sections, or null if never saved."""
        record = await store.read()
        data = ContentRecordResponse.from_entity(record) if record else None
        return ApiEnvelope(success=True, data=data)

    @router.put(f"/{kind.name}", response_model=ApiEnvelope, name=f"save_{slug}")
    async def write_page(
        request: Request,
        store: SingletonContentStore = Depends(get_store),
    ) -> ApiEnvelope:
        """Create or replace the page."""
        payload = await read_content_payload(
            request, kind, max_upload_bytes=get_settings().max_upload_bytes
        )
        page = validate_content(input_model, payload)
        record = await store.write(page.to_desired_state())
        return ApiEnvelope(
            success=True,
            data=ContentRecordResponse.from_entity(record),
            message=f"{kind.label} updated successfully",
        )

    @router.delete(f"/{kind.name}", response_model=ApiEnvelope, name=f"delete_{slug}")
    async def delete_page(store: SingletonContentStore = Depends(get_store)) -> ApiEnvelope:
        """Delete the page, its sections and their media."""
        deleted = await store.delete()
        message = f"{kind.label} deleted successfully" if deleted else f"{kind.label} does not exist"
        return ApiEnvelope(success=True, message=message)


for _kind, _input_model in _PAGES:
    _register_page(_kind, _input_model)
