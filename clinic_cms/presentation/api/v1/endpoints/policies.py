"""Policy pages — office policy, privacy policy, terms of service."""

from fastapi import APIRouter, Depends, Request

from clinic_cms.config import get_settings
from clinic_cms.application.schemas import ApiEnvelope, PolicyInput, ContentRecordResponse
from clinic_cms.application.services import SingletonContentStore
from clinic_cms.domain import content_kinds
from clinic_cms.domain.entities import ContentKind
from clinic_cms.infrastructure.dependencies import content_store_dependency
from clinic_cms.presentation.api.v1.content_forms import read_content_payload, validate_content

router = APIRouter(tags=["Policies"])


def _register_policy(kind: ContentKind) -> None:
    get_store = content_store_dependency(kind)
    slug = kind.name.replace("-", "_")

    @router.get(f"/{kind.name}", response_model=ApiEnvelope, name=f"get_{slug}")
    async def read_policy(store: SingletonContentStore = Depends(get_store)) -> ApiEnvelope:
        record = await store.read()
        data = ContentRecordResponse.from_entity(record) if record else None
        return ApiEnvelope(success=True, data=data)

    @router.post(f"/{kind.name}", response_model=ApiEnvelope, name=f"save_{slug}")
    async def write_policy(
        request: Request,
        store: SingletonContentStore = Depends(get_store),
    ) -> ApiEnvelope:
        payload = await read_content_payload(
            request, kind, max_upload_bytes=get_settings().max_upload_bytes
        )
        policy = validate_content(PolicyInput, payload)
        record = await store.write(policy.to_desired_state())
        return ApiEnvelope(
            success=True,
            data=ContentRecordResponse.from_entity(record),
            message=f"{kind.label} saved successfully",
        )

    @router.delete(f"/{kind.name}", response_model=ApiEnvelope, name=f"delete_{slug}")
    async def delete_policy(store: SingletonContentStore = Depends(get_store)) -> ApiEnvelope:
        deleted = await store.delete()
        message = f"{kind.label} deleted successfully" if deleted else f"{kind.label} does not exist"
        return ApiEnvelope(success=True, message=message)


for _kind in (content_kinds.OFFICE_POLICY, content_kinds.PRIVACY_POLICY, content_kinds.TERMS_OF_SERVICE):
    _register_policy(_kind)
