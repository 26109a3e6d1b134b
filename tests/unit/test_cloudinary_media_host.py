"""Unit tests for the CloudinaryMediaHost."""

import hashlib
from urllib.parse import parse_qs

import httpx
import pytest

from clinic_cms.domain.entities import MediaAttachment, MediaResourceType, PendingUpload
from clinic_cms.domain.exceptions import MediaDeletionError, MediaUploadError
from clinic_cms.infrastructure.media.cloudinary_media_host import CloudinaryMediaHost, sign_params


# ── Helpers ──


def _recording_transport(
    requests: list[httpx.Request],
    response_data: dict,
    status_code: int = 200,
) -> httpx.MockTransport:
    """Mock transport that records each request and returns a fixed response."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, json=response_data)

    return httpx.MockTransport(handler)


def _host(transport: httpx.MockTransport) -> CloudinaryMediaHost:
    return CloudinaryMediaHost(
        cloud_name="clinic",
        api_key="key-123",
        api_secret="s3cret",
        http_client=httpx.AsyncClient(transport=transport),
    )


def _form_fields(request: httpx.Request) -> dict[str, str]:
    body = request.content.decode()
    return {k: v[0] for k, v in parse_qs(body).items()}


# ── Signing ──


def test_sign_params_sorts_and_skips_unsigned_keys():
    params = {"timestamp": "1700000000", "public_id": "p", "folder": "f", "api_key": "k", "file": "x"}

    expected = hashlib.sha1(b"folder=f&public_id=p&timestamp=1700000000secret").hexdigest()

    assert sign_params(params, "secret") == expected


# ── Upload ──


@pytest.mark.asyncio
async def test_upload_posts_to_resource_type_endpoint_and_parses_response():
    requests: list[httpx.Request] = []
    transport = _recording_transport(
        requests,
        {
            "secure_url": "https://res.cloudinary.com/clinic/video/upload/v1/homepage/bg.mp4",
            "public_id": "homepage/bg",
            "resource_type": "video",
        },
    )
    upload = PendingUpload(content=b"video-bytes", filename="bg.mp4", content_type="video/mp4")

    attachment = await _host(transport).upload(upload, folder="homepage", public_id="bg")

    assert attachment.url.endswith("/homepage/bg.mp4")
    assert attachment.public_id == "homepage/bg"
    assert attachment.resource_type == MediaResourceType.VIDEO
    assert str(requests[0].url) == "https://api.cloudinary.com/v1_1/clinic/video/upload"
    body = requests[0].content
    assert b'name="api_key"' in body
    assert b'name="signature"' in body
    assert b"video-bytes" in body


@pytest.mark.asyncio
async def test_upload_error_raises_media_upload_error():
    transport = _recording_transport([], {"error": {"message": "Invalid Signature"}}, status_code=401)
    upload = PendingUpload(content=b"img", filename="a.png", content_type="image/png")

    with pytest.raises(MediaUploadError) as exc_info:
        await _host(transport).upload(upload, folder="safe", public_id="a")

    assert exc_info.value.status_code == 401
    assert "Invalid Signature" in exc_info.value.message
    assert exc_info.value.provider == "cloudinary"


@pytest.mark.asyncio
async def test_upload_network_failure_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    host = _host(httpx.MockTransport(handler))
    upload = PendingUpload(content=b"img", filename="a.png", content_type="image/png")

    with pytest.raises(MediaUploadError):
        await host.upload(upload, folder="safe", public_id="a")


# ── Delete ──


@pytest.mark.asyncio
async def test_delete_uses_stored_public_id_and_resource_type():
    requests: list[httpx.Request] = []
    transport = _recording_transport(requests, {"result": "ok"})
    attachment = MediaAttachment(
        url="https://res.cloudinary.com/clinic/raw/upload/v1/cards/guide.pdf",
        public_id="cards/guide.pdf",
        resource_type=MediaResourceType.RAW,
    )

    assert await _host(transport).delete(attachment) is True

    assert str(requests[0].url) == "https://api.cloudinary.com/v1_1/clinic/raw/destroy"
    fields = _form_fields(requests[0])
    assert fields["public_id"] == "cards/guide.pdf"
    assert fields["api_key"] == "key-123"
    assert "signature" in fields


@pytest.mark.asyncio
async def test_delete_falls_back_to_public_id_from_url():
    requests: list[httpx.Request] = []
    transport = _recording_transport(requests, {"result": "ok"})
    attachment = MediaAttachment.from_url(
        "https://res.cloudinary.com/clinic/image/upload/v1712345/safe/sections/photo.jpg"
    )

    await _host(transport).delete(attachment)

    assert _form_fields(requests[0])["public_id"] == "safe/sections/photo"


@pytest.mark.asyncio
async def test_delete_not_found_returns_false():
    transport = _recording_transport([], {"result": "not found"})
    attachment = MediaAttachment(url="https://res.cloudinary.com/x/image/upload/v1/a.jpg", public_id="a")

    assert await _host(transport).delete(attachment) is False


@pytest.mark.asyncio
async def test_delete_error_raises_media_deletion_error():
    transport = _recording_transport([], {"error": {"message": "Server error"}}, status_code=500)
    attachment = MediaAttachment(url="https://res.cloudinary.com/x/image/upload/v1/a.jpg", public_id="a")

    with pytest.raises(MediaDeletionError) as exc_info:
        await _host(transport).delete(attachment)

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_delete_without_derivable_public_id_is_skipped():
    requests: list[httpx.Request] = []
    transport = _recording_transport(requests, {"result": "ok"})

    result = await _host(transport).delete(MediaAttachment(url="https://elsewhere.test/a.jpg"))

    assert result is False
    assert requests == []
