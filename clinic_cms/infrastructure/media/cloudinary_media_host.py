"""Cloudinary media host — implements the MediaHost interface.

Talks to the Cloudinary upload API (https://api.cloudinary.com/v1_1)
directly over httpx. Every request is signed: SHA-1 over the alphabetically
sorted parameters joined as ``k=v&k=v`` with the API secret appended.
"""

import hashlib
import logging
import time
from typing import Any

import httpx

from clinic_cms.application.interfaces.media_host import MediaHost
from clinic_cms.domain.entities import MediaAttachment, MediaResourceType, PendingUpload
from clinic_cms.domain.exceptions import MediaDeletionError, MediaUploadError

logger = logging.getLogger(__name__)

# Parameters Cloudinary leaves out of the string to sign.
_UNSIGNED_PARAMS = frozenset({"file", "api_key", "resource_type", "cloud_name"})


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Return the hex SHA-1 signature Cloudinary expects for ``params``."""
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in _UNSIGNED_PARAMS and params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()


class CloudinaryMediaHost(MediaHost):
    """Infrastructure adapter — stores media on Cloudinary.

    Images, videos and raw files go to their own resource-type endpoints.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        base_url: str = "https://api.cloudinary.com/v1_1",
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return "cloudinary"

    def _endpoint(self, resource_type: MediaResourceType, action: str) -> str:
        return f"{self._base_url}/{self._cloud_name}/{resource_type.value}/{action}"

    def _signed(self, params: dict[str, Any]) -> dict[str, str]:
        """Add timestamp, api_key and signature to the request parameters."""
        payload = {k: str(v) for k, v in params.items() if v not in (None, "")}
        payload["timestamp"] = str(int(time.time()))
        payload["signature"] = sign_params(payload, self._api_secret)
        payload["api_key"] = self._api_key
        return payload

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def upload(
        self,
        upload: PendingUpload,
        *,
        folder: str,
        public_id: str,
    ) -> MediaAttachment:
        resource_type = upload.effective_resource_type()
        url = self._endpoint(resource_type, "upload")
        data = self._signed({"folder": folder, "public_id": public_id})
        files = {
            "file": (
                upload.filename or public_id,
                upload.content,
                upload.content_type or "application/octet-stream",
            )
        }

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.post(url, data=data, files=files)
        except httpx.HTTPError as e:
            raise MediaUploadError(self.provider_name, 0, str(e)) from e
        finally:
            if should_close:
                await client.aclose()

        if not response.is_success:
            raise MediaUploadError(
                self.provider_name, response.status_code, self._error_message(response)
            )

        body = response.json()
        secure_url = body.get("secure_url") or body.get("url")
        if not secure_url:
            raise MediaUploadError(
                self.provider_name, response.status_code, "Upload response has no URL"
            )

        logger.info(
            "Uploaded %s to Cloudinary (%d bytes) → %s",
            resource_type.value,
            upload.size,
            body.get("public_id"),
        )
        return MediaAttachment(
            url=secure_url,
            public_id=body.get("public_id") or f"{folder}/{public_id}",
            resource_type=MediaResourceType(body.get("resource_type") or resource_type.value),
        )

    async def delete(self, attachment: MediaAttachment) -> bool:
        public_id = attachment.resolved_public_id()
        if not public_id:
            logger.warning("Cannot derive a Cloudinary public id from %s", attachment.url)
            return False

        url = self._endpoint(attachment.resource_type, "destroy")
        data = self._signed({"public_id": public_id, "invalidate": "true"})

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.post(url, data=data)
        except httpx.HTTPError as e:
            raise MediaDeletionError(self.provider_name, 0, str(e)) from e
        finally:
            if should_close:
                await client.aclose()

        if not response.is_success:
            raise MediaDeletionError(
                self.provider_name, response.status_code, self._error_message(response)
            )

        result = response.json().get("result")
        if result == "ok":
            logger.info("Deleted %s from Cloudinary", public_id)
            return True
        if result == "not found":
            logger.warning("Cloudinary has no %s '%s'", attachment.resource_type.value, public_id)
            return False
        raise MediaDeletionError(
            self.provider_name, response.status_code, f"Unexpected destroy result: {result}"
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Pull Cloudinary's ``{"error": {"message": ...}}`` out of a failed response."""
        try:
            error = response.json().get("error", {})
            return error.get("message", response.text)
        except Exception:
            return response.text
