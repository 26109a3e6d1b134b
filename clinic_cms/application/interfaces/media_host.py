"""Abstract media host interface — port for external blob storage adapters."""

from abc import ABC, abstractmethod

from clinic_cms.domain.entities import MediaAttachment, PendingUpload


class MediaHost(ABC):
    """Port — what the application layer needs from any media host."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider (e.g. 'cloudinary')."""
        ...

    @abstractmethod
    async def upload(
        self,
        upload: PendingUpload,
        *,
        folder: str,
        public_id: str,
    ) -> MediaAttachment:
        """Push new bytes to the host.

        Returns:
            The attachment with the hosted URL, the host's public id and the
            resource type it was stored as.

        Raises:
            MediaUploadError: If the host rejects or fails the upload.
        """
        ...

    @abstractmethod
    async def delete(self, attachment: MediaAttachment) -> bool:
        """Delete a previously uploaded blob.

        Returns True if the host removed it, False if it was already gone.

        Raises:
            MediaDeletionError: If the host returns an error.
        """
        ...
