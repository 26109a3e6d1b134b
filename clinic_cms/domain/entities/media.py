"""Domain entities for externally hosted media."""

import mimetypes
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Any


class MediaResourceType(str, Enum):
    """Kinds of blobs the media host distinguishes."""

    IMAGE = "image"
    VIDEO = "video"
    RAW = "raw"


_VIDEO_EXTENSIONS = frozenset({".mp4", ".webm", ".mov", ".avi", ".mkv", ".m4v", ".wmv", ".flv"})

# .../<resource_type>/upload/[<transformation>/...][v<version>/]<public_id>.<ext>
# A transformation segment is a comma-separated list of "<key>_<value>" params.
_UPLOAD_PATH_RE = re.compile(
    r"/(image|video|raw)/upload/"
    r"(?:[a-z]{1,3}_[^/,]+(?:,[a-z]{1,3}_[^/,]+)*/)*"
    r"(?:v\d+/)?(.+)$"
)


@dataclass(frozen=True)
class MediaAttachment:
    """Reference to a blob owned by the media host.

    The URL is what pages render; ``public_id`` is the host's own identifier,
    recorded at upload time so deletion never has to parse the URL.
    """

    url: str
    public_id: str | None = None
    resource_type: MediaResourceType = MediaResourceType.IMAGE

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "public_id": self.public_id,
            "resource_type": self.resource_type.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str | None) -> "MediaAttachment | None":
        """Load a stored attachment; a bare URL string (legacy rows) is accepted too."""
        if isinstance(data, str):
            return cls.from_url(data) if data else None
        if not data or not data.get("url"):
            return None
        return cls(
            url=data["url"],
            public_id=data.get("public_id"),
            resource_type=MediaResourceType(data.get("resource_type") or "image"),
        )

    @classmethod
    def from_url(cls, url: str) -> "MediaAttachment":
        """Best-effort attachment for a bare URL of unknown provenance."""
        return cls(
            url=url,
            public_id=public_id_from_url(url),
            resource_type=resource_type_from_url(url),
        )

    def resolved_public_id(self) -> str | None:
        """The stored identifier, falling back to parsing the URL."""
        return self.public_id or public_id_from_url(self.url)


@dataclass(frozen=True)
class PendingUpload:
    """New bytes waiting to be pushed to the media host."""

    content: bytes
    filename: str = ""
    content_type: str = ""
    resource_type: MediaResourceType | None = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        suffix = PurePosixPath(self.filename).suffix.lower()
        if suffix:
            return suffix
        return mimetypes.guess_extension(self.content_type or "") or ""

    def effective_resource_type(self) -> MediaResourceType:
        """Explicit type if given, otherwise inferred from content type or extension."""
        if self.resource_type is not None:
            return self.resource_type
        return infer_resource_type(self.content_type, self.filename)


def infer_resource_type(content_type: str | None, filename: str | None = None) -> MediaResourceType:
    """Map a MIME type (or, failing that, a file extension) to a resource type."""
    mime = (content_type or "").lower()
    if mime.startswith("image/"):
        return MediaResourceType.IMAGE
    if mime.startswith("video/"):
        return MediaResourceType.VIDEO
    if filename and PurePosixPath(filename).suffix.lower() in _VIDEO_EXTENSIONS:
        return MediaResourceType.VIDEO
    if not mime and filename:
        guessed = mimetypes.guess_type(filename)[0] or ""
        if guessed.startswith("image/"):
            return MediaResourceType.IMAGE
    return MediaResourceType.RAW


def public_id_from_url(url: str) -> str | None:
    """Recover a public id from a hosted URL.

    Only used for attachments stored without their identifier. Image and
    video ids drop the file extension; raw ids keep it, since the host stores
    raw files under their full name.
    """
    match = _UPLOAD_PATH_RE.search(url.split("?", 1)[0])
    if match is None:
        return None
    resource_type, path = match.groups()
    if resource_type == MediaResourceType.RAW.value:
        return path
    return re.sub(r"\.[^/.]+$", "", path)


def resource_type_from_url(url: str) -> MediaResourceType:
    if "/raw/upload/" in url:
        return MediaResourceType.RAW
    if "/video/upload/" in url:
        return MediaResourceType.VIDEO
    return MediaResourceType.IMAGE
