"""Pydantic DTOs for content pages and the shared response envelope.

Request models accept snake_case or the admin forms' camelCase names. New
file bytes ride along in each model's ``uploads`` (keyed by media slot) and
are never serialised.
"""

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from clinic_cms.domain.entities import (
    ChildItem,
    DesiredChild,
    DesiredState,
    MediaAttachment,
    PendingUpload,
    ContentRecord,
)

ALLOWED_BACKGROUND_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "video/mp4",
    "video/webm",
    "video/quicktime",
})


# ── Responses ────────────────────────────────────────────────────────

class ApiEnvelope(BaseModel):
    """Every response body: ``{success, data?, error?, message?}``."""

    success: bool
    data: Any | None = None
    error: str | None = None
    message: str | None = None


class MediaAttachmentResponse(BaseModel):
    url: str
    public_id: str | None
    resource_type: str

    @classmethod
    def from_entity(cls, attachment: MediaAttachment | None) -> "MediaAttachmentResponse | None":
        if attachment is None:
            return None
        return cls(
            url=attachment.url,
            public_id=attachment.public_id,
            resource_type=attachment.resource_type.value,
        )


class ContentItemResponse(BaseModel):
    id: str
    collection: str
    sort_order: int
    fields: dict[str, Any]
    media: dict[str, MediaAttachmentResponse | None]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, item: ChildItem) -> "ContentItemResponse":
        return cls(
            id=item.id,
            collection=item.collection,
            sort_order=item.sort_order,
            fields=item.fields,
            media={slot: MediaAttachmentResponse.from_entity(a) for slot, a in item.media.items()},
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class ContentRecordResponse(BaseModel):
    """Schema returned to the client for any content kind."""

    id: str
    kind: str
    fields: dict[str, Any]
    media: dict[str, MediaAttachmentResponse | None]
    children: dict[str, list[ContentItemResponse]]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, record: ContentRecord) -> "ContentRecordResponse":
        return cls(
            id=record.id,
            kind=record.kind,
            fields=record.fields,
            media={slot: MediaAttachmentResponse.from_entity(a) for slot, a in record.media.items()},
            children={
                name: [ContentItemResponse.from_entity(item) for item in items]
                for name, items in record.children.items()
            },
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


# ── Request base ─────────────────────────────────────────────────────

class _ContentInput(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        arbitrary_types_allowed=True,
    )

    # Media slot → model attribute holding the URL to keep.
    media_fields: ClassVar[dict[str, str]] = {}

    uploads: dict[str, PendingUpload] = Field(default_factory=dict, exclude=True)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        """Form posts send empty strings for untouched inputs."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("uploads", mode="before")
    @classmethod
    def _parsed_files_only(cls, value: Any) -> Any:
        """Only the form parser puts bytes here; request data cannot describe a file."""
        if value is None:
            return {}
        if not isinstance(value, dict) or not all(
            isinstance(upload, PendingUpload) for upload in value.values()
        ):
            raise ValueError("Files must be sent as multipart file fields")
        return value

    def _has_media(self, slot: str) -> bool:
        return slot in self.uploads or bool(getattr(self, self.media_fields[slot]))

    def _retained_media(self) -> dict[str, str | None]:
        return {slot: getattr(self, attr) for slot, attr in self.media_fields.items()}

    def _scalar_fields(self, *names: str) -> dict[str, Any]:
        values = {name: getattr(self, name) for name in names}
        return {k: (v.value if isinstance(v, Enum) else v) for k, v in values.items()}


class _ChildInput(_ContentInput):
    id: str | None = None
    sort_order: int | None = None

    field_names: ClassVar[tuple[str, ...]] = ()

    def to_desired_child(self, index: int) -> DesiredChild:
        return DesiredChild(
            id=self.id,
            sort_order=self.sort_order if self.sort_order is not None else index,
            fields=self._scalar_fields(*self.field_names),
            media=self._retained_media(),
            uploads=dict(self.uploads),
        )


def _children(items: list[_ChildInput]) -> list[DesiredChild]:
    return [item.to_desired_child(index) for index, item in enumerate(items)]


# ── Safe / Precise / Personal ────────────────────────────────────────

class CardStyle(str, Enum):
    CARDSTYLE1 = "CARDSTYLE1"
    CARDSTYLE2 = "CARDSTYLE2"
    CARDSTYLE3 = "CARDSTYLE3"


class CardSectionInput(_ChildInput):
    media_fields: ClassVar[dict[str, str]] = {"image": "image_url"}
    field_names: ClassVar[tuple[str, ...]] = ("title", "description_title", "description", "card_style")

    title: str | None = None
    description_title: str | None = None
    description: str | None = None
    card_style: CardStyle
    image_url: str | None = None

    @model_validator(mode="after")
    def _not_empty(self) -> "CardSectionInput":
        if not (self._has_media("image") or self.title or self.description_title or self.description):
            raise ValueError(
                "Section needs at least one of image, title, description title or description"
            )
        return self


class CardPageInput(_ContentInput):
    """Body of PUT /safe, /precise and /personal."""

    sections: list[CardSectionInput] = Field(default_factory=list)

    def to_desired_state(self) -> DesiredState:
        return DesiredState(children={"sections": _children(self.sections)})


# ── First visit ──────────────────────────────────────────────────────

class FirstVisitSectionInput(_ChildInput):
    media_fields: ClassVar[dict[str, str]] = {"image": "image_url"}
    field_names: ClassVar[tuple[str, ...]] = ("title", "description_title", "description")

    title: str | None = None
    description_title: str | None = None
    description: str = Field(..., min_length=1)
    image_url: str | None = None


class VideoSectionInput(_ChildInput):
    field_names: ClassVar[tuple[str, ...]] = ("video_url",)

    video_url: str

    @field_validator("video_url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Video URL must be a valid http(s) URL")
        return value


class InformationSectionInput(_ChildInput):
    media_fields: ClassVar[dict[str, str]] = {"image": "image_url"}
    field_names: ClassVar[tuple[str, ...]] = ("description_title", "description")

    description_title: str | None = None
    description: str = Field(..., min_length=1)
    image_url: str | None = None


class FirstVisitInput(_ContentInput):
    """Body of PUT /first-visit."""

    sections: list[FirstVisitSectionInput] = Field(default_factory=list)
    video_section: VideoSectionInput | None = None
    information_section: InformationSectionInput | None = None

    def to_desired_state(self) -> DesiredState:
        return DesiredState(
            children={
                "sections": _children(self.sections),
                "video_section": _children([self.video_section] if self.video_section else []),
                "information_section": _children(
                    [self.information_section] if self.information_section else []
                ),
            }
        )


# ── Patient instructions ─────────────────────────────────────────────

class InstructionCardInput(_ChildInput):
    media_fields: ClassVar[dict[str, str]] = {
        "background_image": "background_image",
        "content_image": "content_image",
        "downloadable_file": "downloadable_file",
    }
    field_names: ClassVar[tuple[str, ...]] = ("content_title", "content_description")

    content_title: str = Field(..., min_length=1)
    content_description: str = Field(..., min_length=1)
    background_image: str | None = None
    content_image: str | None = None
    downloadable_file: str | None = None

    @model_validator(mode="after")
    def _background_required(self) -> "InstructionCardInput":
        if not self._has_media("background_image"):
            raise ValueError("Background image is required")
        return self


class PatientInstructionsInput(_ContentInput):
    """Body of PUT /patient-instructions."""

    media_fields: ClassVar[dict[str, str]] = {"banner_image": "banner_image"}

    banner_image: str | None = None
    cards: list[InstructionCardInput] = Field(default_factory=list, validate_default=True)

    @field_validator("cards")
    @classmethod
    def _at_least_one_card(cls, value: list[InstructionCardInput]) -> list[InstructionCardInput]:
        if not value:
            raise ValueError("At least one card is required")
        return value

    def to_desired_state(self) -> DesiredState:
        return DesiredState(
            media=self._retained_media(),
            uploads=dict(self.uploads),
            children={"cards": _children(self.cards)},
        )


# ── Homepage settings ────────────────────────────────────────────────

class HomepageSettingsInput(_ContentInput):
    """Body of POST /homepage-settings.

    ``background_media_url`` is the currently stored media, kept unless a new
    file replaces it.
    """

    media_fields: ClassVar[dict[str, str]] = {"background_media": "background_media_url"}

    background_color: str | None = None
    background_opacity: int = 100
    background_media_url: str | None = None

    @field_validator("background_opacity", mode="before")
    @classmethod
    def _parse_opacity(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return 100
        try:
            opacity = int(value)
        except (TypeError, ValueError):
            opacity = -1
        if not 0 <= opacity <= 100:
            raise ValueError("Background opacity must be a number between 0 and 100")
        return opacity

    @model_validator(mode="after")
    def _background_required(self) -> "HomepageSettingsInput":
        upload = self.uploads.get("background_media")
        if upload is not None and upload.content_type not in ALLOWED_BACKGROUND_TYPES:
            raise ValueError(
                "Invalid file type. Supported formats: JPEG, PNG, GIF, WebP, MP4, WebM, MOV"
            )
        if not (self._has_media("background_media") or self.background_color):
            raise ValueError("Either background media or background color must be provided")
        return self

    def to_desired_state(self) -> DesiredState:
        return DesiredState(
            fields=self._scalar_fields("background_color", "background_opacity"),
            media=self._retained_media(),
            uploads=dict(self.uploads),
        )


# ── Policies ─────────────────────────────────────────────────────────

class PolicyInput(_ContentInput):
    """Body of POST /office-policy, /privacy-policy and /terms-of-service."""

    hosting_date: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)

    def to_desired_state(self) -> DesiredState:
        return DesiredState(fields=self._scalar_fields("hosting_date", "description"))
