"""Pydantic DTOs for the clinic's entry collections.

Team members, service categories, services, technologies and contact
messages. Entry forms post the same bracket convention and ``...File`` /
``...Url`` media pairs as the content pages.
"""

from enum import Enum
from typing import Any, ClassVar
from urllib.parse import urlparse

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from clinic_cms.domain.entities import ContentRecord, DesiredState

from .content import ApiEnvelope, ContentRecordResponse, _ChildInput, _children, _ContentInput

MEMBER_IMAGE_MAX_BYTES = 5 * 1024 * 1024


def _http_url(value: str | None, message: str) -> str | None:
    if value is None:
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(message)
    return value


# ── Responses ────────────────────────────────────────────────────────

class CategoryResponse(ContentRecordResponse):
    services_count: int = 0

    @classmethod
    def from_category(cls, record: ContentRecord, services_count: int) -> "CategoryResponse":
        base = ContentRecordResponse.from_entity(record)
        return cls(**base.model_dump(), services_count=services_count)


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class PaginatedEnvelope(ApiEnvelope):
    pagination: Pagination | None = None


# ── Team members ─────────────────────────────────────────────────────

class TeamType(str, Enum):
    DOCTORS = "DOCTORS"
    CONSULTANT_SPECIALISTS = "CONSULTANT_SPECIALISTS"
    ALLIED_HEALTH_SUPPORT_STAFF = "ALLIED_HEALTH_SUPPORT_STAFF"


class TeamMemberInput(_ContentInput):
    """Body of POST /team-members and PUT /team-members/{id}."""

    media_fields: ClassVar[dict[str, str]] = {"image": "image_url"}

    name: str | None = None
    designation: str | None = None
    team: TeamType | None = None
    description: str | None = None
    is_active: bool | None = None
    image_url: str | None = None

    @field_validator("team", mode="before")
    @classmethod
    def _known_team(cls, value: Any) -> Any:
        if not value:
            return None
        if value not in {t.value for t in TeamType}:
            raise ValueError("Invalid team selected")
        return value

    @model_validator(mode="after")
    def _check_member(self) -> "TeamMemberInput":
        if not (self.name and self.team and self.description):
            raise ValueError("Member name, team, and description are required")
        upload = self.uploads.get("image")
        if upload is not None:
            if not upload.content_type.startswith("image/"):
                raise ValueError("Only image files are allowed")
            if upload.size > MEMBER_IMAGE_MAX_BYTES:
                raise ValueError("Image size should be less than 5MB")
        return self

    def to_desired_state(self) -> DesiredState:
        return DesiredState(
            fields=self._scalar_fields("name", "designation", "team", "description", "is_active"),
            media=self._retained_media(),
            uploads=dict(self.uploads),
        )


class MemberOrderInput(BaseModel):
    sort_order: int = Field(alias="sortOrder")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("sort_order", mode="before")
    @classmethod
    def _number(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("Sort order must be a number")
        return int(value)


# ── Categories ───────────────────────────────────────────────────────

class CategoryInput(BaseModel):
    """Body of POST /categories and PUT /categories/{id}."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = None

    @field_validator("title")
    @classmethod
    def _title_length(cls, value: str | None) -> str | None:
        if not value:
            raise ValueError("Category title is required")
        if len(value) < 2:
            raise ValueError("Category title must be at least 2 characters")
        if len(value) > 100:
            raise ValueError("Category title must be less than 100 characters")
        return value

    @model_validator(mode="after")
    def _title_present(self) -> "CategoryInput":
        if not self.title:
            raise ValueError("Category title is required")
        return self

    def to_desired_state(self) -> DesiredState:
        return DesiredState(fields={"title": self.title})


# ── Services ─────────────────────────────────────────────────────────

class ServiceCardInput(_ChildInput):
    media_fields: ClassVar[dict[str, str]] = {"image": "image_url"}
    field_names: ClassVar[tuple[str, ...]] = ("title", "description")

    title: str | None = None
    description: str = Field(..., min_length=1)
    image_url: str | None = None


class PriceRangeInput(_ChildInput):
    field_names: ClassVar[tuple[str, ...]] = ("title", "start_price", "end_price")

    title: str = Field(..., min_length=1)
    start_price: float = Field(..., ge=0)
    end_price: float = Field(..., ge=0)


class ServiceInput(_ContentInput):
    """Body of POST /services and PUT /services/{id}; sections 1-5 are optional."""

    media_fields: ClassVar[dict[str, str]] = {
        "image": "image_url",
        "section1_image": "section1_image_url",
        "section3_image": "section3_image_url",
        "section5_image": "section5_image_url",
    }
    field_names: ClassVar[tuple[str, ...]] = (
        "category_id",
        "name",
        "overview",
        "section1_title",
        "section1_description",
        "section2_video_url",
        "section3_title",
        "section3_description",
        "section4_title",
        "section5_title",
    )

    category_id: str | None = None
    name: str | None = None
    overview: str | None = None
    image_url: str | None = None
    section1_title: str | None = None
    section1_description: str | None = None
    section1_image_url: str | None = None
    section2_video_url: str | None = None
    section3_title: str | None = None
    section3_description: str | None = None
    section3_image_url: str | None = None
    section4_title: str | None = None
    section4_cards: list[ServiceCardInput] = Field(default_factory=list)
    section5_title: str | None = None
    section5_image_url: str | None = None
    section5_price_ranges: list[PriceRangeInput] = Field(default_factory=list)

    @field_validator("section2_video_url")
    @classmethod
    def _video_url(cls, value: str | None) -> str | None:
        return _http_url(value, "Video URL must be a valid http(s) URL")

    @model_validator(mode="after")
    def _required(self) -> "ServiceInput":
        if not (self.category_id and self.name and self.overview and self._has_media("image")):
            raise ValueError("Category ID, name, overview, and image are required")
        return self

    def to_desired_state(self) -> DesiredState:
        return DesiredState(
            fields=self._scalar_fields(*self.field_names),
            media=self._retained_media(),
            uploads=dict(self.uploads),
            children={
                "section4_cards": _children(self.section4_cards),
                "section5_price_ranges": _children(self.section5_price_ranges),
            },
        )


# ── Technologies ─────────────────────────────────────────────────────

class TechnologyCardStyle(str, Enum):
    CARDSTYLE1 = "CARDSTYLE1"
    CARDSTYLE2 = "CARDSTYLE2"


class TechnologySectionInput(_ChildInput):
    media_fields: ClassVar[dict[str, str]] = {"image": "image_url"}
    field_names: ClassVar[tuple[str, ...]] = ("title", "description")

    title: str | None = None
    description: str | None = None
    image_url: str | None = None


class TechnologyCardInput(TechnologySectionInput):
    pass


class TechnologyInput(_ContentInput):
    """Body of POST /technologies and PUT /technologies/{id}."""

    media_fields: ClassVar[dict[str, str]] = {"image": "image_url"}

    card_style: TechnologyCardStyle | None = None
    title: str | None = None
    overview: str | None = None
    description: str | None = None
    image_url: str | None = None
    section1: TechnologySectionInput | None = None
    cards: list[TechnologyCardInput] = Field(default_factory=list)

    @field_validator("card_style", mode="before")
    @classmethod
    def _known_style(cls, value: Any) -> Any:
        if value not in {s.value for s in TechnologyCardStyle}:
            raise ValueError("Please select a valid card style.")
        return value

    @model_validator(mode="after")
    def _required(self) -> "TechnologyInput":
        if self.card_style is None:
            raise ValueError("Please select a valid card style.")
        if not (self.title and self.overview and self._has_media("image")):
            raise ValueError("Title, overview, and main image are required")
        return self

    def to_desired_state(self) -> DesiredState:
        return DesiredState(
            fields=self._scalar_fields("card_style", "title", "overview", "description"),
            media=self._retained_media(),
            uploads=dict(self.uploads),
            children={
                "section1": _children([self.section1] if self.section1 else []),
                "cards": _children(self.cards),
            },
        )


# ── Contact messages ─────────────────────────────────────────────────

class ContactMessageInput(BaseModel):
    """Body of POST /contact, sent by the public contact form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    name: str = ""
    email_id: EmailStr
    mobile_number: str = ""
    message: str = ""

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters.")
        return value

    @field_validator("email_id", mode="wrap")
    @classmethod
    def _email(cls, value: Any, handler) -> str:
        try:
            return handler(value)
        except ValidationError:
            raise ValueError("Please enter a valid email address.") from None

    @field_validator("mobile_number")
    @classmethod
    def _mobile(cls, value: str) -> str:
        if len(value) < 10:
            raise ValueError("Please enter a valid mobile number.")
        return value

    @field_validator("message")
    @classmethod
    def _message(cls, value: str) -> str:
        if len(value) < 10:
            raise ValueError("Message must be at least 10 characters.")
        return value

    def to_desired_state(self) -> DesiredState:
        return DesiredState(
            fields={
                "name": self.name,
                "email_id": str(self.email_id),
                "mobile_number": self.mobile_number,
                "message": self.message,
            }
        )
