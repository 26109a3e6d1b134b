"""Unit tests for the entry collection request schemas."""

import io

import pytest
from starlette.datastructures import FormData, Headers, UploadFile

from clinic_cms.application.schemas import (
    CategoryInput,
    ContactMessageInput,
    MemberOrderInput,
    ServiceInput,
    TeamMemberInput,
    TechnologyInput,
)
from clinic_cms.domain import content_kinds
from clinic_cms.domain.entities import PendingUpload
from clinic_cms.domain.exceptions import ContentValidationError
from clinic_cms.presentation.api.v1.content_forms import parse_content_form, validate_content

MB = 1024 * 1024


def _png(size: int = 3) -> PendingUpload:
    return PendingUpload(content=b"p" * size, filename="a.png", content_type="image/png")


# ── Team members ──


def test_team_member_maps_to_desired_state():
    member = validate_content(
        TeamMemberInput,
        {
            "name": "Dr. Lee",
            "designation": "",
            "team": "DOCTORS",
            "description": "Implant surgeon",
            "imageUrl": "https://media.test/image/upload/v1/team-members/lee.png",
        },
    )

    desired = member.to_desired_state()
    assert desired.fields == {
        "name": "Dr. Lee",
        "designation": None,
        "team": "DOCTORS",
        "description": "Implant surgeon",
        "is_active": None,
    }
    assert desired.media == {"image": "https://media.test/image/upload/v1/team-members/lee.png"}


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"name": "A", "team": "DOCTORS"}, "Member name, team, and description are required"),
        ({"name": "A", "team": "NURSES", "description": "d"}, "Invalid team selected"),
    ],
)
def test_team_member_rejects_incomplete_details(payload, message):
    with pytest.raises(ContentValidationError, match=message):
        validate_content(TeamMemberInput, payload)


def test_team_member_image_must_be_a_small_image():
    base = {"name": "A", "team": "DOCTORS", "description": "d"}
    pdf = PendingUpload(content=b"%PDF", filename="cv.pdf", content_type="application/pdf")

    with pytest.raises(ContentValidationError, match="Only image files are allowed"):
        validate_content(TeamMemberInput, {**base, "uploads": {"image": pdf}})
    with pytest.raises(ContentValidationError, match="Image size should be less than 5MB"):
        validate_content(TeamMemberInput, {**base, "uploads": {"image": _png(5 * MB + 1)}})


def test_member_order_must_be_a_number():
    assert MemberOrderInput.model_validate({"sortOrder": 3}).sort_order == 3
    with pytest.raises(ContentValidationError, match="Sort order must be a number"):
        validate_content(MemberOrderInput, {"sortOrder": "third"})


# ── Categories ──


@pytest.mark.parametrize(
    "title, message",
    [
        ("   ", "Category title is required"),
        ("A", "at least 2 characters"),
        ("x" * 101, "less than 100 characters"),
    ],
)
def test_category_title_length(title, message):
    with pytest.raises(ContentValidationError, match=message):
        validate_content(CategoryInput, {"title": title})


def test_category_title_is_required_when_absent():
    with pytest.raises(ContentValidationError, match="Category title is required"):
        validate_content(CategoryInput, {})


# ── Services ──


def test_service_needs_category_name_overview_and_image():
    with pytest.raises(ContentValidationError, match="Category ID, name, overview, and image are required"):
        validate_content(ServiceInput, {"categoryId": "rec-1", "name": "Implant", "overview": "o"})


def test_service_maps_sections_and_price_ranges():
    service = validate_content(
        ServiceInput,
        {
            "categoryId": "rec-1",
            "name": "Implant",
            "overview": "o",
            "section2VideoUrl": "https://youtu.be/x",
            "uploads": {"image": _png()},
            "section4Cards": [{"description": "Painless"}],
            "section5PriceRanges": [{"title": "Single", "startPrice": "1200", "endPrice": "1800"}],
        },
    )

    desired = service.to_desired_state()
    assert desired.fields["category_id"] == "rec-1"
    assert set(desired.uploads) == {"image"}
    assert desired.children["section4_cards"][0].fields == {"title": None, "description": "Painless"}
    assert desired.children["section5_price_ranges"][0].fields["start_price"] == 1200.0


def test_service_rejects_negative_price_and_bad_video_url():
    base = {"categoryId": "rec-1", "name": "Implant", "overview": "o", "uploads": {"image": _png()}}

    with pytest.raises(ContentValidationError):
        validate_content(
            ServiceInput,
            {**base, "section5PriceRanges": [{"title": "T", "startPrice": "-1", "endPrice": "5"}]},
        )
    with pytest.raises(ContentValidationError, match="Video URL must be a valid http"):
        validate_content(ServiceInput, {**base, "section2VideoUrl": "youtube"})


# ── Technologies ──


def test_technology_requires_known_card_style():
    base = {"title": "Laser", "overview": "o", "uploads": {"image": _png()}}

    with pytest.raises(ContentValidationError, match="Please select a valid card style."):
        validate_content(TechnologyInput, {**base, "cardStyle": "CARDSTYLE3"})
    with pytest.raises(ContentValidationError, match="Please select a valid card style."):
        validate_content(TechnologyInput, base)


def test_technology_maps_section_and_cards():
    technology = validate_content(
        TechnologyInput,
        {
            "cardStyle": "CARDSTYLE2",
            "title": "Laser",
            "overview": "o",
            "imageUrl": "https://media.test/image/upload/v1/technologies/laser.png",
            "section1": {"title": "How it works"},
            "cards": [{"title": "Fast"}, {"title": "Precise"}],
        },
    )

    desired = technology.to_desired_state()
    assert desired.fields["card_style"] == "CARDSTYLE2"
    assert [c.fields["title"] for c in desired.children["section1"]] == ["How it works"]
    assert [c.sort_order for c in desired.children["cards"]] == [0, 1]


# ── Contact messages ──


def test_contact_message_accepts_camel_case():
    message = validate_content(
        ContactMessageInput,
        {
            "name": "Ann",
            "emailId": "ann@example.com",
            "mobileNumber": "0123456789",
            "message": "Please call me back.",
        },
    )

    assert message.to_desired_state().fields["email_id"] == "ann@example.com"


@pytest.mark.parametrize(
    "override, message",
    [
        ({"name": "A"}, "Name must be at least 2 characters."),
        ({"emailId": "not-an-email"}, "Please enter a valid email address."),
        ({"mobileNumber": "123"}, "Please enter a valid mobile number."),
        ({"message": "Hi"}, "Message must be at least 10 characters."),
    ],
)
def test_contact_message_rules(override, message):
    payload = {
        "name": "Ann",
        "emailId": "ann@example.com",
        "mobileNumber": "0123456789",
        "message": "Please call me back.",
        **override,
    }

    with pytest.raises(ContentValidationError, match=message):
        validate_content(ContactMessageInput, payload)


# ── Form parsing for entries ──


@pytest.mark.asyncio
async def test_service_form_maps_numbered_section_files_to_slots():
    form = FormData(
        [
            ("categoryId", "rec-1"),
            ("imageFile", UploadFile(file=io.BytesIO(b"main"), filename="m.png",
                                     headers=Headers({"content-type": "image/png"}))),
            ("section1ImageFile", UploadFile(file=io.BytesIO(b"one"), filename="s1.png",
                                             headers=Headers({"content-type": "image/png"}))),
            ("section4CardsCount", "1"),
            ("section4Cards[0][description]", "Painless"),
        ]
    )

    payload = await parse_content_form(form, content_kinds.DENTAL_SERVICE, max_upload_bytes=MB)

    assert set(payload["uploads"]) == {"image", "section1_image"}
    assert payload["section4Cards"] == [{"description": "Painless"}]
    assert payload["section5PriceRanges"] == []
