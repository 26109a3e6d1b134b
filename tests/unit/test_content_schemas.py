"""Unit tests for content request schemas and form parsing."""

import io

import pytest
from starlette.datastructures import FormData, Headers, UploadFile

from clinic_cms.application.schemas import (
    CardPageInput,
    FirstVisitInput,
    HomepageSettingsInput,
    PatientInstructionsInput,
    PolicyInput,
)
from clinic_cms.domain import content_kinds
from clinic_cms.domain.entities import PendingUpload
from clinic_cms.domain.exceptions import ContentValidationError
from clinic_cms.presentation.api.v1.content_forms import parse_content_form, validate_content

MB = 1024 * 1024


def _file(content: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def _png() -> PendingUpload:
    return PendingUpload(content=b"png", filename="a.png", content_type="image/png")


# ── Card pages ──


def test_card_section_accepts_camel_case_and_defaults_sort_order():
    page = CardPageInput.model_validate(
        {
            "sections": [
                {"title": "A", "cardStyle": "CARDSTYLE2", "imageUrl": "https://h/a.jpg"},
                {"descriptionTitle": "B", "cardStyle": "CARDSTYLE1", "sortOrder": "7"},
            ]
        }
    )

    desired = page.to_desired_state()
    first, second = desired.children["sections"]
    assert first.sort_order == 0
    assert first.fields["card_style"] == "CARDSTYLE2"
    assert first.media == {"image": "https://h/a.jpg"}
    assert second.sort_order == 7
    assert second.fields["description_title"] == "B"


def test_card_section_rejects_unknown_style():
    with pytest.raises(ContentValidationError) as exc_info:
        validate_content(CardPageInput, {"sections": [{"title": "A", "cardStyle": "FANCY"}]})

    assert exc_info.value.field.startswith("sections.0")


def test_card_section_requires_some_content():
    with pytest.raises(ContentValidationError, match="at least one of image"):
        validate_content(CardPageInput, {"sections": [{"cardStyle": "CARDSTYLE1", "title": ""}]})


def test_card_section_with_only_an_upload_is_valid():
    page = validate_content(
        CardPageInput, {"sections": [{"cardStyle": "CARDSTYLE3", "uploads": {"image": _png()}}]}
    )

    assert "image" in page.to_desired_state().children["sections"][0].uploads


# ── First visit ──


def test_first_visit_requires_section_description():
    with pytest.raises(ContentValidationError):
        validate_content(FirstVisitInput, {"sections": [{"title": "Welcome"}]})


def test_first_visit_video_url_must_be_http():
    with pytest.raises(ContentValidationError, match="valid http"):
        validate_content(FirstVisitInput, {"videoSection": {"videoUrl": "ftp://x/video"}})


def test_first_visit_absent_subsections_become_empty_collections():
    desired = validate_content(FirstVisitInput, {"sections": []}).to_desired_state()

    assert desired.children["video_section"] == []
    assert desired.children["information_section"] == []


# ── Patient instructions ──


def test_patient_instructions_need_a_card():
    with pytest.raises(ContentValidationError, match="At least one card is required"):
        validate_content(PatientInstructionsInput, {})


def test_instruction_card_requires_background_image():
    with pytest.raises(ContentValidationError, match="Background image is required"):
        validate_content(
            PatientInstructionsInput,
            {"cards": [{"contentTitle": "Aftercare", "contentDescription": "Rest"}]},
        )


def test_instruction_card_maps_media_slots():
    page = validate_content(
        PatientInstructionsInput,
        {
            "bannerImage": "https://h/banner.jpg",
            "cards": [
                {
                    "contentTitle": "Aftercare",
                    "contentDescription": "Rest",
                    "backgroundImage": "https://h/bg.jpg",
                    "downloadableFile": "https://h/guide.pdf",
                }
            ],
        },
    )

    desired = page.to_desired_state()
    assert desired.media == {"banner_image": "https://h/banner.jpg"}
    assert desired.children["cards"][0].media == {
        "background_image": "https://h/bg.jpg",
        "content_image": None,
        "downloadable_file": "https://h/guide.pdf",
    }


# ── Homepage settings ──


def test_homepage_needs_media_or_colour():
    with pytest.raises(ContentValidationError, match="Either background media or background color"):
        validate_content(HomepageSettingsInput, {"backgroundOpacity": "50"})


@pytest.mark.parametrize("opacity", ["-1", "101", "half"])
def test_homepage_opacity_range(opacity):
    with pytest.raises(ContentValidationError, match="between 0 and 100"):
        validate_content(
            HomepageSettingsInput, {"backgroundColor": "#fff", "backgroundOpacity": opacity}
        )


def test_homepage_rejects_unsupported_file_type():
    pdf = PendingUpload(content=b"%PDF", filename="a.pdf", content_type="application/pdf")

    with pytest.raises(ContentValidationError, match="Invalid file type"):
        validate_content(HomepageSettingsInput, {"uploads": {"background_media": pdf}})


def test_homepage_defaults_opacity_to_full():
    settings = validate_content(HomepageSettingsInput, {"backgroundColor": "#123456"})

    assert settings.to_desired_state().fields == {
        "background_color": "#123456",
        "background_opacity": 100,
    }


# ── Policies ──


def test_policy_requires_both_fields():
    with pytest.raises(ContentValidationError):
        validate_content(PolicyInput, {"hostingDate": "2024-01-01", "description": " "})

    policy = validate_content(PolicyInput, {"hosting_date": "2024-01-01", "description": "Text"})
    assert policy.to_desired_state().fields == {"hosting_date": "2024-01-01", "description": "Text"}


# ── Form parsing ──


@pytest.mark.asyncio
async def test_parse_form_groups_indexed_items_and_uploads():
    form = FormData(
        [
            ("sectionsCount", "2"),
            ("sections[0][id]", "item-1"),
            ("sections[0][title]", "A"),
            ("sections[0][cardStyle]", "CARDSTYLE1"),
            ("sections[0][imageUrl]", "https://h/a.jpg"),
            ("sections[1][title]", "B"),
            ("sections[1][cardStyle]", "CARDSTYLE2"),
            ("sections[1][imageFile]", _file(b"png-bytes", "b.png", "image/png")),
        ]
    )

    payload = await parse_content_form(form, content_kinds.SAFE, max_upload_bytes=MB)

    first, second = payload["sections"]
    assert first == {
        "id": "item-1",
        "title": "A",
        "cardStyle": "CARDSTYLE1",
        "imageUrl": "https://h/a.jpg",
    }
    upload = second["uploads"]["image"]
    assert upload.content == b"png-bytes"
    assert upload.content_type == "image/png"
    assert "sectionsCount" not in payload


@pytest.mark.asyncio
async def test_parse_form_single_sections_and_empty_file_inputs():
    form = FormData(
        [
            ("sectionsCount", "0"),
            ("videoSection[videoUrl]", "https://youtu.be/x"),
            ("informationSection[id]", "item-9"),
            ("informationSection[imageFile]", _file(b"", "", "application/octet-stream")),
        ]
    )

    payload = await parse_content_form(form, content_kinds.FIRST_VISIT, max_upload_bytes=MB)

    assert payload["sections"] == []
    assert payload["videoSection"] == {"videoUrl": "https://youtu.be/x"}
    assert "informationSection" not in payload


@pytest.mark.asyncio
async def test_parse_form_maps_file_suffix_to_slot():
    form = FormData(
        [
            ("bannerImageFile", _file(b"banner", "banner.jpg", "image/jpeg")),
            ("cardsCount", "1"),
            ("cards[0][contentTitle]", "T"),
            ("cards[0][downloadableFileFile]", _file(b"%PDF", "guide.pdf", "application/pdf")),
        ]
    )

    payload = await parse_content_form(form, content_kinds.PATIENT_INSTRUCTIONS, max_upload_bytes=MB)

    assert set(payload["uploads"]) == {"banner_image"}
    assert set(payload["cards"][0]["uploads"]) == {"downloadable_file"}


@pytest.mark.asyncio
async def test_parse_form_rejects_oversized_file():
    form = FormData([("backgroundMedia", _file(b"x" * 2048, "bg.png", "image/png"))])

    with pytest.raises(ContentValidationError, match="File size must be less than"):
        await parse_content_form(form, content_kinds.HOMEPAGE_SETTINGS, max_upload_bytes=1024)


@pytest.mark.asyncio
async def test_parse_form_count_never_exceeds_posted_items():
    form = FormData(
        [
            ("sectionsCount", "10000000"),
            ("sections[0][title]", "A"),
            ("sections[0][cardStyle]", "CARDSTYLE1"),
        ]
    )

    payload = await parse_content_form(form, content_kinds.SAFE, max_upload_bytes=MB)

    assert payload["sections"] == [{"title": "A", "cardStyle": "CARDSTYLE1"}]


@pytest.mark.asyncio
async def test_parse_form_count_still_trims_trailing_items():
    form = FormData(
        [
            ("sectionsCount", "1"),
            ("sections[0][title]", "A"),
            ("sections[0][cardStyle]", "CARDSTYLE1"),
            ("sections[1][title]", "stale"),
            ("sections[1][cardStyle]", "CARDSTYLE1"),
        ]
    )

    payload = await parse_content_form(form, content_kinds.SAFE, max_upload_bytes=MB)

    assert [s["title"] for s in payload["sections"]] == ["A"]


# ── Uploads come from multipart files only ──


@pytest.mark.parametrize(
    "uploads",
    [
        {"image": {"content": "eA==", "filename": "big.png", "content_type": "image/png"}},
        {"image": "https://elsewhere.test/a.png"},
        ["image"],
    ],
)
def test_uploads_cannot_be_described_by_request_data(uploads):
    with pytest.raises(ContentValidationError, match="Files must be sent as multipart file fields"):
        validate_content(
            CardPageInput,
            {"sections": [{"cardStyle": "CARDSTYLE1", "title": "A", "uploads": uploads}]},
        )


def test_top_level_uploads_cannot_be_described_by_request_data():
    with pytest.raises(ContentValidationError, match="Files must be sent as multipart file fields"):
        validate_content(
            HomepageSettingsInput,
            {"backgroundColor": "#fff", "uploads": {"background_media": {"content": "AA=="}}},
        )
