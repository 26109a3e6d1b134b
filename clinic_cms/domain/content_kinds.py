"""Catalogue of the clinic site's content kinds: singleton pages and entry collections."""

from clinic_cms.domain.entities import CollectionSpec, ContentKind

HOMEPAGE_SETTINGS = ContentKind(
    name="homepage-settings",
    label="Homepage settings",
    upload_folder="homepage-backgrounds",
    media_slots=("background_media",),
)


def _card_page(name: str, label: str) -> ContentKind:
    return ContentKind(
        name=name,
        label=label,
        upload_folder=name,
        collections=(CollectionSpec("sections", media_slots=("image",)),),
    )


SAFE = _card_page("safe", "Safe")
PRECISE = _card_page("precise", "Precise")
PERSONAL = _card_page("personal", "Personal")

FIRST_VISIT = ContentKind(
    name="first-visit",
    label="First visit",
    upload_folder="first-visit",
    collections=(
        CollectionSpec("sections", media_slots=("image",)),
        CollectionSpec("video_section", max_items=1),
        CollectionSpec("information_section", media_slots=("image",), max_items=1),
    ),
)

PATIENT_INSTRUCTIONS = ContentKind(
    name="patient-instructions",
    label="Patient instructions",
    upload_folder="patient-instructions",
    media_slots=("banner_image",),
    collections=(
        CollectionSpec(
            "cards",
            media_slots=("background_image", "content_image", "downloadable_file"),
        ),
    ),
)

OFFICE_POLICY = ContentKind(name="office-policy", label="Office policy", upload_folder="office-policy")
PRIVACY_POLICY = ContentKind(name="privacy-policy", label="Privacy policy", upload_folder="privacy-policy")
TERMS_OF_SERVICE = ContentKind(
    name="terms-of-service", label="Terms of service", upload_folder="terms-of-service"
)

# ── Entry collections (many records per kind) ──────────────────────

TEAM_MEMBER = ContentKind(
    name="team-member",
    label="Team member",
    upload_folder="team-members",
    media_slots=("image",),
)

CATEGORY = ContentKind(name="category", label="Category", upload_folder="categories")

DENTAL_SERVICE = ContentKind(
    name="service",
    label="Service",
    upload_folder="services",
    media_slots=("image", "section1_image", "section3_image", "section5_image"),
    collections=(
        CollectionSpec("section4_cards", media_slots=("image",)),
        CollectionSpec("section5_price_ranges"),
    ),
)

TECHNOLOGY = ContentKind(
    name="technology",
    label="Technology",
    upload_folder="technologies",
    media_slots=("image",),
    collections=(
        CollectionSpec("section1", media_slots=("image",), max_items=1),
        CollectionSpec("cards", media_slots=("image",)),
    ),
)

CONTACT_MESSAGE = ContentKind(
    name="contact-message",
    label="Contact message",
    upload_folder="contact-messages",
)
