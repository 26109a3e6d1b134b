from .content import (
    ApiEnvelope,
    CardPageInput,
    CardSectionInput,
    CardStyle,
    ContentItemResponse,
    FirstVisitInput,
    FirstVisitSectionInput,
    HomepageSettingsInput,
    InformationSectionInput,
    InstructionCardInput,
    MediaAttachmentResponse,
    PatientInstructionsInput,
    PolicyInput,
    ContentRecordResponse,
    VideoSectionInput,
)
from .catalog import (
    CategoryInput,
    CategoryResponse,
    ContactMessageInput,
    MemberOrderInput,
    PaginatedEnvelope,
    Pagination,
    ServiceInput,
    TeamMemberInput,
    TeamType,
    TechnologyInput,
)

__all__ = [
    "ApiEnvelope",
    "CardPageInput",
    "CardSectionInput",
    "CardStyle",
    "ContentItemResponse",
    "FirstVisitInput",
    "FirstVisitSectionInput",
    "HomepageSettingsInput",
    "InformationSectionInput",
    "InstructionCardInput",
    "MediaAttachmentResponse",
    "PatientInstructionsInput",
    "PolicyInput",
    "ContentRecordResponse",
    "VideoSectionInput",
    "CategoryInput",
    "CategoryResponse",
    "ContactMessageInput",
    "MemberOrderInput",
    "PaginatedEnvelope",
    "Pagination",
    "ServiceInput",
    "TeamMemberInput",
    "TeamType",
    "TechnologyInput",
]
