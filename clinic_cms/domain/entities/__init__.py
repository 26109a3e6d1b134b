from .media import (
    MediaAttachment,
    MediaResourceType,
    PendingUpload,
    infer_resource_type,
    public_id_from_url,
)
from .content import ChildItem, ContentRecord, DesiredChild, DesiredState
from .content_kind import CollectionSpec, ContentKind

__all__ = [
    "MediaAttachment",
    "MediaResourceType",
    "PendingUpload",
    "infer_resource_type",
    "public_id_from_url",
    "ChildItem",
    "ContentRecord",
    "DesiredChild",
    "DesiredState",
    "CollectionSpec",
    "ContentKind",
]
