from .content_models import ContentRecordModel, ContentItemModel

__all__ = [
    "ContentRecordModel",
    "ContentItemModel",
]
