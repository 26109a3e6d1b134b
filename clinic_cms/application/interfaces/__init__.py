from .content_record_repository import ContentRecordRepository
from .media_host import MediaHost

__all__ = [
    "ContentRecordRepository",
    "MediaHost",
]
