from .content_record_repository import SQLAlchemyContentRecordRepository

__all__ = [
    "SQLAlchemyContentRecordRepository",
]
