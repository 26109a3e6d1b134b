from .singleton_content_store import SingletonContentStore
from .content_entry_store import ContentEntryStore
from .team_member_service import TeamMemberService
from .category_service import CategoryService
from .service_catalog_service import ServiceCatalogService
from .contact_message_service import ContactMessageService

__all__ = [
    "SingletonContentStore",
    "ContentEntryStore",
    "TeamMemberService",
    "CategoryService",
    "ServiceCatalogService",
    "ContactMessageService",
]
