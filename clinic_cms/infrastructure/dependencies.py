"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator, Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_cms.config import get_settings
from clinic_cms.application.interfaces import MediaHost, ContentRecordRepository
from clinic_cms.application.services import (
    CategoryService,
    ContactMessageService,
    ContentEntryStore,
    ServiceCatalogService,
    SingletonContentStore,
    TeamMemberService,
)
from clinic_cms.domain import content_kinds
from clinic_cms.domain.entities import ContentKind
from clinic_cms.infrastructure.database.session import get_db_session
from clinic_cms.infrastructure.database.repositories import SQLAlchemyContentRecordRepository
from clinic_cms.infrastructure.media import CloudinaryMediaHost


async def get_content_record_repository(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ContentRecordRepository, None]:
    """Provides the SQLAlchemy repository bound to the request's session."""
    yield SQLAlchemyContentRecordRepository(session)


def get_media_host() -> MediaHost:
    """Provides the Cloudinary media host configured from settings."""
    settings = get_settings()
    return CloudinaryMediaHost(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        base_url=settings.cloudinary_base_url,
        timeout=settings.media_timeout_seconds,
    )


def content_store_dependency(
    kind: ContentKind,
) -> Callable[..., AsyncGenerator[SingletonContentStore, None]]:
    """Build a dependency that yields a SingletonContentStore for ``kind``."""

    async def get_content_store(
        repository: ContentRecordRepository = Depends(get_content_record_repository),
        media_host: MediaHost = Depends(get_media_host),
    ) -> AsyncGenerator[SingletonContentStore, None]:
        yield SingletonContentStore(kind, repository, media_host)

    return get_content_store


def entry_store_dependency(
    kind: ContentKind,
) -> Callable[..., AsyncGenerator[ContentEntryStore, None]]:
    """Build a dependency that yields a ContentEntryStore for ``kind``."""

    async def get_entry_store(
        repository: ContentRecordRepository = Depends(get_content_record_repository),
        media_host: MediaHost = Depends(get_media_host),
    ) -> AsyncGenerator[ContentEntryStore, None]:
        yield ContentEntryStore(kind, repository, media_host)

    return get_entry_store


get_team_member_store = entry_store_dependency(content_kinds.TEAM_MEMBER)
get_category_store = entry_store_dependency(content_kinds.CATEGORY)
get_service_store = entry_store_dependency(content_kinds.DENTAL_SERVICE)
get_technology_store = entry_store_dependency(content_kinds.TECHNOLOGY)
get_contact_message_store = entry_store_dependency(content_kinds.CONTACT_MESSAGE)


async def get_team_member_service(
    store: ContentEntryStore = Depends(get_team_member_store),
) -> AsyncGenerator[TeamMemberService, None]:
    yield TeamMemberService(store)


async def get_category_service(
    categories: ContentEntryStore = Depends(get_category_store),
    services: ContentEntryStore = Depends(get_service_store),
) -> AsyncGenerator[CategoryService, None]:
    """Provides a CategoryService; both stores share the request's repository."""
    yield CategoryService(categories, services)


async def get_service_catalog_service(
    services: ContentEntryStore = Depends(get_service_store),
    categories: ContentEntryStore = Depends(get_category_store),
) -> AsyncGenerator[ServiceCatalogService, None]:
    yield ServiceCatalogService(services, categories)


async def get_contact_message_service(
    store: ContentEntryStore = Depends(get_contact_message_store),
) -> AsyncGenerator[ContactMessageService, None]:
    yield ContactMessageService(store)
