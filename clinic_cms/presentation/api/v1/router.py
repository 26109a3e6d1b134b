"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from clinic_cms.presentation.api.v1.endpoints.health import router as health_router
from clinic_cms.presentation.api.v1.endpoints.content_pages import router as content_pages_router
from clinic_cms.presentation.api.v1.endpoints.homepage_settings import router as homepage_settings_router
from clinic_cms.presentation.api.v1.endpoints.policies import router as policies_router
from clinic_cms.presentation.api.v1.endpoints.team_members import router as team_members_router
from clinic_cms.presentation.api.v1.endpoints.categories import router as categories_router
from clinic_cms.presentation.api.v1.endpoints.services import router as services_router
from clinic_cms.presentation.api.v1.endpoints.technologies import router as technologies_router
from clinic_cms.presentation.api.v1.endpoints.contact import router as contact_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(content_pages_router)
router.include_router(homepage_settings_router)
router.include_router(policies_router)
router.include_router(team_members_router)
router.include_router(categories_router)
router.include_router(services_router)
router.include_router(technologies_router)
router.include_router(contact_router)
