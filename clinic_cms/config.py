import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_config_logger = logging.getLogger(__name__)

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Clinic CMS API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///./clinic_cms.db"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Cloudinary media host
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_base_url: str = "https://api.cloudinary.com/v1_1"
    media_timeout_seconds: float = 60.0

    # Upload limits
    max_upload_size_mb: int = 10

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_store: str = "INFO"            # SingletonContentStore stages
    log_level_media: str = "INFO"            # Cloudinary media host

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @property
    def media_configured(self) -> bool:
        """True when all Cloudinary credentials are present."""
        return bool(
            self.cloudinary_cloud_name.strip()
            and self.cloudinary_api_key.strip()
            and self.cloudinary_api_secret.strip()
        )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    def model_post_init(self, __context: object) -> None:
        if not self.media_configured:
            _config_logger.warning(
                "Cloudinary credentials are not configured; media uploads will fail."
            )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
