from pydantic_settings import BaseSettings
from typing import Optional, List
import pathlib

class Settings(BaseSettings):
    # Application settings
    ENV: str = "dev"
    DEBUG: bool = False
    VERSION: str = "1.0.0"

    # Database settings
    DATABASE_URL: str = "sqlite:///./forum.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20

    # Listing sizes
    INDEX_ARTICLES_CNT: int = 20
    ARTICLES_WINDOW_SIZE: int = 15
    INDEX_HOT_ARTICLES_CNT: int = 12
    INDEX_PERFECT_ARTICLES_CNT: int = 12
    INDEX_TAGS_CNT: int = 16
    TIMELINE_CNT: int = 16

    # Side panels
    SIDE_RANDOM_ARTICLES_CNT: int = 6
    SIDE_HOT_ARTICLES_CNT: int = 6
    SIDE_TAGS_CNT: int = 20
    SIDE_LATEST_CMTS_CNT: int = 8
    SIDE_CMT_CONTENT_MAX_LEN: int = 32

    # Users and avatars
    DEFAULT_AVATAR_VIEW_MODE: int = 0
    AVATAR_SIZE: int = 48
    AUTH_USER_HEADER: str = "X-Forwarded-User"

    # Serving
    SERVE_PATH: str = "http://localhost:8080"
    STATIC_SERVE_PATH: str = "http://localhost:8080"
    STATIC_DIR: Optional[str] = None
    LANG_DIR: str = str(pathlib.Path(__file__).parent / "i18n")
    DEFAULT_LOCALE: str = "en_US"

    # Security
    ALLOWED_ORIGINS: str = "http://localhost:8080,http://127.0.0.1:8080"
    RATE_LIMIT_PER_MINUTE: int = 60

    @property
    def allowed_origins_list(self) -> List[str]:
        """Convert comma-separated ALLOWED_ORIGINS to list"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def rate_limit(self) -> str:
        return f"{self.RATE_LIMIT_PER_MINUTE}/minute"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "prod"

settings = Settings()
