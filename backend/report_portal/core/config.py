from pydantic_settings import BaseSettings
from typing import List, Any
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Report Portal"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    API_VERSION: str = "v1"

    # ==========================================
    # Database (document store)
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./report_portal.db"
    DB_ECHO: bool = False

    # ==========================================
    # Identity provider tokens
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # ==========================================
    # CORS
    # ==========================================
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    # ==========================================
    # Image fetching for exports
    # ==========================================
    IMAGE_FETCH_TIMEOUT: float = 15.0  # seconds per image request
    IMAGE_PROBE_TIMEOUT: float = 4.0  # seconds to decode/measure an image before falling back to 4:3
    IMAGE_MAX_BYTES: int = 20 * 1024 * 1024

    # ==========================================
    # Export branding
    # ==========================================
    EXPORT_FOOTER_TEXT: str = "Report Portal | Internal Use Only"
    EXPORT_FONT_FACE: str = "Malgun Gothic"

    # ==========================================
    # Pagination
    # ==========================================
    DEFAULT_PAGE_SIZE: int = 10
    REPORT_BOARD_PAGE_SIZE: int = 9
    MAX_PAGE_SIZE: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.LOG_FILE:
            Path(self.LOG_FILE).parent.mkdir(exist_ok=True, parents=True)

    def get_cors_origins(self) -> List[str]:
        """Get CORS origins as a list"""
        return parse_cors_origins(self.CORS_ORIGINS)

    def is_dev_mode(self) -> bool:
        """Check if running in development mode"""
        return self.ENVIRONMENT == "development" or self.DEBUG


# Create settings instance
settings = Settings()
