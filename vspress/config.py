"""
Configuration settings for VS Press
"""

from pydantic_settings import BaseSettings
from typing import List


# Development placeholder; anything signed with it is forgeable
DEFAULT_JWT_SECRET_KEY = "change-me"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Server Configuration
    APP_NAME: str = "VS Press"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8001
    LOG_LEVEL: str = "INFO"

    # Firebase web app identifiers
    FIREBASE_API_KEY: str = ""
    FIREBASE_AUTH_DOMAIN: str = ""
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_STORAGE_BUCKET: str = ""
    FIREBASE_MESSAGING_SENDER_ID: str = ""
    FIREBASE_APP_ID: str = ""

    # Firebase Admin SDK credentials
    FIREBASE_CREDENTIALS_PATH: str = "./firebase-credentials.json"
    # Support for raw JSON credentials (env var)
    FIREBASE_CREDENTIALS_JSON: str = ""
    FIREBASE_EMULATOR_HOST: str = ""
    DEV_MODE: bool = False
    IDENTITY_TOOLKIT_URL: str = "https://identitytoolkit.googleapis.com/v1"

    # Signups with this address get the admin role
    ADMIN_EMAIL: str = ""

    # Session tokens
    JWT_SECRET_KEY: str = DEFAULT_JWT_SECRET_KEY
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    FLASH_TOKEN_EXPIRE_MINUTES: int = 5
    SESSION_COOKIE_NAME: str = "vspress_session"
    FLASH_COOKIE_NAME: str = "vspress_flash"
    THEME_COOKIE_NAME: str = "theme"

    # Content limits
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024
    HOME_ARTICLE_LIMIT: int = 9
    LIST_ARTICLE_LIMIT: int = 50

    # CORS Configuration - Allow all localhost ports in development
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    @property
    def uses_default_secret(self) -> bool:
        return self.JWT_SECRET_KEY in ("", DEFAULT_JWT_SECRET_KEY)

    @property
    def allowed_origins_list(self) -> List[str]:
        """Convert comma-separated origins to list"""
        origins = [origin.strip()
                   for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]
        if self.DEBUG:
            for port in (3000, 5173, self.PORT):
                for host in ("localhost", "127.0.0.1"):
                    origin = f"http://{host}:{port}"
                    if origin not in origins:
                        origins.append(origin)
        return origins

    model_config = {"env_file": ".env",
                    "case_sensitive": True, "extra": "allow"}


# Global settings instance
settings = Settings()
