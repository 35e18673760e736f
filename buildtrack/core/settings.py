# buildtrack/core/settings.py
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from typing import Annotated, List, Optional
from pydantic import field_validator

class Settings(BaseSettings):
    """
    Environment variables and application settings.
    Values come from the process environment or .env.
    """
    # Database
    DATABASE_URL: str

    # JWT / Security
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30

    # First superuser, created by initial_data
    FIRST_SUPERUSER_USERNAME: str
    FIRST_SUPERUSER_EMAIL: str
    FIRST_SUPERUSER_PASSWORD: str

    # App meta
    ENV: str = "development"
    DEBUG: bool = True
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = ["http://localhost:3000", "http://localhost:8000"]

    # i18n
    SUPPORTED_LOCALES: Annotated[List[str], NoDecode] = ["en", "es", "fr", "pt-BR"]
    DEFAULT_LOCALE: str = "en"
    TRANSLATION_CACHE_TTL_SECONDS: int = 3600
    TRANSLATION_CACHE_FILE: Optional[str] = None
    MESSAGES_DIR: Optional[str] = None

    # Lokalise (translation management)
    LOKALISE_API_KEY: Optional[str] = None
    LOKALISE_PROJECT_ID: Optional[str] = None
    LOKALISE_BASE_URL: str = "https://api.lokalise.com/api2"

    @field_validator("ALLOWED_ORIGINS", "SUPPORTED_LOCALES", mode="before")
    @classmethod
    def split_csv(cls, v):
        if isinstance(v, str) and not v.strip().startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

settings = Settings()
