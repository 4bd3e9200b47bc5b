from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
# Load environment variables from .env file
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    """Application settings configuration using Pydantic.

    This centralizes all environment variables and configuration settings.
    Values can be overridden by environment variables with the same name.
    """
    # Database settings - any SQLAlchemy async URL (aiosqlite or asyncpg)
    DATABASE_URL: str = "sqlite+aiosqlite:///./devevent.db"

    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "DevEvent API"
    DEBUG: bool = False

    # CORS settings
    CORS_ORIGINS: list[str] = [
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in validation
    )


@lru_cache
def get_settings() -> Settings:
    """Create cached instance of settings.

    Returns:
        Settings: Application settings
    """
    return Settings()
