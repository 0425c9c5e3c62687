# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./ecom_backend.db"

    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Upper bound for a single blocking storage call (busy timeout / statement timeout)
    STORAGE_TIMEOUT_SECONDS: int = 10

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"
    GUEST_NAME_PREFIX: str = "Guest"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
