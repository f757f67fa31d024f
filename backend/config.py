# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, List
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./db.sqlite"

    # Public product catalog used for seeding and the /external proxy
    CATALOG_URL: str = "https://fakestoreapi.com/products"
    CATALOG_TIMEOUT: float = 10.0
    SEED_LIMIT: int = 8
    SEED_ON_STARTUP: bool = True

    # No authentication, the user id is only a partition key
    DEFAULT_USER_ID: int = 1

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    PORT: int = 5000

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
