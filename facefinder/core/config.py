"""Configuration settings for the event photo finder."""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    These settings are loaded from environment variables with the following precedence:
    1. Environment variables
    2. .env file
    3. Default values

    Attributes:
        DESCRIPTOR_LENGTH: Number of elements in every face descriptor
        MATCH_THRESHOLD: Maximum Euclidean distance for two descriptors to be the same person
        IDENTITY_STORE_PATH: File holding this device's enrolled descriptor
        RECORD_STORE_URL: Endpoint of the record store RPC boundary
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",  # No prefix for environment variables
        env_nested_delimiter="__"
    )

    # Core Settings
    PROJECT_NAME: str = "Event Photo Finder"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"

    # CORS Settings
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins(self) -> List[str]:
        """Get list of allowed origins."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Descriptor matching settings
    DESCRIPTOR_LENGTH: int = 128
    MATCH_THRESHOLD: float = 0.6  # Euclidean distance, inclusive

    # Identity store settings
    IDENTITY_STORE_PATH: str = ".facefinder/identity.json"
    IDENTITY_KEY: str = "face_print"

    # Gallery / record store settings
    GALLERY_BACKEND: str = "jsonl"  # "jsonl" or "memory"
    GALLERY_PATH: str = ".facefinder/gallery.jsonl"
    PHOTO_STORAGE_DIR: str = ".facefinder/photos"
    PHOTO_BASE_URL: str = "http://localhost:8000/api/v1/photos"

    # Record store client settings
    RECORD_STORE_URL: str = "http://localhost:8000/api/v1/records"
    RECORD_STORE_TIMEOUT: float = 30.0  # seconds
    RECORD_STORE_MAX_RETRIES: int = 2  # search only, uploads are never retried
    RECORD_STORE_BACKOFF: float = 0.5  # seconds, doubled per attempt

    # Indexing settings
    INDEXING_CONCURRENCY: int = 4

    # Embedding oracle settings
    MODEL_CACHE_DIR: str = ".model_cache"
    MODEL_NAME: str = "buffalo_l"
    MAX_IMAGE_PIXELS: int = 1920 * 1080  # ~2MP (Full HD)

    # Optional settings with defaults
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

settings = Settings()
