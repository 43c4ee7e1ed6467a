from functools import lru_cache
from typing import List, Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./resume_intake.db"

    # File storage (upload / delete-by-key)
    STORAGE_API_KEY: str
    STORAGE_API_URL: str = "https://api.uploadthing.com"
    STORAGE_UPLOAD_PATH: str = "/v6/uploadFiles"
    STORAGE_DELETE_PATH: str = "/v6/deleteFiles"

    # OCR fallback for PDFs without a usable text layer
    OCR_API_KEY: str
    OCR_API_URL: str = "https://api.ocr.space/parse/image"
    MIN_RESUME_TEXT_LENGTH: int = 20

    # Automation workflow that scores the candidate
    AUTOMATION_WEBHOOK_URL: str
    AUTOMATION_API_TOKEN: str
    AUTOMATION_TIMEOUT_SECONDS: float = 120.0
    CALLBACK_API_TOKEN: Optional[str] = None  # Defaults to AUTOMATION_API_TOKEN

    CORS_ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    LOG_LEVEL: str = "INFO"

    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(env_file=["../.env", ".env"], env_file_encoding="utf-8", extra="ignore")

    @property
    def callback_token(self) -> str:
        return self.CALLBACK_API_TOKEN or self.AUTOMATION_API_TOKEN


def load_settings(**overrides) -> Settings:
    """
    Build the settings from the environment, failing with a readable
    ConfigurationError instead of pydantic's validation dump.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = [
            ".".join(str(part) for part in error["loc"])
            for error in e.errors()
            if error["type"] == "missing"
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}. "
                "Set them in the environment or in a .env file."
            ) from e
        raise ConfigurationError(f"Invalid configuration: {e}") from e


@lru_cache
def get_settings() -> Settings:
    return load_settings()
