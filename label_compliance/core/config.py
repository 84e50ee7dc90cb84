"""
Configuration settings for the application.
"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Key Authentication
    API_KEY: Optional[str] = None  # Required for production - set in environment or .env file
    REQUIRE_API_KEY: bool = True  # Set to False to disable API key authentication

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # Options: "text", "json"
    LOG_INCLUDE_REQUEST_ID: bool = True  # Include X-Request-ID in logs

    # Performance Monitoring
    RESPONSE_TIME_WARNING_THRESHOLD_MS: int = 5000  # Validation is CPU-only; anything slower is suspicious

    # Input Guardrails
    MAX_UPLOAD_MB: int = 5  # Max requirement file size

    # Evidence
    MIN_SYMBOL_CONFIDENCE: float = 0.0  # Drop symbol detections below this confidence

    # Layout rules have no geometric evaluation yet.
    # Options: "assume_valid" (every layout rule passes), "match" (match the rule's target against evidence)
    LAYOUT_EVALUATION_POLICY: str = "assume_valid"

    @property
    def max_upload_bytes(self) -> int:
        """Upload limit in bytes."""
        return self.MAX_UPLOAD_MB * 1024 * 1024

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
