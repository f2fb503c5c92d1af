# -*- coding: utf-8 -*-
"""
Article generation service configuration using Pydantic BaseSettings.
"""
from pathlib import Path
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central service configuration loaded from environment variables.
    Pydantic's BaseSettings provides automatic validation, type casting,
    and reading from .env files.
    """

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8002

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    # JSON lines for log shippers; plain text is easier to read in a terminal
    LOG_JSON: bool = True

    # API Documentation (disable in production for security)
    DOCS_ENABLED: bool = True

    # API Key for programmatic access (generation and image endpoints)
    # If empty, authentication is disabled
    API_KEY: str = ""

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = False

    # Request tracking
    REQUEST_ID_HEADER: str = "X-Request-ID"

    # Compression
    GZIP_MIN_SIZE: int = 1000

    # ==========================================================================
    # Document Pipeline Configuration
    # ==========================================================================

    # Repair Markdown that leaks into the generated HTML (headings, bold, lists)
    ENABLE_MARKDOWN_REPAIR: bool = True

    # Reading time estimate
    WORDS_PER_MINUTE: int = 200

    # ==========================================================================
    # Gemini API Configuration
    # ==========================================================================
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    # Higher temperature for a more natural writing flow
    GEMINI_TEMPERATURE: float = 0.85
    GEMINI_MAX_TOKENS: int = 16384
    # Seconds; long articles stream for several minutes
    GEMINI_TIMEOUT: int = 300

    # Image synthesis (Imagen)
    GEMINI_IMAGE_MODEL: str = "imagen-4.0-generate-001"
    IMAGE_ASPECT_RATIO: str = "16:9"
    IMAGE_TIMEOUT: int = 60
    MAX_CONCURRENT_IMAGE_REQUESTS: int = 3
    IMAGE_SEARCH_URL: str = "https://www.google.com/search?tbm=isch&q="

    # Retry (image synthesis only, generation streams are never retried)
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_MIN_WAIT: int = 1
    RETRY_MAX_WAIT: int = 10

    # ==========================================================================
    # Paths (computed, not from env vars)
    # ==========================================================================
    BASE_DIR: Path = Path(__file__).resolve().parent
    TEMPLATES_DIR: Path = BASE_DIR / "templates"
    PROMPTS_DIR: Path = TEMPLATES_DIR / "prompts"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Global configuration instance
settings = Settings()
config = settings
