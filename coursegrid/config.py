"""Configuration loaded from environment variables.

Every setting can be overridden with a COURSEGRID_* variable or a .env
file in the working directory, e.g. COURSEGRID_ADVISOR_API_KEY=...
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


PACKAGE_DIR = Path(__file__).resolve().parent


class CourseGridConfig(BaseSettings):
    """Application settings with sensible defaults for local use."""

    # Catalog
    catalog_path: Path = Field(
        default=PACKAGE_DIR / "data" / "courses.json",
        description="JSON file with the course catalog",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Advisory service (text generation)
    advisor_api_key: str = Field(
        default="",
        description="API key for the text generation service",
    )
    advisor_model: str = Field(
        default="gemini-2.5-flash-preview-09-2025",
        description="Model name used for course load analysis",
    )
    advisor_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the generateContent API",
    )
    advisor_timeout: float = Field(
        default=30.0,
        description="HTTP timeout in seconds",
    )
    advisor_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Total attempts including the first call",
    )
    advisor_backoff_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Base delay for exponential backoff (1s, 2s, 4s, ...)",
    )
    advisor_temperature: float = Field(
        default=0.6,
        description="Sampling temperature sent with the request",
    )

    model_config = {
        "env_prefix": "COURSEGRID_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: CourseGridConfig | None = None


def get_config() -> CourseGridConfig:
    """Get the configuration singleton.

    Returns:
        CourseGridConfig: configuration instance
    """
    global _config
    if _config is None:
        _config = CourseGridConfig()
    return _config
