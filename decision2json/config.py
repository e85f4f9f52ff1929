"""Configuration management for decision2json.

Settings come from environment variables (prefix DECISION2JSON_), an optional
.env file and the defaults below, in that order of priority. Extraction
constants live in the engine modules; only the surrounding tooling is
configurable.
"""

from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExtractionSettings(BaseSettings):
    """Settings for the CLI, comparison and QA layers."""

    model_config = SettingsConfigDict(
        env_prefix="DECISION2JSON_",
        case_sensitive=False,
        env_file=".env",
        extra="ignore",
    )

    # Output settings
    output_dir: Path = Field(
        default=Path("out"),
        description="Directory for JSON and HTML output"
    )

    # QA settings
    qa_threshold: float = Field(
        default=0.80,
        ge=0.0,
        le=1.0,
        description="Minimum QA score for an extraction to pass"
    )

    # Comparison settings
    compare_limit: int = Field(
        default=50,
        ge=1,
        le=50,
        description="Maximum rows in a comparison table"
    )
    text_cap: int = Field(
        default=50000,
        ge=1,
        description="Characters of each document used for comparison"
    )
    workers: int = Field(
        default=1,
        ge=1,
        description="Worker processes for comparison"
    )

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file")


def load_settings() -> ExtractionSettings:
    """Load settings with fallbacks.

    Priority:
    1. Environment variables
    2. .env file
    3. Default values

    Returns:
        ExtractionSettings: Loaded settings
    """
    settings = ExtractionSettings()
    logger.debug(f"Loaded settings: output_dir={settings.output_dir}, workers={settings.workers}")
    return settings
