"""Application settings via Pydantic BaseSettings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from pagediff.constants import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_THRESHOLD,
    DEFAULT_VIEWPORT_HEIGHT,
    DEFAULT_VIEWPORT_WIDTH,
    MAX_THRESHOLD,
)


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "PAGEDIFF_"}

    # App
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool = False

    # Browser
    headless: bool = True
    allow_private_urls: bool = True
    viewport_width: int = DEFAULT_VIEWPORT_WIDTH
    viewport_height: int = DEFAULT_VIEWPORT_HEIGHT

    # Comparison
    source: str | None = None
    compare_to: list[str] = []
    output_screenshots: bool = False
    output_dir: str = DEFAULT_OUTPUT_DIR
    output_file: str = DEFAULT_OUTPUT_FILE
    block: bool = False
    heatmap: bool = False
    threshold: int = Field(default=DEFAULT_THRESHOLD, ge=0, le=MAX_THRESHOLD)

    @property
    def effective_log_level(self) -> str:
        """DEBUG when the debug switch is on, otherwise the configured level."""
        return "DEBUG" if self.debug else self.log_level


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
