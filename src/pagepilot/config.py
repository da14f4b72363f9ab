"""Configuration management for PagePilot.

Changes:
  - 2026-10-02: Added screenshot readiness and cursor defaults.
  - 2026-09-28: Initial settings for the shared browser process.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """PagePilot settings with env and .env file support."""

    model_config = SettingsConfigDict(
        env_prefix="PAGEPILOT_",
        env_file=".env",
        extra="ignore"
    )

    # Browser process
    headless: bool = Field(default=False, description="Launch Chromium without a visible window")
    window_width: int = Field(default=1280, description="Browser window and viewport width in pixels")
    window_height: int = Field(default=720, description="Browser window and viewport height in pixels")
    launch_args: list[str] = Field(default_factory=list, description="Extra Chromium command line flags")

    # Readiness and capture
    readiness_timeout_ms: int = Field(default=5000, description="Timeout for each page readiness signal")
    screenshot_timeout_ms: int = Field(default=5000, description="Timeout for the screenshot call itself")
    screenshot_quality: int = Field(default=90, ge=1, le=100, description="JPEG quality for captures")
    min_screenshot_wait_ms: int = Field(default=1000, ge=0, description="Minimum settle time before a capture")
    new_tab_load_timeout_ms: int = Field(default=5000, description="How long to wait for a new tab's first load")

    # Observation aids
    cursor_visible: bool = Field(default=True, description="Show the simulated cursor for new sessions")
    max_marked_elements: int = Field(default=100, ge=1, description="Cap on numbered overlays per marking pass")

    # Logging
    log_level: str = Field(default="INFO", description="Log level: DEBUG, INFO, WARNING, ERROR")

    @property
    def window_size_arg(self) -> str:
        """Chromium flag matching the configured window size."""
        return f"--window-size={self.window_width},{self.window_height}"

    @property
    def viewport(self) -> dict[str, int]:
        return {"width": self.window_width, "height": self.window_height}


@lru_cache
def get_settings(force_reload: bool = False) -> Settings:
    """Get cached settings instance."""
    if force_reload:
        get_settings.cache_clear()
    return Settings()
