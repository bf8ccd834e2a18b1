"""Runtime configuration for the watcher.

Relies on pydantic-settings so that environment variables (prefixed with ``SUNRISE_``)
can override defaults. See `.env.example` for common values.
"""
from __future__ import annotations

from datetime import time
from pathlib import Path
from typing import Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sunrise_watch.availability.classifier import DEFAULT_WINDOW_RADIUS

FORM_URL = "https://www.jr-odekake.net/goyoyaku/campaign/sunriseseto_izumo/form.html"


class Settings(BaseSettings):
    """Captures runtime configuration for the watcher."""

    form_url: str = Field(default=FORM_URL, description="Reservation form page to inspect")
    headless: bool = True
    slow_mo_ms: int = Field(default=0, description="Slow-mo delay in milliseconds")
    viewport_width: int = 1280
    viewport_height: int = 900
    locale: Optional[str] = Field(default="ja-JP")
    timezone_id: Optional[str] = Field(default="Asia/Tokyo", description="Browser timezone override")
    user_agent: Optional[str] = None
    chromium_args: Tuple[str, ...] = Field(
        default=("--disable-blink-features=AutomationControlled",),
        description="Extra Chromium args passed during launch",
    )
    default_timeout_ms: int = Field(default=15000)
    navigation_timeout_ms: int = Field(default=30000)

    stealth_enabled: bool = Field(default=False, description="Apply playwright-stealth evasions")
    stealth_init_scripts_only: bool = False
    stealth_languages: Optional[Tuple[str, str]] = ("ja-JP", "ja")

    check_interval_s: float = Field(default=30.0, description="Seconds between availability checks")
    max_retries: int = Field(default=3, description="Attempts per check before giving up")
    retry_delay_s: float = Field(default=3.0, description="Fixed delay between check attempts")
    page_settle_ms: int = Field(
        default=2000, description="Extra wait after network idle before reading the page"
    )
    window_radius: int = Field(
        default=DEFAULT_WINDOW_RADIUS,
        description="Characters around a room keyword inspected by the page-wide fallback search",
    )

    profile_path: Path = Field(default=Path("settings.json"), description="Saved watch profile")
    room_catalog_path: Optional[Path] = Field(
        default=None, description="Optional JSON file overriding the built-in room catalog"
    )
    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("data/logs"))
    capture_dir: Path = Field(default=Path("data/captures"))

    schedule_timezone: str = Field(default="Asia/Tokyo", description="Zone for shutdown/maintenance times")
    shutdown_time: Optional[time] = Field(
        default=time(1, 50), description="Daily automatic stop time; None keeps running"
    )
    maintenance_start: time = Field(default=time(23, 50))
    maintenance_end: time = Field(default=time(0, 5))

    webhook_timeout_s: float = Field(default=15.0)

    model_config = SettingsConfigDict(
        env_prefix="SUNRISE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("profile_path", "log_dir", "capture_dir", mode="before")
    def _expand_path(cls, value: str | Path) -> Path:  # noqa: D401
        if isinstance(value, Path):
            return value.expanduser()
        return Path(value).expanduser()

    @field_validator("room_catalog_path", mode="before")
    def _expand_catalog_path(cls, value: str | Path | None) -> Optional[Path]:
        if value in (None, ""):
            return None
        return Path(value).expanduser()

    @field_validator("shutdown_time", mode="before")
    def _parse_shutdown_time(cls, value: object) -> object:
        if isinstance(value, str) and value.strip().lower() in ("", "none", "off"):
            return None
        return value

    @field_validator("check_interval_s", "retry_delay_s")
    def _validate_non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("intervals must not be negative")
        return value

    @field_validator("max_retries")
    def _validate_retries(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_retries must be positive")
        return value

    @field_validator("chromium_args", mode="before")
    def _parse_chromium_args(cls, value: object) -> Tuple[str, ...]:
        if value is None or value == "":
            return ()
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        if isinstance(value, (list, tuple)):
            return tuple(str(item) for item in value if str(item))
        raise TypeError("chromium_args must be provided as a comma-separated string or list")

    def ensure_directories(self) -> None:
        """Create directories that must exist at runtime."""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.capture_dir.mkdir(parents=True, exist_ok=True)

    def viewport(self) -> dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    def chromium_launch_args(self) -> dict[str, object]:
        launch_args: dict[str, object] = {
            "headless": self.headless,
        }
        if self.slow_mo_ms:
            launch_args["slow_mo"] = self.slow_mo_ms
        if self.chromium_args:
            launch_args["args"] = list(self.chromium_args)
        return launch_args

    def context_options(self) -> dict[str, object]:
        options: dict[str, object] = {"viewport": self.viewport()}
        if self.user_agent:
            options["user_agent"] = self.user_agent
        if self.locale:
            options["locale"] = self.locale
        if self.timezone_id:
            options["timezone_id"] = self.timezone_id
        return options

    def stealth_kwargs(self) -> dict[str, object]:
        if not self.stealth_enabled:
            return {}
        kwargs: dict[str, object] = {
            "init_scripts_only": self.stealth_init_scripts_only,
        }
        if self.stealth_languages:
            kwargs["navigator_languages_override"] = self.stealth_languages
        return kwargs
