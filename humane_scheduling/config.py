"""Application configuration via environment variables."""

from __future__ import annotations

import logging
import re

from pydantic_settings import BaseSettings

log = logging.getLogger("humane_scheduling.config")

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_DAY_CLASSES = {"weekday", "weekend", "me_workday", "me_weekend", "everyday"}


class Settings(BaseSettings):
    # Scanning
    default_step_minutes: int = 30
    scan_timezone: str = "UTC"

    # Applied to participants who never declared any window
    fallback_window_start: str = "09:00"
    fallback_window_end: str = "17:00"
    fallback_window_day_class: str = "weekday"

    # Request bounds
    max_range_days: int = 62
    max_participants: int = 50

    # Analysis
    timezone_spread_hours: float = 6.0

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []

        start = _HHMM.match(self.fallback_window_start)
        end = _HHMM.match(self.fallback_window_end)
        if not start or not end:
            raise ValueError(
                "FALLBACK_WINDOW_START / FALLBACK_WINDOW_END must be HH:MM."
            )
        if self.fallback_window_start >= self.fallback_window_end:
            raise ValueError("Fallback window must start before it ends.")
        if self.fallback_window_day_class not in _DAY_CLASSES:
            raise ValueError(
                f"Unknown FALLBACK_WINDOW_DAY_CLASS {self.fallback_window_day_class!r}."
            )

        if self.default_step_minutes <= 0:
            raise ValueError("DEFAULT_STEP_MINUTES must be positive.")
        if self.default_step_minutes > 60:
            warnings.append(
                "DEFAULT_STEP_MINUTES is above 60; candidates may skip "
                "over short windows."
            )

        if self.max_range_days > 92:
            warnings.append(
                "MAX_RANGE_DAYS is above 92; brute-force scans will get slow."
            )

        return warnings


settings = Settings()
