"""
slotbook.config.booking – booking behaviour and notification webhook config.

Env vars: SLOTBOOK_BLOCKED_WINDOW_MODE, SLOTBOOK_MAX_RANGE_DAYS,
NOTIFY_WEBHOOK_URL, NOTIFY_WEBHOOK_SECRET, NOTIFY_TIMEOUT_SECONDS.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from slotbook.core.exceptions import ConfigurationError

BLOCKED_MODES = frozenset({"replace", "subtract"})


@dataclass(frozen=True)
class BookingConfig:
    blocked_window_mode: str = "replace"
    """How a blocked exception with start/end times applies to the weekday's windows:
    "replace" uses the exception window instead of the rule windows,
    "subtract" removes the exception window from the rule windows."""

    max_range_days: int = 62
    """Longest date range accepted by open-date queries."""

    notify_webhook_url: Optional[str] = None
    notify_webhook_secret: Optional[str] = None
    """HMAC-SHA256 key for the X-Slotbook-Signature header. Never log it."""

    notify_timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.blocked_window_mode not in BLOCKED_MODES:
            raise ConfigurationError(
                f"blocked_window_mode must be one of {sorted(BLOCKED_MODES)}, got {self.blocked_window_mode!r}"
            )
        if not isinstance(self.max_range_days, int) or self.max_range_days < 1:
            raise ConfigurationError(f"max_range_days must be a positive integer, got {self.max_range_days!r}")
        if self.notify_webhook_url and not self.notify_webhook_url.startswith(("http://", "https://")):
            raise ConfigurationError("NOTIFY_WEBHOOK_URL must start with http:// or https://")
        if self.notify_timeout_seconds <= 0:
            raise ConfigurationError("notify_timeout_seconds must be positive")

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.notify_webhook_url and self.notify_webhook_secret)

    @classmethod
    def from_env(cls, **overrides: object) -> BookingConfig:
        mode = str(overrides.get("blocked_window_mode") or os.environ.get("SLOTBOOK_BLOCKED_WINDOW_MODE", "replace"))
        try:
            max_range = int(overrides.get("max_range_days") or os.environ.get("SLOTBOOK_MAX_RANGE_DAYS", "62"))  # type: ignore[arg-type]
            timeout = float(overrides.get("notify_timeout_seconds") or os.environ.get("NOTIFY_TIMEOUT_SECONDS", "10"))  # type: ignore[arg-type]
        except ValueError as exc:
            raise ConfigurationError("Invalid numeric booking setting", cause=exc) from exc
        url = overrides.get("notify_webhook_url") or os.environ.get("NOTIFY_WEBHOOK_URL") or None
        secret = overrides.get("notify_webhook_secret") or os.environ.get("NOTIFY_WEBHOOK_SECRET") or None
        return cls(
            blocked_window_mode=mode.strip().lower(),
            max_range_days=max_range,
            notify_webhook_url=str(url).strip() if url else None,
            notify_webhook_secret=str(secret) if secret else None,
            notify_timeout_seconds=timeout,
        )


def load_booking_config(**overrides: object) -> BookingConfig:
    return BookingConfig.from_env(**overrides)
