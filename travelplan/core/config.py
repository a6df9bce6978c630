"""Configuration helpers for API keys and environment variables."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from travelplan.core.errors import ConfigError
from travelplan.core.types import GenerationMode

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(slots=True)
class ApiSettings:
    """Centralised container for provider credentials and pipeline switches."""

    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    google_maps_api_key: Optional[str] = None
    geoapify_api_key: Optional[str] = None
    enable_nominatim_fallback: bool = False
    generation_mode: GenerationMode = "combined"
    mock_mode: bool = False
    cooldown_ms: int = 2000
    request_timeout_s: float = 30.0
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    ping_message: str = "ping"

    @classmethod
    def from_env(cls) -> "ApiSettings":
        """Load settings from the process environment (``.env`` is loaded by the app)."""

        mode = (os.getenv("GENERATION_MODE") or "combined").strip().lower()
        if mode not in ("combined", "sections"):
            logging.getLogger(__name__).warning(
                "Unknown GENERATION_MODE %r, falling back to 'combined'", mode
            )
            mode = "combined"

        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL") or "gemini-2.0-flash",
            google_maps_api_key=os.getenv("GOOGLE_MAPS_API_KEY") or None,
            geoapify_api_key=os.getenv("GEOAPIFY_API_KEY") or None,
            enable_nominatim_fallback=_env_flag("ENABLE_NOMINATIM_FALLBACK"),
            generation_mode=mode,  # type: ignore[arg-type]
            mock_mode=_env_flag("USE_MOCK_MODE"),
            cooldown_ms=int(os.getenv("GENERATION_COOLDOWN_MS", "2000")),
            request_timeout_s=float(os.getenv("REQUEST_TIMEOUT_S", "30")),
            allowed_origins=_env_list("ALLOWED_ORIGINS", ["*"]),
            ping_message=os.getenv("PING_MESSAGE") or "ping",
        )

    def ensure(self, field_name: str) -> str:
        """Return the requested credential and fail fast if it is missing."""

        value = getattr(self, field_name)
        if not value:
            raise ConfigError(f"Missing configuration value: {field_name}")
        return value


def configure_logging() -> None:
    """Apply ``LOG_LEVEL`` to the root logger."""

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs full request URLs, and map/geocoding URLs carry API keys
    logging.getLogger("httpx").setLevel(logging.WARNING)
