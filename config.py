"""
Application configuration.

Values are read from the environment once, after loading the optional `.env`
file that sits next to this module.

Environment variables:
- DISCORD_WEBHOOK_URL: Webhook that receives the sales dashboard (optional)
- APP_PASSWORD: Shared secret for the login page
- STORAGE_BACKEND: "json" (default) or "supabase"
- DATA_DIR: Directory for the JSON backend files (default: ./data)
- SUPABASE_URL / SUPABASE_KEY: Only required by the Supabase backend
- DISPLAY_TIMEZONE: IANA timezone used in the notification footer
- WEBHOOK_TIMEOUT_SECONDS: Timeout for webhook requests
- SESSION_COOKIE_SECURE: Set the `secure` flag on the session cookie
- LOG_LEVEL: Logging level name (default: INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent

load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

STORAGE_BACKENDS = ("json", "supabase")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime settings for the API, storage and notifier."""

    discord_webhook_url: Optional[str]
    app_password: Optional[str]
    storage_backend: str
    data_dir: Path
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    display_timezone: str
    webhook_timeout_seconds: float
    session_cookie_secure: bool
    log_level: str

    @property
    def notifications_enabled(self) -> bool:
        """True when a webhook destination is configured."""
        return bool(self.discord_webhook_url)


def load_settings() -> Settings:
    """
    Build Settings from the current environment.

    Raises:
        ValueError: If STORAGE_BACKEND or WEBHOOK_TIMEOUT_SECONDS is invalid
    """
    backend = (os.getenv("STORAGE_BACKEND") or "json").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(
            f"Invalid STORAGE_BACKEND {backend!r}. Must be one of {STORAGE_BACKENDS}"
        )

    raw_timeout = os.getenv("WEBHOOK_TIMEOUT_SECONDS") or "10"
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ValueError(f"Invalid WEBHOOK_TIMEOUT_SECONDS: {raw_timeout!r}") from None

    data_dir = Path(os.getenv("DATA_DIR") or (Path.cwd() / "data"))

    return Settings(
        discord_webhook_url=(os.getenv("DISCORD_WEBHOOK_URL") or "").strip() or None,
        app_password=os.getenv("APP_PASSWORD") or None,
        storage_backend=backend,
        data_dir=data_dir,
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_KEY"),
        display_timezone=os.getenv("DISPLAY_TIMEZONE") or "America/Sao_Paulo",
        webhook_timeout_seconds=timeout,
        session_cookie_secure=_env_flag("SESSION_COOKIE_SECURE"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )


__all__ = ["Settings", "load_settings", "STORAGE_BACKENDS", "PROJECT_ROOT"]
