"""
Dependency wiring for the API.

Builds the sale store, notification state store, webhook client and sale
service from Settings. Each provider is cached, so the whole app shares one
SaleService. Tests replace these with `app.dependency_overrides`.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import Depends

from config import Settings, load_settings
from repositories.notification_state_repository import (
    JsonNotificationStateRepository,
    NotificationStateRepository,
    SupabaseNotificationStateRepository,
)
from repositories.sale_repository import (
    JsonSaleRepository,
    SaleRepository,
    SupabaseSaleRepository,
)
from services.discord_client import DiscordWebhookClient
from services.sale_service import SaleService
from services.sync_service import NotificationSync


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def build_repositories(settings: Settings) -> tuple[SaleRepository, NotificationStateRepository]:
    """Create the sale store and the notification state store for the configured backend."""
    if settings.storage_backend == "supabase":
        from repositories.client import get_supabase

        client = get_supabase(settings.supabase_url, settings.supabase_key)
        return SupabaseSaleRepository(client), SupabaseNotificationStateRepository(client)

    return (
        JsonSaleRepository(settings.data_dir / "sales.json"),
        JsonNotificationStateRepository(settings.data_dir / "metadata.json"),
    )


def build_channel(settings: Settings) -> Optional[DiscordWebhookClient]:
    """Webhook client, or None when DISCORD_WEBHOOK_URL is not set."""
    if not settings.notifications_enabled:
        return None
    return DiscordWebhookClient(
        settings.discord_webhook_url,
        timeout=settings.webhook_timeout_seconds,
    )


def build_sale_service(settings: Settings) -> SaleService:
    sale_repository, state_repository = build_repositories(settings)
    sync = NotificationSync(
        repository=sale_repository,
        state_repository=state_repository,
        channel=build_channel(settings),
        tz=ZoneInfo(settings.display_timezone),
    )
    service = SaleService(sale_repository)
    service.add_hook(sync)
    return service


@lru_cache(maxsize=1)
def _cached_sale_service() -> SaleService:
    return build_sale_service(get_settings())


def get_sale_service() -> SaleService:
    return _cached_sale_service()


def get_notification_sync(service: SaleService = Depends(get_sale_service)) -> Optional[NotificationSync]:
    """The NotificationSync hook registered on the sale service."""
    for hook in service.hooks:
        if isinstance(hook, NotificationSync):
            return hook
    return None


__all__ = [
    "build_channel",
    "build_repositories",
    "build_sale_service",
    "get_notification_sync",
    "get_sale_service",
    "get_settings",
]
