"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from carbon_ledger.adapters.supabase_ledger_repository import SupabaseLedgerRepository
from carbon_ledger.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
)
from carbon_ledger.config import Settings
from carbon_ledger.domain.settings import UserSettings
from carbon_ledger.services.ledger import LedgerService
from carbon_ledger.services.user_settings import SettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    settings_service: SettingsService
    ledger_service: LedgerService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    ledger_repository = SupabaseLedgerRepository(
        supabase_client,
        user_id=resolved_settings.ledger_user_id,
        scan_history_limit=resolved_settings.scan_history_limit,
    )
    settings_repository = SupabaseUserSettingsRepository(
        supabase_client, user_id=resolved_settings.ledger_user_id
    )
    settings_service = SettingsService(
        settings_repository,
        settings=UserSettings(
            daily_budget_kg=resolved_settings.default_daily_budget_kg
        ),
    )
    ledger_service = LedgerService(
        repository=ledger_repository,
        settings_service=settings_service,
        timezone=resolved_settings.timezone,
        scan_history_limit=resolved_settings.scan_history_limit,
    )

    return AppContainer(
        settings=resolved_settings,
        settings_service=settings_service,
        ledger_service=ledger_service,
    )
