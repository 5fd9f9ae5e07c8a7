"""Environment-driven feature flags."""

from __future__ import annotations

from enum import Enum

from connected_accounts.core.config import Settings, settings


class FeatureFlag(str, Enum):
    CALENDAR_PROVIDER_GOOGLE_ENABLED = "CALENDAR_PROVIDER_GOOGLE_ENABLED"
    MESSAGING_PROVIDER_GMAIL_ENABLED = "MESSAGING_PROVIDER_GMAIL_ENABLED"


class SettingsFeatureFlags:
    """Read boolean flags straight from application settings."""

    def __init__(self, app_settings: Settings = settings) -> None:
        self._settings = app_settings

    def get(self, name: str) -> bool:
        key = name.value if isinstance(name, FeatureFlag) else name
        if not hasattr(self._settings, key):
            raise KeyError(f"Unknown feature flag: {key}")
        return bool(getattr(self._settings, key))
