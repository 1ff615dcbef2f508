"""Service layer helpers (settings persistence and validation)."""

from .settings import (
    ConfigurationError,
    HighlightStyle,
    KeyMappings,
    ProwlSettings,
    SettingsStore,
    merge_settings,
    validate_settings,
)

__all__ = [
    "ConfigurationError",
    "HighlightStyle",
    "KeyMappings",
    "ProwlSettings",
    "SettingsStore",
    "merge_settings",
    "validate_settings",
]
