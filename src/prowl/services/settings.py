"""Settings dataclasses, validation and persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

__all__ = [
    "ConfigurationError",
    "DEFAULT_LABELS",
    "HighlightStyle",
    "KeyMappings",
    "ProwlSettings",
    "SettingsStore",
    "merge_settings",
    "validate_settings",
]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".prowl"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "PROWL_CYCLE_WRAPS_AROUND": "cycle_wraps_around",
    "PROWL_SHOW_MODIFIED_INDICATOR": "show_modified_indicator",
    "PROWL_DEBUG_LOGGING": "debug_logging",
}
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "PROWL_MAX_FILENAME_LENGTH": "max_filename_length",
}
_LABELS_ENV = "PROWL_LABELS"
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}

# These ARE the keys the user presses after the jump mapping.
DEFAULT_LABELS: tuple[str, ...] = (
    "q", "w", "e", "r", "a", "s", "d", "f", "c", "v", "t", "g", "b", "z", "x",
)


class ConfigurationError(ValueError):
    """Raised when settings cannot be used to initialize the engine."""


@dataclass(slots=True)
class HighlightStyle:
    """Colors for one highlight group; applied by the host, never by the engine."""

    fg: str | None = None
    bg: str | None = None
    bold: bool = False


@dataclass(slots=True)
class KeyMappings:
    """Key sequences the host binds to the engine entry points."""

    jump: str = ";"
    next: str = "<S-l>"
    prev: str = "<S-h>"


def _default_highlights() -> dict[str, HighlightStyle]:
    bg = "#1f2335"
    accent = "#ff9e64"
    return {
        "bar": HighlightStyle(fg="#ffffff", bg=bg),
        "active_tab": HighlightStyle(fg="#ffffff", bg=bg),
        "active_label": HighlightStyle(fg=accent, bg=bg),
        "active_tab_modified": HighlightStyle(fg="#ffffff", bg=bg),
        "active_label_modified": HighlightStyle(fg=accent, bg=bg),
        "inactive_tab": HighlightStyle(fg="#828BB8", bg=bg),
        "inactive_label": HighlightStyle(fg=accent, bg=bg),
        "inactive_tab_modified": HighlightStyle(fg="#828BB8", bg=bg),
        "inactive_label_modified": HighlightStyle(fg=accent, bg=bg),
        "truncation": HighlightStyle(fg=accent, bg=bg),
    }


@dataclass(slots=True)
class ProwlSettings:
    """User-configurable options for label navigation."""

    labels: tuple[str, ...] = DEFAULT_LABELS
    cycle_wraps_around: bool = True
    show_modified_indicator: bool = True
    max_filename_length: int = 20
    mappings: KeyMappings = field(default_factory=KeyMappings)
    highlights: dict[str, HighlightStyle] = field(default_factory=_default_highlights)
    debug_logging: bool = False


def validate_settings(settings: ProwlSettings) -> None:
    """Raise :class:`ConfigurationError` if ``settings`` cannot drive the engine."""

    labels = settings.labels
    if isinstance(labels, str) or not isinstance(labels, (tuple, list)):
        raise ConfigurationError("labels must be an ordered sequence of characters")
    if not labels:
        raise ConfigurationError("labels cannot be empty")
    seen: set[str] = set()
    for label in labels:
        if not isinstance(label, str) or len(label) != 1:
            raise ConfigurationError(f"labels must be single characters, got {label!r}")
        if label in seen:
            raise ConfigurationError(f"label {label!r} is listed more than once")
        seen.add(label)
    length = settings.max_filename_length
    if isinstance(length, bool) or not isinstance(length, int) or length < 1:
        raise ConfigurationError(f"max_filename_length must be a positive integer, got {length!r}")


def merge_settings(base: ProwlSettings, overrides: Mapping[str, Any] | None) -> ProwlSettings:
    """Return ``base`` deep-merged with ``overrides`` (unknown keys are ignored)."""

    if not overrides:
        return base
    allowed = {item.name for item in fields(ProwlSettings)}
    updates: Dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in allowed or value is None:
            if key not in allowed:
                LOGGER.debug("Ignoring unknown settings key %r", key)
            continue
        if key == "labels":
            updates[key] = _coerce_labels(value)
        elif key == "mappings":
            updates[key] = _merge_mappings(base.mappings, value)
        elif key == "highlights":
            updates[key] = _merge_highlights(base.highlights, value)
        else:
            updates[key] = value
    if updates:
        LOGGER.debug("Applying settings overrides: %s", sorted(updates))
        return replace(base, **updates)
    return base


def _coerce_labels(value: Any) -> Any:
    if isinstance(value, str):
        return tuple(value)
    if isinstance(value, (list, tuple)):
        return tuple(value)
    # Left as-is so validation reports the bad type.
    return value


def _merge_mappings(base: KeyMappings, value: Any) -> KeyMappings:
    if isinstance(value, KeyMappings):
        return value
    if not isinstance(value, Mapping):
        LOGGER.warning("Ignoring non-mapping 'mappings' override of type %s", type(value).__name__)
        return base
    allowed = {item.name for item in fields(KeyMappings)}
    return replace(base, **{k: v for k, v in value.items() if k in allowed})


def _merge_highlights(
    base: Mapping[str, HighlightStyle], value: Any
) -> dict[str, HighlightStyle]:
    merged = {name: replace(style) for name, style in base.items()}
    if not isinstance(value, Mapping):
        LOGGER.warning("Ignoring non-mapping 'highlights' override of type %s", type(value).__name__)
        return merged
    allowed = {item.name for item in fields(HighlightStyle)}
    for name, style in value.items():
        if isinstance(style, HighlightStyle):
            merged[name] = style
            continue
        if not isinstance(style, Mapping):
            continue
        current = merged.get(name, HighlightStyle())
        merged[name] = replace(current, **{k: v for k, v in style.items() if k in allowed})
    return merged


class SettingsStore:
    """Persistence adapter for :class:`ProwlSettings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> ProwlSettings:
        """Load settings from disk, applying CLI/environment overrides when present."""

        payload = self._read_payload()
        payload.pop("version", None)
        settings = merge_settings(ProwlSettings(), payload)
        LOGGER.debug("Settings loaded from %s (%d labels)", self._path, len(settings.labels))
        if overrides:
            settings = merge_settings(settings, overrides)
        return self._apply_env_overrides(settings)

    def save(self, settings: ProwlSettings) -> Path:
        """Persist settings to disk with atomic file writes."""

        data = asdict(settings)
        data["labels"] = list(settings.labels)
        data["version"] = _SETTINGS_VERSION
        body = json.dumps(data, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain a JSON object", self._path)
            return {}
        return payload

    def _apply_env_overrides(self, settings: ProwlSettings) -> ProwlSettings:
        overrides: Dict[str, Any] = {}
        labels = os.environ.get(_LABELS_ENV)
        if labels is not None:
            overrides["labels"] = tuple(labels.strip())
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _INT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = int(value, 10)
            except ValueError:
                LOGGER.warning(
                    "Environment override %s=%s is not a valid integer",
                    env_name,
                    value,
                )
        if overrides:
            LOGGER.debug("Applying environment settings overrides: %s", sorted(overrides))
            settings = replace(settings, **overrides)
        return settings
