"""Tests for settings validation and persistence."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest

from prowl.services.settings import (
    DEFAULT_LABELS,
    ConfigurationError,
    HighlightStyle,
    KeyMappings,
    ProwlSettings,
    SettingsStore,
    merge_settings,
    validate_settings,
)


def test_defaults_are_valid() -> None:
    settings = ProwlSettings()

    validate_settings(settings)

    assert settings.labels == DEFAULT_LABELS
    assert settings.cycle_wraps_around is True
    assert settings.show_modified_indicator is True
    assert settings.max_filename_length == 20
    assert settings.mappings == KeyMappings(jump=";", next="<S-l>", prev="<S-h>")


@pytest.mark.parametrize(
    ("settings", "message"),
    [
        (ProwlSettings(labels=()), "labels cannot be empty"),
        (ProwlSettings(labels=("a", "bb")), "single characters"),
        (ProwlSettings(labels=("a", "a")), "more than once"),
        (ProwlSettings(labels="abc"), "ordered sequence"),  # type: ignore[arg-type]
        (ProwlSettings(max_filename_length=0), "positive integer"),
    ],
)
def test_validate_rejects_unusable_settings(settings: ProwlSettings, message: str) -> None:
    with pytest.raises(ConfigurationError, match=message):
        validate_settings(settings)


def test_merge_settings_deep_merges_nested_options() -> None:
    merged = merge_settings(
        ProwlSettings(),
        {
            "labels": "asdf",
            "cycle_wraps_around": False,
            "mappings": {"jump": "<leader>"},
            "highlights": {"truncation": {"fg": "#00ff00"}, "custom": {"bold": True}},
            "unknown": 1,
        },
    )

    assert merged.labels == ("a", "s", "d", "f")
    assert merged.cycle_wraps_around is False
    assert merged.mappings == KeyMappings(jump="<leader>")
    assert merged.highlights["truncation"] == HighlightStyle(fg="#00ff00", bg="#1f2335")
    assert merged.highlights["custom"] == HighlightStyle(bold=True)
    assert ProwlSettings().highlights["truncation"].fg == "#ff9e64"


def test_load_returns_defaults_when_file_missing(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")

    assert store.load() == ProwlSettings()


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "nested" / "settings.json")
    original = replace(
        ProwlSettings(),
        labels=("j", "k", "l"),
        max_filename_length=12,
        show_modified_indicator=False,
        mappings=KeyMappings(next="]b", prev="[b"),
    )

    path = store.save(original)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["labels"] == ["j", "k", "l"]
    assert payload["version"] == 1
    assert store.load() == original


def test_load_ignores_invalid_json(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level("WARNING"):
        settings = SettingsStore(path).load()

    assert settings == ProwlSettings()
    assert "not valid JSON" in caplog.text


def test_load_applies_overrides_then_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"labels": ["a", "b"], "max_filename_length": 30}), encoding="utf-8")
    monkeypatch.setenv("PROWL_LABELS", "xyz")
    monkeypatch.setenv("PROWL_CYCLE_WRAPS_AROUND", "off")
    monkeypatch.setenv("PROWL_MAX_FILENAME_LENGTH", "not-a-number")

    settings = SettingsStore(path).load(overrides={"show_modified_indicator": False})

    assert settings.labels == ("x", "y", "z")
    assert settings.cycle_wraps_around is False
    assert settings.max_filename_length == 30
    assert settings.show_modified_indicator is False


@pytest.mark.parametrize("length", [1, 3, 4])
def test_small_filename_lengths_are_accepted(length: int) -> None:
    validate_settings(ProwlSettings(max_filename_length=length))
