"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from prowl.engine import Engine, reset_engine
from prowl.host.memory import InMemoryHost
from prowl.services.settings import ProwlSettings, merge_settings


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for name in (
        "PROWL_LABELS",
        "PROWL_CYCLE_WRAPS_AROUND",
        "PROWL_SHOW_MODIFIED_INDICATOR",
        "PROWL_MAX_FILENAME_LENGTH",
        "PROWL_DEBUG_LOGGING",
        "PROWL_SETTINGS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PROWL_LOG_DIR", str(tmp_path / "logs"))
    yield
    reset_engine()


@pytest.fixture
def host() -> InMemoryHost:
    return InMemoryHost(width=120)


@pytest.fixture
def make_engine(host: InMemoryHost) -> Callable[..., Engine]:
    def _make(**overrides: Any) -> Engine:
        settings = merge_settings(ProwlSettings(), overrides)
        engine = Engine(host, settings)
        engine.attach(host.bus)
        return engine

    return _make


@pytest.fixture
def open_file(host: InMemoryHost, tmp_path: Path) -> Callable[..., str]:
    """Open ``name`` under ``tmp_path`` in the host and return its identity."""

    def _open(name: str, **kwargs: Any) -> str:
        path = tmp_path / name
        host.open_document(path, **kwargs)
        return str(path.resolve())

    return _open
