"""Prowl: stable single-key labels for jumping between open documents."""

from .engine import Engine, get_engine, reset_engine, setup
from .services.settings import ConfigurationError, ProwlSettings

__all__ = [
    "ConfigurationError",
    "Engine",
    "ProwlSettings",
    "get_engine",
    "reset_engine",
    "setup",
]

__version__ = "0.1.0"
