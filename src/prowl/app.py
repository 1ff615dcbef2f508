"""Command-line front-end rendering the navigation line for a set of files."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, get_origin, get_type_hints

from .engine import Engine
from .host.memory import InMemoryHost
from .services.settings import ConfigurationError, ProwlSettings, SettingsStore
from .utils import logging as logging_utils

_LOGGER = logging.getLogger(__name__)
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def configure_logging(settings: ProwlSettings, *, debug: bool = False) -> None:
    """Route package logs to the log file; ``--debug`` wins over the persisted flag."""

    log_path = logging_utils.setup_logging(settings, debug=True if debug else None, force=True)
    _LOGGER.debug("CLI logging configured at %s", log_path)


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ProwlSettings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    return active_store.load(overrides=overrides)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked by the `prowl` console script."""

    args = _parse_cli_args(argv)

    settings_path = args.settings_path or os.environ.get("PROWL_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    try:
        overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        return 2
    settings = load_settings(resolved_path, overrides=overrides or None)
    configure_logging(settings, debug=args.debug)

    host = InMemoryHost(width=args.width)
    try:
        engine = Engine(host, settings)
    except ConfigurationError as exc:
        print(f"prowl: {exc}", file=sys.stderr)
        return 2
    engine.attach(host.bus)

    for path in args.paths:
        host.open_document(path)
    engine.flush_pending()
    for key in args.keys or "":
        engine.handle_key(key)

    print(engine.render())
    if args.state:
        for line in engine.describe():
            print(line)
    for notification in host.notifications:
        print(notification.message, file=sys.stderr)
    return 0


def _parse_cli_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="prowl",
        description="Open files in a scratch session and print the label navigation line.",
    )
    parser.add_argument("paths", nargs="*", metavar="PATH", help="Files to open, in order.")
    parser.add_argument("--width", type=int, default=80, help="Display width in columns.")
    parser.add_argument(
        "--keys",
        default="",
        help="Keys to dispatch after the jump mapping, one character each (e.g. 'qW!').",
    )
    parser.add_argument("--state", action="store_true", help="Also print the tracked documents.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.prowl/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings (repeatable).",
    )
    return parser.parse_args(argv)


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if not items:
        return overrides

    fields = ProwlSettings.__dataclass_fields__  # type: ignore[attr-defined]
    type_hints = get_type_hints(ProwlSettings)
    for entry in items:
        if "=" not in entry:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        key, raw_value = entry.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError("Override is missing a field name.")
        if key not in fields:
            raise ValueError(f"Unknown setting '{key}'.")
        overrides[key] = _coerce_value(type_hints.get(key), raw_value.strip())
    return overrides


def _coerce_value(annotation: Any, raw_value: str) -> Any:
    target = get_origin(annotation) or annotation
    if target is bool:
        lowered = raw_value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"Expected a boolean, got '{raw_value}'.")
    if target is int:
        return int(raw_value, 10)
    if target is tuple:
        return tuple(raw_value)
    if target is str:
        return raw_value
    try:
        return json.loads(raw_value or "{}")
    except json.JSONDecodeError as exc:
        raise ValueError(f"Value '{raw_value}' must be valid JSON") from exc


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
