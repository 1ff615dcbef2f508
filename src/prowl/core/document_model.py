"""Document identity helpers and the tracked-document record."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

__all__ = ["TrackedDocument", "normalize_identity", "display_basename"]


def normalize_identity(path: Path | str | None) -> str | None:
    """Return the canonical identity for ``path`` or ``None`` when it is empty."""

    if path is None:
        return None
    if isinstance(path, str) and not path.strip():
        return None
    return str(Path(path).expanduser().resolve())


def display_basename(identity: str) -> str:
    return Path(identity).name


@dataclass(slots=True)
class TrackedDocument:
    """A document bound to a navigation label.

    Instances are mutated in place when the label chain shifts during eviction,
    so callers that need a stable snapshot should copy them.
    """

    label: str
    identity: str

    @property
    def name(self) -> str:
        return display_basename(self.identity)
