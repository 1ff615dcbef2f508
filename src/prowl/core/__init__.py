"""Label assignment and display-state engine internals."""

from .document_model import TrackedDocument, normalize_identity
from .labels import Allocation, LabelRegistry
from .render_cache import RenderCache, RenderedLine
from .tracking import CloseSummary, DocumentTrackingStore

__all__ = [
    "Allocation",
    "CloseSummary",
    "DocumentTrackingStore",
    "LabelRegistry",
    "RenderCache",
    "RenderedLine",
    "TrackedDocument",
    "normalize_identity",
]
