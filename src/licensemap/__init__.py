"""Top-level package for the licensing tier comparison engine."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("licensemap")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.1.0"

from .comparison import (
    ComparisonSelection,
    ComparisonSession,
    DetailLevel,
    TaxonomyMerger,
    merge_taxonomies,
    project,
)
from .config.settings import Settings, get_settings
from .entities import (
    Category,
    Column,
    Feature,
    KnowledgeSource,
    SourceTaxonomy,
    StatusKind,
    TierSelection,
    UnifiedCategory,
    UnifiedFeature,
    UnifiedTaxonomy,
)
from .utils.fingerprint import fingerprint

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "Feature",
    "Category",
    "SourceTaxonomy",
    "KnowledgeSource",
    "TierSelection",
    "Column",
    "StatusKind",
    "UnifiedFeature",
    "UnifiedCategory",
    "UnifiedTaxonomy",
    "fingerprint",
    "ComparisonSelection",
    "ComparisonSession",
    "TaxonomyMerger",
    "merge_taxonomies",
    "DetailLevel",
    "project",
]
