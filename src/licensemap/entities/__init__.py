"""Domain entities for the licensing comparison engine."""

from .core import (
    Category,
    Column,
    Feature,
    FeatureOccurrence,
    KnowledgeSource,
    SourceTaxonomy,
    SourceTrack,
    StatusKind,
    TierSelection,
    UnifiedCategory,
    UnifiedFeature,
    UnifiedTaxonomy,
    column_key,
)

__all__ = [
    "StatusKind",
    "SourceTrack",
    "Feature",
    "Category",
    "SourceTaxonomy",
    "KnowledgeSource",
    "TierSelection",
    "Column",
    "FeatureOccurrence",
    "UnifiedFeature",
    "UnifiedCategory",
    "UnifiedTaxonomy",
    "column_key",
]
