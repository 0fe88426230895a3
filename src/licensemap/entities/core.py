"""Core domain entities used throughout the comparison engine."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


COLUMN_KEY_SEPARATOR = "::"


class StatusKind(str, Enum):
    """Closed set of availability states a tier can assign to a feature."""

    INCLUDED = "Included"
    PARTIAL = "Partial"
    EXCLUDED = "Excluded"
    ADD_ON = "AddOn"


class SourceTrack(str, Enum):
    """Product track a knowledge source was ingested under."""

    ENTERPRISE = "Enterprise"
    BUSINESS = "Business"


class Feature(BaseModel):
    """A licensable capability together with its per-tier status labels."""

    name: str = Field(..., min_length=1)
    description: str = Field(..., description="Free-text description; may be empty.")
    link: str | None = Field(default=None, description="Documentation URL, if known.")
    status: Dict[str, str] = Field(
        ...,
        description="Raw status label keyed by tier name (or column key once unified).",
    )

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("feature names must contain non-whitespace characters")
        return cleaned

    @field_validator("link")
    @classmethod
    def _blank_link_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


class Category(BaseModel):
    """Named group of features in declared order."""

    name: str = Field(..., min_length=1)
    features: List[Feature] = Field(default_factory=list)


class SourceTaxonomy(BaseModel):
    """Category/feature tree extracted from one knowledge source."""

    tiers: List[str] = Field(default_factory=list)
    categories: List[Category]

    def find_feature(self, category: str, feature: str) -> Feature | None:
        """Return the first feature matching both display names exactly."""

        for cat in self.categories:
            if cat.name != category:
                continue
            for feat in cat.features:
                if feat.name == feature:
                    return feat
        return None


class KnowledgeSource(BaseModel):
    """An ingested licensing document and its extracted taxonomy.

    Documents produced by the storage layer carry Mongo-style ``_id`` and
    ``type`` keys; both are accepted on input and exposed as :attr:`id` and
    :attr:`track`.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, validation_alias=AliasChoices("id", "_id"))
    title: str = Field(..., min_length=1)
    track: SourceTrack = Field(
        default=SourceTrack.ENTERPRISE,
        validation_alias=AliasChoices("track", "type"),
    )
    data: SourceTaxonomy
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("id", "title")
    @classmethod
    def _strip(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("identifiers and titles must contain non-whitespace characters")
        return cleaned

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def _escape_key_part(part: str) -> str:
    return part.replace("%", "%25").replace(":", "%3A")


def column_key(source_id: str, tier: str) -> str:
    """Return the internal lookup key for a (source, tier) pair.

    Colons inside either part are escaped so distinct pairs never share a key.
    """

    return f"{_escape_key_part(source_id)}{COLUMN_KEY_SEPARATOR}{_escape_key_part(tier)}"


class TierSelection(BaseModel):
    """One selected (source, tier) pair."""

    model_config = ConfigDict(frozen=True)

    source_id: str = Field(..., min_length=1)
    tier: str = Field(..., min_length=1)

    @property
    def key(self) -> str:
        return column_key(self.source_id, self.tier)


class Column(BaseModel):
    """A comparison column; ``label`` is for display only, ``key`` is for lookups."""

    model_config = ConfigDict(frozen=True)

    source_id: str
    tier: str
    label: str

    @property
    def key(self) -> str:
        return column_key(self.source_id, self.tier)


class FeatureOccurrence(BaseModel):
    """Provenance of one source feature folded into a unified feature."""

    source_id: str
    tier: str
    category: str
    feature: str


class UnifiedFeature(Feature):
    """Feature merged across columns; ``status`` is keyed by column key."""

    fingerprint: str = ""
    is_diff: bool = False
    occurrences: List[FeatureOccurrence] = Field(default_factory=list)

    def refresh_diff(self) -> bool:
        self.is_diff = len(set(self.status.values())) > 1
        return self.is_diff


class UnifiedCategory(BaseModel):
    """Category merged across columns, keyed on its fingerprint."""

    name: str
    fingerprint: str = ""
    features: List[UnifiedFeature] = Field(default_factory=list)


class UnifiedTaxonomy(BaseModel):
    """Merged, deduplicated category/feature tree spanning all selected columns."""

    tiers: List[Column] = Field(default_factory=list)
    categories: List[UnifiedCategory] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tiers and not self.categories

    @property
    def tier_labels(self) -> List[str]:
        return [column.label for column in self.tiers]

    @property
    def column_keys(self) -> List[str]:
        return [column.key for column in self.tiers]

    @property
    def category_names(self) -> List[str]:
        return [category.name for category in self.categories]

    def feature_count(self) -> int:
        return sum(len(category.features) for category in self.categories)


__all__ = [
    "COLUMN_KEY_SEPARATOR",
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
