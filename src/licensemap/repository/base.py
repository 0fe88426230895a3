"""Repository interface for knowledge sources."""

from __future__ import annotations

from pathlib import Path
from typing import List, Protocol, runtime_checkable

from pydantic import ValidationError

from licensemap.entities.core import KnowledgeSource, SourceTrack


class SourceNotFoundError(KeyError):
    """Raised when an explicit repository operation targets an unknown source."""


class FeatureNotFoundError(KeyError):
    """Raised when a link edit targets a category/feature pair that does not exist."""


class TaxonomyValidationError(ValueError):
    """A stored document violates the extracted taxonomy contract."""

    def __init__(self, origin: str | Path, error: ValidationError) -> None:
        self.origin = str(origin)
        self.error = error
        super().__init__(f"Invalid knowledge source in {self.origin}: {error}")


@runtime_checkable
class SourceRepository(Protocol):
    """Storage boundary for knowledge sources.

    Stored sources are immutable snapshots: edits replace the stored object
    with an updated copy instead of mutating it in place.
    """

    def get(self, source_id: str) -> KnowledgeSource | None: ...

    def list(self, track: SourceTrack | None = None) -> List[KnowledgeSource]: ...

    def add(self, source: KnowledgeSource) -> KnowledgeSource: ...

    def delete(self, source_id: str) -> KnowledgeSource: ...

    def set_feature_link(
        self,
        source_id: str,
        category: str,
        feature: str,
        link: str | None,
    ) -> KnowledgeSource: ...


def with_feature_link(
    source: KnowledgeSource,
    category: str,
    feature: str,
    link: str | None,
) -> KnowledgeSource:
    """Return a deep copy of *source* with one feature's link replaced."""

    updated = source.model_copy(deep=True)
    target = updated.data.find_feature(category, feature)
    if target is None:
        raise FeatureNotFoundError(f"{source.id}: no feature {feature!r} in category {category!r}")
    target.link = (link or "").strip() or None
    return updated


__all__ = [
    "SourceRepository",
    "SourceNotFoundError",
    "FeatureNotFoundError",
    "TaxonomyValidationError",
    "with_feature_link",
]
