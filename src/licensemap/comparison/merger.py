"""Semantic merge of several (source, tier) taxonomies into one."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Protocol, Tuple

from licensemap.comparison.selection import ComparisonSelection
from licensemap.config.policies import Policies
from licensemap.entities.core import (
    Column,
    Feature,
    FeatureOccurrence,
    KnowledgeSource,
    TierSelection,
    UnifiedCategory,
    UnifiedFeature,
    UnifiedTaxonomy,
)
from licensemap.utils.fingerprint import fingerprint
from licensemap.utils.logging import get_logger


_LOGGER = get_logger(module=__name__)


class SourceLookup(Protocol):
    """Anything that resolves a source id, e.g. a dict or a repository."""

    def get(self, source_id: str) -> Any: ...


@dataclass(frozen=True)
class ResolvedColumn:
    column: Column
    source: KnowledgeSource


class TaxonomyMerger:
    """Fold the taxonomies behind a selection into a :class:`UnifiedTaxonomy`.

    The merger is stateless between calls; every call allocates fresh output
    and never mutates the source taxonomies it reads.
    """

    def __init__(self, policies: Policies | None = None) -> None:
        self.policies = policies or Policies()

    @property
    def missing_status(self) -> str:
        return self.policies.merge.missing_status

    def _fingerprint(self, label: str) -> str:
        return fingerprint(label, self.policies.fingerprint)

    @staticmethod
    def _coerce_source(source: Any) -> KnowledgeSource:
        if isinstance(source, KnowledgeSource):
            return source
        return KnowledgeSource.model_validate(source)

    def resolve_columns(
        self,
        selection: Iterable[TierSelection],
        lookup: SourceLookup,
    ) -> List[ResolvedColumn]:
        """Build columns in selection order, dropping unresolvable sources."""

        separator = self.policies.merge.column_separator
        resolved: List[ResolvedColumn] = []
        for entry in selection:
            raw = lookup.get(entry.source_id)
            if raw is None:
                _LOGGER.debug(
                    "Dropping unresolved selection entry",
                    source_id=entry.source_id,
                    tier=entry.tier,
                )
                continue
            source = self._coerce_source(raw)
            column = Column(
                source_id=entry.source_id,
                tier=entry.tier,
                label=f"{source.title}{separator}{entry.tier}",
            )
            resolved.append(ResolvedColumn(column=column, source=source))
        return resolved

    def _new_feature(self, feature: Feature, key: str, column_keys: List[str]) -> UnifiedFeature:
        return UnifiedFeature(
            name=feature.name,
            description=feature.description,
            link=feature.link,
            status={column_key: self.missing_status for column_key in column_keys},
            fingerprint=key,
        )

    def _enrich(self, unified: UnifiedFeature, feature: Feature) -> None:
        if not unified.link and feature.link:
            unified.link = feature.link
        if (
            self.policies.merge.description_strategy == "longest"
            and len(feature.description) > len(unified.description or "")
        ):
            unified.description = feature.description

    def _fold_category(
        self,
        target: UnifiedCategory,
        index: Dict[str, UnifiedFeature],
        category_name: str,
        features: Iterable[Feature],
        column: Column,
        column_keys: List[str],
    ) -> None:
        for feature in features:
            key = self._fingerprint(feature.name)
            unified = index.get(key)
            if unified is None:
                unified = self._new_feature(feature, key, column_keys)
                index[key] = unified
                target.features.append(unified)
            self._enrich(unified, feature)
            unified.status[column.key] = feature.status.get(column.tier) or self.missing_status
            unified.occurrences.append(
                FeatureOccurrence(
                    source_id=column.source_id,
                    tier=column.tier,
                    category=category_name,
                    feature=feature.name,
                )
            )
            unified.refresh_diff()

    def merge(
        self,
        selection: ComparisonSelection | Iterable[TierSelection | Tuple[str, str]],
        lookup: SourceLookup,
    ) -> UnifiedTaxonomy:
        """Merge every resolvable selection entry, in selection order.

        An empty or fully unresolvable selection yields an empty taxonomy.
        """

        if not isinstance(selection, ComparisonSelection):
            selection = ComparisonSelection(selection)
        resolved = self.resolve_columns(selection, lookup)
        if not resolved:
            return UnifiedTaxonomy()

        # Columns are fixed before any feature is created so that every new
        # feature starts with a complete status mapping.
        columns = [item.column for item in resolved]
        column_keys = [column.key for column in columns]

        categories: Dict[str, UnifiedCategory] = {}
        feature_index: Dict[str, Dict[str, UnifiedFeature]] = {}
        for item in resolved:
            for category in item.source.data.categories:
                cat_key = self._fingerprint(category.name)
                target = categories.get(cat_key)
                if target is None:
                    target = UnifiedCategory(name=category.name, fingerprint=cat_key)
                    categories[cat_key] = target
                    feature_index[cat_key] = {}
                self._fold_category(
                    target,
                    feature_index[cat_key],
                    category.name,
                    category.features,
                    item.column,
                    column_keys,
                )

        unified = UnifiedTaxonomy(tiers=columns, categories=list(categories.values()))
        _LOGGER.debug(
            "Merged comparison selection",
            requested=len(selection),
            columns=len(columns),
            categories=len(unified.categories),
            features=unified.feature_count(),
        )
        return unified


def merge_taxonomies(
    selection: ComparisonSelection | Iterable[TierSelection | Tuple[str, str]],
    lookup: SourceLookup | Mapping[str, Any],
    *,
    policies: Policies | None = None,
) -> UnifiedTaxonomy:
    """Functional wrapper around :meth:`TaxonomyMerger.merge`."""

    return TaxonomyMerger(policies).merge(selection, lookup)


__all__ = ["TaxonomyMerger", "ResolvedColumn", "SourceLookup", "merge_taxonomies"]
