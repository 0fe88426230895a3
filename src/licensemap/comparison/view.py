"""Filtered, read-only projections over a unified taxonomy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Sequence

from licensemap.config.policies import StatusPolicy
from licensemap.entities.core import Column, UnifiedCategory, UnifiedFeature, UnifiedTaxonomy
from licensemap.utils.status import is_available


class DetailLevel(str, Enum):
    """How status cells are rendered; never affects which rows are shown."""

    FULL = "full"
    AVAILABILITY = "availability"


@dataclass(frozen=True)
class ViewFilter:
    """Live filter state applied by :func:`project`."""

    query: str = ""
    categories: tuple[str, ...] = ()
    diff_only: bool = False
    detail: DetailLevel = DetailLevel.FULL

    def with_changes(self, **changes) -> "ViewFilter":
        values = {
            "query": self.query,
            "categories": self.categories,
            "diff_only": self.diff_only,
            "detail": self.detail,
        }
        values.update({key: value for key, value in changes.items() if value is not None})
        values["categories"] = _as_names(values["categories"])
        values["detail"] = DetailLevel(values["detail"])
        return ViewFilter(**values)


@dataclass
class ProjectedRow:
    """One rendered feature row."""

    category: str
    feature: UnifiedFeature
    cells: List[str | bool] = field(default_factory=list)


def _as_names(categories: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(categories, str):
        return (categories,)
    return tuple(categories)


def _matches_query(feature: UnifiedFeature, needle: str) -> bool:
    if not needle:
        return True
    return needle in feature.name.lower() or needle in (feature.description or "").lower()


def project(
    unified: UnifiedTaxonomy | None,
    query: str = "",
    categories: str | Sequence[str] = (),
    diff_only: bool = False,
) -> List[UnifiedCategory]:
    """Return categories whose features pass the search, category and diff filters.

    Category order and feature order are preserved; categories left without
    features are dropped.  The input taxonomy is not modified.
    """

    if unified is None:
        return []
    allow = set(_as_names(categories))
    needle = (query or "").lower()

    result: List[UnifiedCategory] = []
    for category in unified.categories:
        if allow and category.name not in allow:
            continue
        kept = [
            feature
            for feature in category.features
            if _matches_query(feature, needle) and (not diff_only or feature.is_diff)
        ]
        if kept:
            result.append(category.model_copy(update={"features": kept}))
    return result


def apply_filter(unified: UnifiedTaxonomy | None, view: ViewFilter) -> List[UnifiedCategory]:
    return project(unified, view.query, view.categories, view.diff_only)


def render_cells(
    feature: UnifiedFeature,
    columns: Sequence[Column],
    detail: DetailLevel = DetailLevel.FULL,
    *,
    status_policy: StatusPolicy | None = None,
    missing_status: str = "Excluded",
) -> List[str | bool]:
    """Render one value per column: the raw label, or availability as a bool."""

    cells: List[str | bool] = []
    for column in columns:
        label = feature.status.get(column.key, missing_status)
        if detail is DetailLevel.AVAILABILITY:
            cells.append(is_available(label, status_policy))
        else:
            cells.append(label)
    return cells


def iter_rows(
    unified: UnifiedTaxonomy,
    projection: Sequence[UnifiedCategory],
    detail: DetailLevel = DetailLevel.FULL,
    *,
    status_policy: StatusPolicy | None = None,
) -> Iterator[ProjectedRow]:
    for category in projection:
        for feature in category.features:
            yield ProjectedRow(
                category=category.name,
                feature=feature,
                cells=render_cells(feature, unified.tiers, detail, status_policy=status_policy),
            )


def available_categories(unified: UnifiedTaxonomy | None) -> List[str]:
    """Category names offered by the category filter, in merge order."""

    return unified.category_names if unified is not None else []


__all__ = [
    "DetailLevel",
    "ViewFilter",
    "ProjectedRow",
    "project",
    "apply_filter",
    "render_cells",
    "iter_rows",
    "available_categories",
]
