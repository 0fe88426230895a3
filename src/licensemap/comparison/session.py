"""Comparison session tying selection, merge and filtered view together."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from licensemap.comparison.merger import TaxonomyMerger
from licensemap.comparison.selection import ComparisonSelection
from licensemap.comparison.view import (
    DetailLevel,
    ProjectedRow,
    ViewFilter,
    apply_filter,
    iter_rows,
)
from licensemap.config.policies import Policies
from licensemap.entities.core import TierSelection, UnifiedCategory, UnifiedTaxonomy
from licensemap.repository.base import SourceRepository
from licensemap.utils.logging import get_logger


_LOGGER = get_logger(module=__name__)


class ComparisonSession:
    """Holds the live selection and filter state for one comparison.

    The unified taxonomy is recomputed from scratch after any selection change
    (or :meth:`refresh`), and the projection after any change at all.  Results
    are cached until the next change so repeated reads are cheap.
    """

    def __init__(
        self,
        repository: SourceRepository,
        *,
        policies: Policies | None = None,
        selection: Iterable[TierSelection | tuple[str, str]] = (),
    ) -> None:
        self.repository = repository
        self.policies = policies or Policies()
        self.merger = TaxonomyMerger(self.policies)
        self.selection = ComparisonSelection(selection)
        self.view = ViewFilter()
        self._unified: UnifiedTaxonomy | None = None
        self._projection: List[UnifiedCategory] | None = None

    def _invalidate(self, *, data: bool) -> None:
        if data:
            self._unified = None
        self._projection = None

    def toggle(self, source_id: str, tier: str) -> bool:
        selected = self.selection.toggle(source_id, tier)
        self._invalidate(data=True)
        _LOGGER.debug("Toggled tier", source_id=source_id, tier=tier, selected=selected)
        return selected

    def clear(self) -> None:
        self.selection.clear()
        self._invalidate(data=True)

    def refresh(self) -> None:
        """Force recomputation, e.g. after the repository changed."""

        self._invalidate(data=True)

    def set_filters(
        self,
        *,
        query: str | None = None,
        categories: Sequence[str] | None = None,
        diff_only: bool | None = None,
        detail: DetailLevel | str | None = None,
    ) -> ViewFilter:
        self.view = self.view.with_changes(
            query=query,
            categories=categories,
            diff_only=diff_only,
            detail=detail,
        )
        self._invalidate(data=False)
        return self.view

    @property
    def unified(self) -> UnifiedTaxonomy:
        if self._unified is None:
            self._unified = self.merger.merge(self.selection, self.repository)
        return self._unified

    @property
    def projection(self) -> List[UnifiedCategory]:
        if self._projection is None:
            self._projection = apply_filter(self.unified, self.view)
        return self._projection

    def rows(self) -> List[ProjectedRow]:
        return list(
            iter_rows(
                self.unified,
                self.projection,
                self.view.detail,
                status_policy=self.policies.status,
            )
        )


__all__ = ["ComparisonSession"]
