"""Merge engine and comparison views."""

from .export import export_matrix, matrix_records
from .merger import TaxonomyMerger, merge_taxonomies
from .selection import ComparisonSelection
from .session import ComparisonSession
from .view import (
    DetailLevel,
    ProjectedRow,
    ViewFilter,
    apply_filter,
    available_categories,
    iter_rows,
    project,
    render_cells,
)

__all__ = [
    "ComparisonSelection",
    "TaxonomyMerger",
    "merge_taxonomies",
    "DetailLevel",
    "ViewFilter",
    "ProjectedRow",
    "project",
    "apply_filter",
    "render_cells",
    "iter_rows",
    "available_categories",
    "ComparisonSession",
    "export_matrix",
    "matrix_records",
]
