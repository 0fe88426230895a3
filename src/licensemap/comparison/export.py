"""Export of a filtered comparison matrix to CSV or JSON."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Sequence

from licensemap.comparison.view import DetailLevel, iter_rows
from licensemap.config.policies import StatusPolicy
from licensemap.entities.core import UnifiedCategory, UnifiedTaxonomy
from licensemap.utils.logging import get_logger


_LOGGER = get_logger(module=__name__)
_FIXED_FIELDS = ("Category", "Feature", "Description", "Link")


def matrix_records(
    unified: UnifiedTaxonomy,
    projection: Sequence[UnifiedCategory],
    detail: DetailLevel = DetailLevel.FULL,
    *,
    status_policy: StatusPolicy | None = None,
) -> List[Dict[str, Any]]:
    """Flatten a projection into one record per feature row.

    Tier columns are labelled with their display label; when two columns
    share a label the later one is suffixed with ``(n)`` so no cell is lost.
    """

    headers = column_headers(unified)
    records: List[Dict[str, Any]] = []
    for row in iter_rows(unified, projection, detail, status_policy=status_policy):
        record: Dict[str, Any] = {
            "Category": row.category,
            "Feature": row.feature.name,
            "Description": row.feature.description,
            "Link": row.feature.link or "",
        }
        record.update(zip(headers, row.cells))
        records.append(record)
    return records


def column_headers(unified: UnifiedTaxonomy) -> List[str]:
    seen: Dict[str, int] = {}
    headers: List[str] = []
    for label in unified.tier_labels:
        count = seen.get(label, 0) + 1
        seen[label] = count
        headers.append(label if count == 1 else f"{label} ({count})")
    return headers


def export_matrix(
    unified: UnifiedTaxonomy,
    projection: Sequence[UnifiedCategory],
    destination: str | Path,
    *,
    fmt: str = "csv",
    detail: DetailLevel = DetailLevel.FULL,
    status_policy: StatusPolicy | None = None,
) -> Path:
    """Write the projection to *destination* as ``csv`` or ``json``."""

    fmt_normalised = fmt.lower()
    if fmt_normalised not in {"csv", "json"}:
        raise ValueError("format must be either 'csv' or 'json'")

    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    records = matrix_records(unified, projection, detail, status_policy=status_policy)

    with path.open("w", encoding="utf-8", newline="") as handle:
        if fmt_normalised == "json":
            payload = {"tiers": column_headers(unified), "rows": records}
            json.dump(payload, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
        else:
            writer = csv.DictWriter(handle, fieldnames=[*_FIXED_FIELDS, *column_headers(unified)])
            writer.writeheader()
            writer.writerows(records)

    _LOGGER.info("Exported comparison matrix", path=str(path), rows=len(records), format=fmt_normalised)
    return path


__all__ = ["matrix_records", "column_headers", "export_matrix"]
