import csv
import json
from pathlib import Path

import pytest

from licensemap.comparison import DetailLevel, export_matrix, matrix_records, merge_taxonomies, project
from licensemap.comparison.export import column_headers

from conftest import feature, make_source


def test_csv_export_has_one_row_per_feature(repository, tmp_path: Path) -> None:
    unified = merge_taxonomies([("ent", "E3"), ("biz", "Premium")], repository)
    projection = project(unified, categories=["Security"])
    path = export_matrix(unified, projection, tmp_path / "out" / "matrix.csv")

    with path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert [row["Feature"] for row in rows] == ["Microsoft Defender", "Entra ID Plan 1", "Entra ID Plan 2"]
    assert rows[0]["EnterpriseDoc - E3"] == "Partial"
    assert rows[0]["BusinessDoc - Premium"] == "Included"
    assert rows[0]["Link"] == "https://learn.example.com/defender"


def test_json_export_availability(repository, tmp_path: Path) -> None:
    unified = merge_taxonomies([("ent", "E3"), ("ent", "E5")], repository)
    path = export_matrix(
        unified,
        project(unified, query="defender"),
        tmp_path / "matrix.json",
        fmt="JSON",
        detail=DetailLevel.AVAILABILITY,
    )
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["tiers"] == ["EnterpriseDoc - E3", "EnterpriseDoc - E5"]
    assert payload["rows"][0]["EnterpriseDoc - E3"] is False
    assert payload["rows"][0]["EnterpriseDoc - E5"] is True


def test_duplicate_labels_get_suffixes() -> None:
    sources = {
        "one": make_source("one", "Doc", ["E3"], [{"name": "Core", "features": [feature("Teams", "", E3="Full")]}]),
        "two": make_source("two", "Doc", ["E3"], [{"name": "Core", "features": [feature("Teams", "", E3="No")]}]),
    }
    unified = merge_taxonomies([("one", "E3"), ("two", "E3")], sources)
    assert column_headers(unified) == ["Doc - E3", "Doc - E3 (2)"]
    record = matrix_records(unified, project(unified))[0]
    assert record["Doc - E3"] == "Full"
    assert record["Doc - E3 (2)"] == "No"


def test_unknown_format_rejected(repository, tmp_path: Path) -> None:
    unified = merge_taxonomies([("ent", "E3")], repository)
    with pytest.raises(ValueError):
        export_matrix(unified, project(unified), tmp_path / "matrix.xlsx", fmt="xlsx")
