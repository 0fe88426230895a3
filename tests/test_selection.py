import pytest

from licensemap.comparison import ComparisonSelection
from licensemap.entities import TierSelection


def test_toggle_adds_then_removes() -> None:
    selection = ComparisonSelection()
    assert selection.toggle("ent", "E3") is True
    assert selection.toggle("biz", "Premium") is True
    assert [entry.key for entry in selection] == ["ent::E3", "biz::Premium"]

    assert selection.toggle("ent", "E3") is False
    assert selection.entries == (TierSelection(source_id="biz", tier="Premium"),)


def test_double_toggle_restores_state() -> None:
    selection = ComparisonSelection([("ent", "E3"), ("ent", "E5")])
    before = ComparisonSelection(selection)
    selection.toggle("biz", "Premium")
    selection.toggle("biz", "Premium")
    assert selection == before


def test_duplicates_collapse() -> None:
    selection = ComparisonSelection([("ent", "E3"), ("ent", "E3"), ("ent", "E5")])
    assert len(selection) == 2
    assert selection.add(("ent", "E5")) is False


def test_parse_tokens() -> None:
    selection = ComparisonSelection.parse(["ent:E3", "biz:Business Premium", "x:Plan:A"])
    assert [(entry.source_id, entry.tier) for entry in selection] == [
        ("ent", "E3"),
        ("biz", "Business Premium"),
        ("x", "Plan:A"),
    ]


@pytest.mark.parametrize("token", ["ent", "ent:", ":E3"])
def test_parse_rejects_malformed(token: str) -> None:
    with pytest.raises(ValueError):
        ComparisonSelection.parse([token])


def test_discard_source_and_clear() -> None:
    selection = ComparisonSelection([("ent", "E3"), ("biz", "Premium"), ("ent", "E5")])
    assert selection.discard_source("ent") == 2
    assert selection.is_selected("biz", "Premium")
    selection.clear()
    assert not selection
