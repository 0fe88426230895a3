"""Unit tests for licensemap.entities.core."""

from __future__ import annotations

from datetime import timezone

import pytest

from licensemap.entities import (
    Column,
    Feature,
    KnowledgeSource,
    SourceTaxonomy,
    SourceTrack,
    TierSelection,
    UnifiedFeature,
    UnifiedTaxonomy,
)


def test_knowledge_source_accepts_storage_document() -> None:
    source = KnowledgeSource.model_validate(
        {
            "_id": "65f0c0ffee",
            "title": " EnterpriseDoc ",
            "type": "Business",
            "timestamp": 1_700_000_000_000,
            "data": {"tiers": ["Premium"], "categories": []},
        }
    )
    assert source.id == "65f0c0ffee"
    assert source.title == "EnterpriseDoc"
    assert source.track is SourceTrack.BUSINESS
    assert source.timestamp.tzinfo is not None


def test_knowledge_source_by_field_name() -> None:
    source = KnowledgeSource(
        id="a",
        title="A",
        track=SourceTrack.ENTERPRISE,
        data=SourceTaxonomy(categories=[]),
    )
    assert source.timestamp.tzinfo == timezone.utc
    dumped = source.model_dump(mode="json")
    assert KnowledgeSource.model_validate(dumped) == source


def test_taxonomy_requires_categories() -> None:
    with pytest.raises(ValueError):
        SourceTaxonomy.model_validate({"tiers": ["E3"]})


def test_feature_requires_status_and_description() -> None:
    with pytest.raises(ValueError):
        Feature.model_validate({"name": "Teams", "description": "Chat"})
    with pytest.raises(ValueError):
        Feature.model_validate({"name": "Teams", "status": {}})


def test_feature_blank_link_is_none() -> None:
    feature = Feature(name=" Teams ", description="", link="  ", status={})
    assert feature.name == "Teams"
    assert feature.link is None


def test_find_feature_matches_display_names() -> None:
    taxonomy = SourceTaxonomy.model_validate(
        {
            "categories": [
                {"name": "Security", "features": [{"name": "Defender", "description": "", "status": {}}]}
            ]
        }
    )
    assert taxonomy.find_feature("Security", "Defender") is not None
    assert taxonomy.find_feature("Security", "defender") is None
    assert taxonomy.find_feature("Other", "Defender") is None


def test_column_key_ignores_label() -> None:
    first = Column(source_id="a", tier="E3", label="Doc - E3")
    second = Column(source_id="b", tier="E3", label="Doc - E3")
    assert first.key != second.key
    assert TierSelection(source_id="a", tier="E3").key == first.key


def test_column_key_escapes_separator() -> None:
    assert TierSelection(source_id="a::b", tier="c").key != TierSelection(source_id="a", tier="b::c").key
    assert TierSelection(source_id="a%3A", tier="b").key != TierSelection(source_id="a:", tier="b").key
    assert TierSelection(source_id="ent", tier="E3").key == "ent::E3"


def test_unified_feature_refresh_diff() -> None:
    feature = UnifiedFeature(name="X", description="", status={"a": "Full", "b": "Full"})
    assert feature.refresh_diff() is False
    feature.status["b"] = "Excluded"
    assert feature.refresh_diff() is True


def test_empty_unified_taxonomy() -> None:
    unified = UnifiedTaxonomy()
    assert unified.is_empty
    assert unified.tier_labels == []
    assert unified.feature_count() == 0
