"""Shared fixtures for licensemap tests."""

from __future__ import annotations

from typing import Any

import pytest

from licensemap.entities.core import KnowledgeSource
from licensemap.repository import InMemorySourceRepository


def make_source(
    source_id: str,
    title: str,
    tiers: list[str],
    categories: list[dict[str, Any]],
    *,
    track: str = "Enterprise",
    timestamp: int = 1_700_000_000_000,
) -> KnowledgeSource:
    return KnowledgeSource.model_validate(
        {
            "_id": source_id,
            "title": title,
            "type": track,
            "timestamp": timestamp,
            "data": {"tiers": tiers, "categories": categories},
        }
    )


def feature(name: str, description: str = "", link: str | None = None, **status: str) -> dict[str, Any]:
    payload: dict[str, Any] = {"name": name, "description": description, "status": dict(status)}
    if link is not None:
        payload["link"] = link
    return payload


@pytest.fixture()
def enterprise_doc() -> KnowledgeSource:
    return make_source(
        "ent",
        "EnterpriseDoc",
        ["E3", "E5"],
        [
            {
                "name": "Security",
                "features": [
                    feature("Microsoft Defender", "Endpoint protection", E3="Partial", E5="Full"),
                    feature("Entra ID Plan 1", "Identity", E3="Included", E5="Included"),
                    feature("Entra ID Plan 2", "Risk-based identity", E5="Included"),
                ],
            },
            {
                "name": "Productivity",
                "features": [
                    feature("Microsoft 365 Apps", "Office desktop apps", E3="Included", E5="Included"),
                ],
            },
        ],
        timestamp=1_700_000_000_000,
    )


@pytest.fixture()
def business_doc() -> KnowledgeSource:
    return make_source(
        "biz",
        "BusinessDoc",
        ["Premium"],
        [
            {
                "name": "security",
                "features": [
                    feature(
                        "Defender for Business",
                        "Endpoint protection for small and medium businesses",
                        link="https://learn.example.com/defender",
                        Premium="Included",
                    ),
                ],
            },
            {
                "name": "Device Management",
                "features": [
                    feature("Intune", "Device management", Premium="Included"),
                ],
            },
        ],
        track="Business",
        timestamp=1_700_000_500_000,
    )


@pytest.fixture()
def repository(enterprise_doc: KnowledgeSource, business_doc: KnowledgeSource) -> InMemorySourceRepository:
    return InMemorySourceRepository([enterprise_doc, business_doc])
