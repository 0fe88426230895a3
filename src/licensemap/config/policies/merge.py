"""Merge and status policy models."""

from __future__ import annotations

from typing import Dict, Literal

from pydantic import BaseModel, Field, field_validator


StatusKindName = Literal["Included", "Partial", "Excluded", "AddOn"]


class MergePolicy(BaseModel):
    """Controls how occurrences are folded into unified features."""

    missing_status: str = Field(
        default="Excluded",
        min_length=1,
        description="Status written for columns where a tier has no matching feature.",
    )
    description_strategy: Literal["longest", "first"] = Field(
        default="longest",
        description=(
            "'longest' replaces the running description with any strictly longer "
            "occurrence; 'first' keeps the first-seen description."
        ),
    )
    column_separator: str = Field(
        default=" - ",
        description="Separator placed between source title and tier in column labels.",
    )


class StatusPolicy(BaseModel):
    """Vocabulary extensions for status classification."""

    vocabulary: Dict[str, StatusKindName] = Field(
        default_factory=dict,
        description="Additional raw status labels mapped to a status kind.",
    )

    @field_validator("vocabulary", mode="before")
    @classmethod
    def _normalize_keys(cls, value: Dict[str, str] | None) -> Dict[str, str]:
        if value is None:
            return {}
        normalized: Dict[str, str] = {}
        for raw_label, kind in dict(value).items():
            label = str(raw_label).strip().lower()
            if not label:
                raise ValueError("status vocabulary keys must be non-empty strings")
            normalized[label] = kind
        return normalized
