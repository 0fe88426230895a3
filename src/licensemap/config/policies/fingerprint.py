"""Fingerprint policy models."""

from __future__ import annotations

import re
from typing import List

from pydantic import BaseModel, Field, field_validator


# Vendor-family prefixes, applied once each and in this order.  The longer
# spellings must come before their abbreviations ("microsoft 365 " before
# "microsoft ") or the shorter rule would leave a dangling "365".
DEFAULT_PREFIX_PATTERNS: tuple[str, ...] = (
    r"^microsoft\s+365\s+",
    r"^m365\s+",
    r"^office\s+365\s+",
    r"^o365\s+",
    r"^ms\s+",
    r"^microsoft\s+",
)

DEFAULT_SUFFIX_PATTERNS: tuple[str, ...] = (
    r"\s+for\s+business$",
    r"\s+for\s+enterprise$",
)

PLAN_SUFFIX_PATTERN = r"\s+plan\s+\d+$"


class FingerprintPolicy(BaseModel):
    """Rules used to derive matching keys from free-text labels."""

    prefix_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PREFIX_PATTERNS),
        description="Leading brand prefixes stripped before matching.",
    )
    suffix_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SUFFIX_PATTERNS),
        description="Trailing qualifiers stripped before matching.",
    )
    strip_plan_suffix: bool = Field(
        default=False,
        description=(
            "Strip a trailing 'plan N' qualifier. Disabled by default so that "
            "'Plan 1' and 'Plan 2' of the same product remain distinct features."
        ),
    )

    @field_validator("prefix_patterns", "suffix_patterns")
    @classmethod
    def _validate_patterns(cls, value: List[str]) -> List[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid fingerprint pattern {pattern!r}: {exc}") from exc
        return value

    def effective_suffix_patterns(self) -> List[str]:
        patterns = list(self.suffix_patterns)
        if self.strip_plan_suffix and PLAN_SUFFIX_PATTERN not in patterns:
            patterns.append(PLAN_SUFFIX_PATTERN)
        return patterns
