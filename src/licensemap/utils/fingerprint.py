"""Matching keys for category and feature labels.

Vendors render the same capability in several ways ("Microsoft 365 Defender",
"M365 Defender", "Defender for Business").  :func:`fingerprint` collapses these
renderings onto a single key so that the merger can recognise them as one
feature while keeping genuinely different features apart.

Each prefix and suffix rule is applied at most once, in declaration order, and
always before the final symbol strip because the rules anchor on ``\\s+``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Pattern, Sequence, Tuple

from licensemap.config.policies import FingerprintPolicy

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_DEFAULT_POLICY = FingerprintPolicy()


@lru_cache(maxsize=32)
def _compile(patterns: Tuple[str, ...]) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(pattern, flags=re.IGNORECASE) for pattern in patterns)


def _strip_once(text: str, rules: Sequence[Pattern[str]]) -> str:
    for rule in rules:
        text = rule.sub("", text, count=1)
    return text


def fingerprint(label: str | None, policy: FingerprintPolicy | None = None) -> str:
    """Return the canonical matching key for *label*.

    Empty or missing labels map to ``""``.
    """

    if not label:
        return ""
    rules = policy or _DEFAULT_POLICY
    working = label.strip().lower()
    working = _strip_once(working, _compile(tuple(rules.prefix_patterns)))
    working = _strip_once(working, _compile(tuple(rules.effective_suffix_patterns())))
    return _NON_ALNUM.sub("", working)


__all__ = ["fingerprint"]
