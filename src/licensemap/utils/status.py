"""Mapping from free-text status labels to :class:`StatusKind`."""

from __future__ import annotations

from typing import Mapping

from licensemap.config.policies import StatusPolicy
from licensemap.entities.core import StatusKind


# Labels observed in extracted licensing documents.  Keys are lower case.
STATUS_VOCABULARY: dict[str, StatusKind] = {
    "included": StatusKind.INCLUDED,
    "full": StatusKind.INCLUDED,
    "yes": StatusKind.INCLUDED,
    "partial": StatusKind.PARTIAL,
    "limited": StatusKind.PARTIAL,
    "add-on": StatusKind.ADD_ON,
    "addon": StatusKind.ADD_ON,
    "add on": StatusKind.ADD_ON,
    "excluded": StatusKind.EXCLUDED,
    "no": StatusKind.EXCLUDED,
    "not included": StatusKind.EXCLUDED,
    "none": StatusKind.EXCLUDED,
}


def _vocabulary(policy: StatusPolicy | None) -> Mapping[str, StatusKind]:
    if policy is None or not policy.vocabulary:
        return STATUS_VOCABULARY
    merged = dict(STATUS_VOCABULARY)
    merged.update({label: StatusKind(kind) for label, kind in policy.vocabulary.items()})
    return merged


def classify_status(label: str | None, policy: StatusPolicy | None = None) -> StatusKind:
    """Return the :class:`StatusKind` for a raw status label.

    Exact vocabulary matches win.  Unknown labels fall back to substring rules:
    "included"/"yes" or exactly "full" is included, "add-on" is an add-on,
    "partial"/"limited" is partial, anything else is excluded.
    """

    text = (label or "").strip().lower()
    if not text:
        return StatusKind.EXCLUDED
    known = _vocabulary(policy).get(text)
    if known is not None:
        return known
    if "not included" in text:
        return StatusKind.EXCLUDED
    if "included" in text or "yes" in text:
        return StatusKind.INCLUDED
    if "add-on" in text or "addon" in text:
        return StatusKind.ADD_ON
    if "partial" in text or "limited" in text:
        return StatusKind.PARTIAL
    return StatusKind.EXCLUDED


def is_available(label: str | None, policy: StatusPolicy | None = None) -> bool:
    """Whether a status label denotes the feature being included in the tier."""

    return classify_status(label, policy) is StatusKind.INCLUDED


__all__ = ["STATUS_VOCABULARY", "classify_status", "is_available"]
