"""Ordered set of (source, tier) pairs chosen for comparison."""

from __future__ import annotations

from typing import Iterable, Iterator, List

from licensemap.entities.core import TierSelection


class ComparisonSelection:
    """Insertion-ordered selection with idempotent toggling.

    Duplicate pairs collapse on construction; :meth:`toggle` adds a missing
    pair at the end or removes it when already present.
    """

    def __init__(self, entries: Iterable[TierSelection | tuple[str, str]] = ()) -> None:
        self._entries: List[TierSelection] = []
        for entry in entries:
            self.add(entry)

    @staticmethod
    def _coerce(entry: TierSelection | tuple[str, str]) -> TierSelection:
        if isinstance(entry, TierSelection):
            return entry
        source_id, tier = entry
        return TierSelection(source_id=source_id, tier=tier)

    @classmethod
    def parse(cls, tokens: Iterable[str], *, separator: str = ":") -> "ComparisonSelection":
        """Build a selection from ``SOURCE_ID:TIER`` tokens.

        Only the first separator splits, so tier names may contain it.
        """

        entries: List[TierSelection] = []
        for token in tokens:
            source_id, sep, tier = token.partition(separator)
            if not sep or not source_id.strip() or not tier.strip():
                raise ValueError(f"selection {token!r} must look like SOURCE_ID{separator}TIER")
            entries.append(TierSelection(source_id=source_id.strip(), tier=tier.strip()))
        return cls(entries)

    def add(self, entry: TierSelection | tuple[str, str]) -> bool:
        selection = self._coerce(entry)
        if selection in self._entries:
            return False
        self._entries.append(selection)
        return True

    def remove(self, entry: TierSelection | tuple[str, str]) -> bool:
        selection = self._coerce(entry)
        if selection not in self._entries:
            return False
        self._entries.remove(selection)
        return True

    def toggle(self, source_id: str, tier: str) -> bool:
        """Flip membership of ``(source_id, tier)``; return ``True`` if now selected."""

        selection = TierSelection(source_id=source_id, tier=tier)
        if self.remove(selection):
            return False
        self._entries.append(selection)
        return True

    def discard_source(self, source_id: str) -> int:
        """Drop every entry referencing *source_id*; return how many were removed."""

        before = len(self._entries)
        self._entries = [entry for entry in self._entries if entry.source_id != source_id]
        return before - len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def is_selected(self, source_id: str, tier: str) -> bool:
        return TierSelection(source_id=source_id, tier=tier) in self._entries

    @property
    def entries(self) -> tuple[TierSelection, ...]:
        return tuple(self._entries)

    def __iter__(self) -> Iterator[TierSelection]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ComparisonSelection):
            return self._entries == other._entries
        return NotImplemented

    def __repr__(self) -> str:
        pairs = ", ".join(f"{entry.source_id}:{entry.tier}" for entry in self._entries)
        return f"ComparisonSelection([{pairs}])"


__all__ = ["ComparisonSelection"]
