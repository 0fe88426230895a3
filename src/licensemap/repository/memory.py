"""In-memory knowledge source repository."""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List

from licensemap.entities.core import KnowledgeSource, SourceTrack
from licensemap.repository.base import SourceNotFoundError, with_feature_link
from licensemap.utils.logging import get_logger


_LOGGER = get_logger(module=__name__)


class InMemorySourceRepository:
    """Dictionary-backed repository; listing returns the newest source first."""

    def __init__(self, sources: Iterable[KnowledgeSource] = ()) -> None:
        self._sources: Dict[str, KnowledgeSource] = {}
        self._lock = threading.Lock()
        for source in sources:
            self.add(source)

    def get(self, source_id: str) -> KnowledgeSource | None:
        return self._sources.get(source_id)

    def list(self, track: SourceTrack | None = None) -> List[KnowledgeSource]:
        items = list(reversed(list(self._sources.values())))
        if track is None:
            return items
        return [source for source in items if source.track == track]

    def add(self, source: KnowledgeSource) -> KnowledgeSource:
        with self._lock:
            replaced = self._sources.pop(source.id, None)
            self._sources[source.id] = source
        _LOGGER.debug("Stored knowledge source", source_id=source.id, replaced=replaced is not None)
        return source

    def delete(self, source_id: str) -> KnowledgeSource:
        with self._lock:
            try:
                removed = self._sources.pop(source_id)
            except KeyError:
                raise SourceNotFoundError(source_id) from None
        _LOGGER.info("Deleted knowledge source", source_id=source_id)
        return removed

    def set_feature_link(
        self,
        source_id: str,
        category: str,
        feature: str,
        link: str | None,
    ) -> KnowledgeSource:
        with self._lock:
            current = self._sources.get(source_id)
            if current is None:
                raise SourceNotFoundError(source_id)
            updated = with_feature_link(current, category, feature, link)
            self._sources[source_id] = updated
        _LOGGER.debug("Updated feature link", source_id=source_id, category=category, feature=feature)
        return updated

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._sources

    def __len__(self) -> int:
        return len(self._sources)


__all__ = ["InMemorySourceRepository"]
