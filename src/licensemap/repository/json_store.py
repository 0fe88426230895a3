"""Directory of JSON documents acting as the knowledge source store."""

from __future__ import annotations

import json
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Dict, Iterator, List, Set, Tuple
from urllib.parse import quote

from pydantic import ValidationError

from licensemap.entities.core import KnowledgeSource
from licensemap.repository.base import SourceNotFoundError, TaxonomyValidationError
from licensemap.repository.memory import InMemorySourceRepository
from licensemap.utils.logging import get_logger


_LOGGER = get_logger(module=__name__)


def _filename_for(source_id: str) -> str:
    """Percent-encode *source_id* so every id maps to its own visible file."""

    encoded = quote(source_id, safe="")
    if encoded.startswith("."):
        encoded = "%2E" + encoded[1:]
    return f"{encoded}.json"


def _atomic_write_json(path: Path, payload: Any) -> Path:
    """Write JSON through a temporary file before atomically replacing *path*."""

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_handle = NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    tmp_path = Path(tmp_handle.name)
    try:
        try:
            json.dump(payload, tmp_handle, indent=2, ensure_ascii=False)
            tmp_handle.write("\n")
            tmp_handle.flush()
            os.fsync(tmp_handle.fileno())
        finally:
            tmp_handle.close()
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return path


def _read_payload(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _document_id(document: Any) -> str | None:
    if not isinstance(document, dict):
        return None
    raw = document.get("id", document.get("_id"))
    return str(raw).strip() if raw is not None else None


def _remove_document(path: Path, source_id: str) -> None:
    """Drop every document with *source_id* from *path*, unlinking it when nothing remains."""

    if not path.exists():
        return
    payload = _read_payload(path)
    documents = payload if isinstance(payload, list) else [payload]
    remaining = [document for document in documents if _document_id(document) != source_id]
    if len(remaining) == len(documents):
        return
    if not remaining:
        path.unlink(missing_ok=True)
    else:
        _atomic_write_json(path, remaining)
    _LOGGER.debug("Removed document from file", path=str(path), source_id=source_id, remaining=len(remaining))


def load_documents(path: str | Path) -> Iterator[KnowledgeSource]:
    """Yield knowledge sources from a JSON file holding one document or a list."""

    source_path = Path(path)
    payload = _read_payload(source_path)
    documents = payload if isinstance(payload, list) else [payload]
    for document in documents:
        try:
            yield KnowledgeSource.model_validate(document)
        except ValidationError as exc:
            raise TaxonomyValidationError(source_path, exc) from exc


class JsonDirectorySourceRepository(InMemorySourceRepository):
    """Repository persisting one ``<id>.json`` document per knowledge source.

    Every ``*.json`` file in the directory is loaded on construction; files
    holding a JSON list (e.g. a bulk export) contribute all of their entries.
    Writes always go to the per-source file, and the source is removed from
    any other file it was loaded from so a reload sees the latest state.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self._origins: Dict[str, Set[Path]] = {}
        super().__init__()
        self.reload()

    def _path_for(self, source_id: str) -> Path:
        return self.directory / _filename_for(source_id)

    def reload(self) -> int:
        self._sources.clear()
        self._origins.clear()
        if not self.directory.exists():
            _LOGGER.debug("Source directory missing; starting empty", directory=str(self.directory))
            return 0
        loaded: List[Tuple[KnowledgeSource, Path]] = []
        for path in sorted(self.directory.glob("*.json")):
            loaded.extend((source, path) for source in load_documents(path))
        # Oldest first so that listing (newest first) follows timestamps.
        for source, path in sorted(loaded, key=lambda item: item[0].timestamp):
            super().add(source)
            self._origins.setdefault(source.id, set()).add(path)
        _LOGGER.info("Loaded knowledge sources", directory=str(self.directory), count=len(loaded))
        return len(loaded)

    def _persist(self, source: KnowledgeSource) -> None:
        target = self._path_for(source.id)
        _atomic_write_json(target, source.model_dump(mode="json"))
        for origin in self._origins.get(source.id, set()) - {target}:
            _remove_document(origin, source.id)
        self._origins[source.id] = {target}

    def add(self, source: KnowledgeSource) -> KnowledgeSource:
        self._persist(source)
        return super().add(source)

    def delete(self, source_id: str) -> KnowledgeSource:
        removed = super().delete(source_id)
        for origin in self._origins.pop(source_id, set()) | {self._path_for(source_id)}:
            _remove_document(origin, source_id)
        return removed

    def set_feature_link(
        self,
        source_id: str,
        category: str,
        feature: str,
        link: str | None,
    ) -> KnowledgeSource:
        if source_id not in self:
            raise SourceNotFoundError(source_id)
        updated = super().set_feature_link(source_id, category, feature, link)
        self._persist(updated)
        return updated


__all__ = ["JsonDirectorySourceRepository", "load_documents"]
