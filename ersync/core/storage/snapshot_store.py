"""File-based persistence for Detail Cache entries.

Lets a short-lived process (the CLI) serve the last snapshot immediately
and then revalidate it against the backend.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .detail_cache import CacheEntry, DetailCache
from ...observability.logger import get_logger

logger = get_logger(__name__)


class SnapshotStore:
    """Simple JSON-backed store with one file per record."""

    def __init__(self, base_dir: str | Path | None = None):
        self.base_dir = Path(base_dir) if base_dir else Path("data/cache/employees")
        self.base_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------
    def _path(self, record_id: str) -> Path:
        safe_id = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in record_id)
        return self.base_dir / f"{safe_id}.json"

    def _dump(self, path: Path, data: dict[str, Any]) -> None:
        # Write then rename so a reader never sees a half-written snapshot
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp_path, path)

    def _load(self, path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    # ------------------------------------------------------------------
    # Cache entries
    # ------------------------------------------------------------------
    def save_entry(self, record_id: str, entry: CacheEntry) -> None:
        self._dump(self._path(record_id), entry.model_dump(mode="json"))

    def load_entry(self, record_id: str) -> CacheEntry | None:
        data = self._load(self._path(record_id))
        if data is None:
            return None
        try:
            return CacheEntry.model_validate(data)
        except ValidationError as exc:
            logger.warning("snapshot_unreadable", record_id=record_id, error=str(exc))
            return None

    def delete_entry(self, record_id: str) -> None:
        self._path(record_id).unlink(missing_ok=True)

    def list_record_ids(self) -> list[str]:
        return sorted(p.stem for p in self.base_dir.glob("*.json"))

    # ------------------------------------------------------------------
    # Whole-cache helpers
    # ------------------------------------------------------------------
    def warm(self, cache: DetailCache, record_id: str) -> CacheEntry | None:
        """Load one persisted snapshot into ``cache``."""
        entry = self.load_entry(record_id)
        if entry is not None:
            cache.put(record_id, entry.data, fetched_at=entry.fetched_at)
        return entry

    def persist(self, cache: DetailCache) -> int:
        """Write every cached entry to disk; returns the number written."""
        entries = cache.snapshot()
        for record_id, entry in entries.items():
            self.save_entry(record_id, entry)
        return len(entries)
