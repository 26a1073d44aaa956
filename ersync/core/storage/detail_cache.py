"""Per-record cache of the last known full employee snapshot.

Owned by the composition root and passed to every consumer; there is no
module-level instance. Entries are replaced whole, so a reader sees either
a complete snapshot or nothing.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from ..models.base import ERSBaseModel, utc_now
from ..models.employee import Employee
from ...observability.logger import get_logger

logger = get_logger(__name__)


class CacheEntry(ERSBaseModel):
    """Snapshot of one record and when it was fetched."""

    data: Employee
    fetched_at: datetime = Field(default_factory=utc_now)


class DetailCache:
    """Keyed store of employee snapshots with last-write-wins semantics."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def get(self, record_id: str) -> CacheEntry | None:
        """Return a copy of the cached entry, or None on a miss.

        Changes to the returned entry never reach the cache; write through
        ``put`` or ``merge``.
        """
        entry = self._entries.get(record_id)
        if entry is None:
            logger.debug("cache_miss", record_id=record_id)
            return None
        return entry.model_copy(deep=True)

    def put(self, record_id: str, data: Employee, fetched_at: datetime | None = None) -> CacheEntry:
        """Atomically replace the entry for ``record_id`` with a full snapshot."""
        entry = CacheEntry(data=data.model_copy(deep=True), fetched_at=fetched_at or utc_now())
        self._entries[record_id] = entry
        logger.debug("cache_put", record_id=record_id)
        return entry.model_copy(deep=True)

    def merge(self, record_id: str, patch: dict[str, Any]) -> CacheEntry | None:
        """Shallow-merge ``patch`` into an existing entry.

        A miss is a no-op, not an error: there is nothing to update until
        the next full fetch. ``fetched_at`` is kept because the merged data
        was not confirmed by a read.
        """
        current = self._entries.get(record_id)
        if current is None:
            logger.debug("cache_merge_skipped", record_id=record_id, reason="no_entry")
            return None
        if not patch:
            return current.model_copy(deep=True)

        merged = Employee.model_validate({**current.data.model_dump(), **patch})
        entry = CacheEntry(data=merged, fetched_at=current.fetched_at)
        self._entries[record_id] = entry
        logger.debug("cache_merged", record_id=record_id, fields=sorted(patch))
        return entry.model_copy(deep=True)

    def evict(self, record_id: str) -> None:
        self._entries.pop(record_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def snapshot(self) -> dict[str, CacheEntry]:
        """Copy of all entries (for persistence)."""
        return dict(self._entries)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
